"""View query models: persisted view filters plus free-text search."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from view_filters.compiler import advanced_filter_to_predicate, build_search_predicate, combine
from view_filters.exceptions import InvalidOperandError, InvalidOperatorError, UnknownFieldError
from view_filters.models.field import FieldCatalog
from view_filters.models.filter_types import (
    AdvancedFilter,
    Condition,
    FilterGroup,
    NoValue,
    RangeValue,
    RelativeValue,
    SingleValue,
)
from view_filters.models.operators import find_operator
from view_filters.models.types import RelativePeriod
from view_filters.utils.logging import logger


def _load_group(raw_group: Any) -> FilterGroup:
    # Validate one level at a time so nesting depth is not bounded by the validator's recursion limit
    built: Dict[int, FilterGroup] = {}
    stack = [(raw_group, False)]
    while stack:
        node, children_done = stack.pop()
        children = node.get("groups") if isinstance(node, dict) else None
        if not children_done:
            stack.append((node, True))
            if isinstance(children, list):
                stack.extend((child, False) for child in reversed(children))
            continue
        if not isinstance(node, dict) or (children is not None and not isinstance(children, list)):
            # Let validation report the malformed node
            built[id(node)] = FilterGroup.model_validate(node)
            continue
        group = FilterGroup.model_validate({**node, "groups": []})
        built[id(node)] = group.model_copy(update={"groups": [built[id(child)] for child in children or []]})
    return built[id(raw_group)]


def _load_advanced_filter(raw: Dict[str, Any]) -> AdvancedFilter:
    groups = raw.get("groups")
    if not isinstance(groups, list):
        return AdvancedFilter.model_validate(raw)
    advanced_filter = AdvancedFilter.model_validate({**raw, "groups": []})
    return advanced_filter.model_copy(update={"groups": [_load_group(group) for group in groups]})


def load_view_filters(raw: Any) -> AdvancedFilter:
    """Read the ``filters`` attribute of a view record.

    Accepts the advanced dict shape, the legacy flat list of conditions and
    ``None``. Anything malformed is logged and read as an inactive filter, so a
    corrupted view still opens.
    """
    if raw is None:
        return AdvancedFilter()
    try:
        if isinstance(raw, list):
            conditions = [Condition.model_validate(item) for item in raw]
            if not conditions:
                return AdvancedFilter()
            return AdvancedFilter.model_validate(
                {"groups": [{"logicalOperator": "and", "conditions": conditions}], "globalLogicalOperator": "and"}
            )
        if isinstance(raw, dict):
            return _load_advanced_filter(raw)
    except ValidationError as e:
        logger.warning(f"Ignoring malformed view filters: {e.error_count()} validation error(s)")
        return AdvancedFilter()
    logger.warning(f"Ignoring view filters of unexpected type {type(raw).__name__}")
    return AdvancedFilter()


def _prune_group(group: FilterGroup) -> Optional[FilterGroup]:
    """Copy of ``group`` without blank rows at any depth, None when nothing is left."""
    pruned: Dict[int, Optional[FilterGroup]] = {}
    stack = [(group, False)]
    while stack:
        node, children_done = stack.pop()
        if not children_done:
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.groups))
            continue
        conditions = [condition for condition in node.conditions if not condition.is_blank]
        groups = [pruned[id(child)] for child in node.groups if pruned[id(child)] is not None]
        if not conditions and not groups:
            pruned[id(node)] = None
        else:
            pruned[id(node)] = node.model_copy(update={"conditions": conditions, "groups": groups})
    return pruned[id(group)]


def dump_view_filters(advanced_filter: AdvancedFilter) -> Optional[Dict[str, Any]]:
    """Wire shape to persist on a view, or None when the filter is inactive.

    Rows the user left without a field are dropped at every depth, and so are
    groups left with nothing in them.
    """
    if not advanced_filter.is_active:
        return None
    groups = [pruned for pruned in map(_prune_group, advanced_filter.groups) if pruned is not None]
    return advanced_filter.model_copy(update={"groups": groups}).to_wire()


class ViewQuery(BaseModel):
    """Everything needed to build the record query behind one view.

    The structured filter and the free-text search are compiled separately and
    then ANDed together.
    """

    filters: AdvancedFilter = Field(default_factory=AdvancedFilter, description="Advanced filter of the view")
    search: Optional[str] = Field(default=None, description="Free-text search typed in the view header")
    search_fields: List[str] = Field(default_factory=list, description="Fields the free-text search matches on")
    field_path: str = Field(default="", description="Prefix for every filtered field, e.g. 'data'")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "filters": {
                        "globalLogicalOperator": "and",
                        "groups": [
                            {
                                "id": "g1",
                                "logicalOperator": "and",
                                "conditions": [
                                    {"id": "c1", "field": "status", "operator": "equals", "value": "active"},
                                    {"id": "c2", "field": "age", "operator": "between", "valueFrom": 30, "valueTo": 40},
                                ],
                            }
                        ],
                    },
                    "search": "acme",
                    "search_fields": ["firstName", "lastName", "email"],
                }
            ]
        }
    }

    @classmethod
    def from_view(cls, raw_filters: Any, search: Optional[str] = None, search_fields: Optional[List[str]] = None) -> "ViewQuery":
        return cls(filters=load_view_filters(raw_filters), search=search, search_fields=search_fields or [])

    def to_filter_dict(self, now: Optional[datetime] = None, catalog: Optional[FieldCatalog] = None) -> Dict[str, Any]:
        """Convert filters and search to a single MongoDB filter dictionary."""
        filter_predicate = advanced_filter_to_predicate(self.filters, now=now, catalog=catalog, field_path=self.field_path)
        search_fields = [f"{self.field_path}.{field}" if self.field_path else field for field in self.search_fields]
        return combine(filter_predicate, build_search_predicate(self.search, search_fields))

    def validate_with_catalog(self, catalog: FieldCatalog) -> None:
        """Strictly check every non-blank condition against a field catalog.

        Compilation never needs this; it is for rejecting bad input at write time.

        Raises:
            UnknownFieldError: A condition targets a field missing from the catalog
            InvalidOperatorError: An operator is not legal for the field's type
            InvalidOperandError: A condition's value shape does not fit its operator
        """
        for condition in self.filters.iter_conditions():
            if condition.is_blank:
                continue
            self._validate_condition(condition, catalog)

    def _validate_condition(self, condition: Condition, catalog: FieldCatalog) -> None:
        if catalog.find(condition.field) is None:
            raise UnknownFieldError(f"Filter field '{condition.field}' not found in catalog")

        field_type = catalog.field_type(condition.field)
        descriptor = find_operator(field_type, condition.operator)
        if descriptor is None:
            raise InvalidOperatorError(f"Operator '{condition.operator}' not valid for field type '{field_type.value}'")

        operand = condition.operand
        if descriptor.requires_range:
            expected = RangeValue
        elif descriptor.requires_period:
            expected = RelativeValue
        elif descriptor.requires_value:
            expected = SingleValue
        else:
            expected = NoValue
        if not isinstance(operand, expected):
            raise InvalidOperandError(
                f"Condition on '{condition.field}' with operator '{condition.operator}' expects a {expected.__name__}"
            )
        if isinstance(operand, RelativeValue) and operand.period not in {period.value for period in RelativePeriod}:
            raise InvalidOperandError(f"Unknown relative period '{operand.period}'")

