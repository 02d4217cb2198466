"""Pure editing operations over filter ASTs.

Every function returns a new value and leaves its inputs untouched, so the
simple chip list and the advanced panel can read the same filter safely.
"""

from typing import Any, Iterable, List, Optional

from view_filters.models.field import FieldDefinition
from view_filters.models.filter_types import (
    AdvancedFilter,
    Condition,
    FilterGroup,
    NoValue,
    RangeValue,
    RelativeValue,
    SingleValue,
    generate_id,
)
from view_filters.models.operators import OperatorDescriptor, default_operator
from view_filters.models.types import LogicalOperator

__all__ = [
    "add_condition",
    "add_group",
    "add_simple_filter",
    "clear_filter",
    "create_empty_condition",
    "create_empty_filter",
    "create_empty_group",
    "expand",
    "flatten",
    "generate_id",
    "initial_operand",
    "remove_condition",
    "remove_group",
    "remove_simple_filter",
    "select_field",
    "select_operator",
    "set_global_logical_operator",
    "to_simple_filters",
    "toggle_logical_operator",
    "update_condition",
    "update_simple_filter",
]


def create_empty_condition() -> Condition:
    return Condition(id=generate_id())


def create_empty_group() -> FilterGroup:
    """A group holding one blank condition so the editor always has a row to render."""
    return FilterGroup(id=generate_id(), logical_operator=LogicalOperator.AND, conditions=[create_empty_condition()])


def create_empty_filter() -> AdvancedFilter:
    return AdvancedFilter(groups=[create_empty_group()], global_logical_operator=LogicalOperator.AND)


def clear_filter() -> AdvancedFilter:
    return create_empty_filter()


def _replace_group(advanced_filter: AdvancedFilter, group_id: str, **updates: Any) -> AdvancedFilter:
    groups = [group.model_copy(update=updates) if group.id == group_id else group for group in advanced_filter.groups]
    return advanced_filter.model_copy(update={"groups": groups})


def add_group(advanced_filter: AdvancedFilter) -> AdvancedFilter:
    return advanced_filter.model_copy(update={"groups": [*advanced_filter.groups, create_empty_group()]})


def remove_group(advanced_filter: AdvancedFilter, group_id: str) -> AdvancedFilter:
    groups = [group for group in advanced_filter.groups if group.id != group_id]
    return advanced_filter.model_copy(update={"groups": groups})


def add_condition(advanced_filter: AdvancedFilter, group_id: str, condition: Optional[Condition] = None) -> AdvancedFilter:
    """Append a condition (a blank one by default) to a top-level group."""
    group = advanced_filter.get_group(group_id)
    if group is None:
        return advanced_filter
    new_condition = condition or create_empty_condition()
    return _replace_group(advanced_filter, group_id, conditions=[*group.conditions, new_condition])


def update_condition(advanced_filter: AdvancedFilter, group_id: str, condition_id: str, **updates: Any) -> AdvancedFilter:
    """Replace fields of one condition, e.g. ``value="acme"`` or ``operator="contains"``."""
    group = advanced_filter.get_group(group_id)
    if group is None:
        return advanced_filter
    conditions = [
        _apply_updates(condition, updates) if condition.id == condition_id else condition for condition in group.conditions
    ]
    return _replace_group(advanced_filter, group_id, conditions=conditions)


def remove_condition(advanced_filter: AdvancedFilter, group_id: str, condition_id: str) -> AdvancedFilter:
    group = advanced_filter.get_group(group_id)
    if group is None:
        return advanced_filter
    conditions = [condition for condition in group.conditions if condition.id != condition_id]
    return _replace_group(advanced_filter, group_id, conditions=conditions)


def toggle_logical_operator(advanced_filter: AdvancedFilter, group_id: str) -> AdvancedFilter:
    """Flip a group's AND/OR. The operator is group-wide, whichever connector was clicked."""
    group = advanced_filter.get_group(group_id)
    if group is None:
        return advanced_filter
    flipped = LogicalOperator.OR if group.logical_operator == LogicalOperator.AND else LogicalOperator.AND
    return _replace_group(advanced_filter, group_id, logical_operator=flipped)


def set_global_logical_operator(advanced_filter: AdvancedFilter, logical_operator: LogicalOperator) -> AdvancedFilter:
    return advanced_filter.model_copy(update={"global_logical_operator": LogicalOperator(logical_operator)})


def _apply_updates(condition: Condition, updates: dict) -> Condition:
    # Round-trip through validation so wire aliases and raw strings are accepted
    data = condition.model_dump()
    data.update(updates)
    return Condition.model_validate(data)


def initial_operand(descriptor: OperatorDescriptor):
    """The value shape a freshly chosen operator starts with.

    Operators flagged as taking no value start empty; ranges start with both
    bounds unset; relative dates start without a period; everything else starts
    with an empty string for the user to fill in.
    """
    if descriptor.requires_period:
        return RelativeValue(period="")
    if descriptor.requires_range:
        return RangeValue()
    if not descriptor.requires_value:
        return NoValue()
    return SingleValue(value="")


def select_field(condition: Condition, field: FieldDefinition) -> Condition:
    """Point a condition at a new field, resetting it to that field's default operator."""
    descriptor = default_operator(field.type)
    updated = condition.model_copy(update={"field": field.field, "operator": descriptor.value.value})
    return updated.with_operand(initial_operand(descriptor))


def select_operator(condition: Condition, descriptor: OperatorDescriptor) -> Condition:
    """Switch operator, clearing any value that belonged to the previous one."""
    updated = condition.model_copy(update={"operator": descriptor.value.value})
    return updated.with_operand(initial_operand(descriptor))


def flatten(advanced_filter: AdvancedFilter) -> List[Condition]:
    """Every condition of every top-level group, nested groups' conditions included."""
    return list(advanced_filter.iter_conditions())


def to_simple_filters(advanced_filter: AdvancedFilter) -> List[Condition]:
    """Flatten and drop rows the user left without a field."""
    return [condition for condition in flatten(advanced_filter) if not condition.is_blank]


def expand(conditions: Iterable[Condition]) -> AdvancedFilter:
    """Wrap a flat list into one AND group under an AND root.

    An empty list still yields one blank condition so the editor has a row to render.
    """
    conditions = list(conditions)
    group = FilterGroup(
        id=generate_id(),
        logical_operator=LogicalOperator.AND,
        conditions=conditions or [create_empty_condition()],
    )
    return AdvancedFilter(groups=[group], global_logical_operator=LogicalOperator.AND)


def add_simple_filter(filters: List[Condition], field: FieldDefinition) -> List[Condition]:
    """Append a chip for ``field`` initialised with its default operator."""
    return [*filters, select_field(create_empty_condition(), field)]


def update_simple_filter(filters: List[Condition], condition_id: str, **updates: Any) -> List[Condition]:
    return [_apply_updates(condition, updates) if condition.id == condition_id else condition for condition in filters]


def remove_simple_filter(filters: List[Condition], condition_id: str) -> List[Condition]:
    return [condition for condition in filters if condition.id != condition_id]
