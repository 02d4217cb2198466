"""Compile advanced filters into MongoDB filter documents.

Every function here is fail-soft: an empty, unknown or malformed condition
compiles to the identity fragment ``{}`` and is dropped by its parent, so one
bad condition never breaks a whole query.
"""

import math
import re
from datetime import date, datetime, time
from typing import Any, Callable, Dict, List, Optional, Union

from dateutil import parser as date_parser
from pytz import timezone

from view_filters.config import settings
from view_filters.date_range import DateRange, resolve_period
from view_filters.models.field import FieldCatalog
from view_filters.models.filter_types import (
    AdvancedFilter,
    Condition,
    FilterGroup,
    RangeValue,
    RelativeValue,
    SingleValue,
)
from view_filters.models.types import DATE_SHORTCUT_PERIODS, FieldType, FilterOperator, LogicalOperator
from view_filters.utils.logging import logger

Predicate = Dict[str, Any]
Number = Union[int, float]

# Fills the parts a partial date leaves out, so "2024" is 2024-01-01 whatever today is
DEFAULT_DATE = datetime(2000, 1, 1)

LOGICAL_OPERATOR_MAP = {
    LogicalOperator.AND: "$and",
    LogicalOperator.OR: "$or",
}


class CompileContext:
    """Per-compilation state shared by every condition of one filter."""

    def __init__(self, field_path: str = "", now: Optional[datetime] = None, catalog: Optional[FieldCatalog] = None):
        self.field_path = field_path
        self.now = now or datetime.now(timezone(settings.timezone))
        self.catalog = catalog

    def path(self, field: str) -> str:
        return f"{self.field_path}.{field}" if self.field_path else field

    def field_type(self, field: str) -> Optional[FieldType]:
        if self.catalog is None:
            return None
        definition = self.catalog.find(field)
        return definition.type if definition else None


# Value coercion


def to_number(value: Any) -> Optional[Number]:
    """Coerce a value to an int or float, None when it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def to_datetime(value: Any) -> Optional[datetime]:
    """Coerce a value to a datetime, None when it cannot be parsed."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str) and value.strip():
        try:
            return date_parser.parse(value.strip(), default=DEFAULT_DATE)
        except (ValueError, OverflowError):
            return None
    return None


def to_boolean(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return None


def coerce_value(value: Any, field_type: Optional[FieldType]) -> Any:
    """Convert an equality operand to the field's declared type when it can.

    Values that do not convert are returned unchanged.
    """
    if isinstance(value, list):
        return [coerce_value(item, field_type) for item in value]
    converter = {
        FieldType.NUMBER: to_number,
        FieldType.DATE: to_datetime,
        FieldType.BOOLEAN: to_boolean,
    }.get(field_type)
    if converter is None:
        return value
    converted = converter(value)
    return value if converted is None else converted


def _single_value(condition: Condition) -> Optional[Any]:
    operand = condition.operand
    if not isinstance(operand, SingleValue):
        return None
    # A value the user has not typed yet places no constraint
    if isinstance(operand.value, str) and not operand.value.strip():
        return None
    return operand.value


def _range_values(condition: Condition) -> Optional[RangeValue]:
    operand = condition.operand
    return operand if isinstance(operand, RangeValue) else None


def _regex(pattern: str) -> Predicate:
    return {"$regex": pattern, "$options": settings.regex_options}


# Operator builders


def _equality(mongo_operator: str) -> Callable[[Condition, CompileContext], Predicate]:
    def build(condition: Condition, ctx: CompileContext) -> Predicate:
        value = _single_value(condition)
        if value is None:
            return {}
        value = coerce_value(value, ctx.field_type(condition.field))
        return {ctx.path(condition.field): {mongo_operator: value}}

    return build


def _text_match(template: str, negate: bool = False) -> Callable[[Condition, CompileContext], Predicate]:
    def build(condition: Condition, ctx: CompileContext) -> Predicate:
        value = _single_value(condition)
        if value is None:
            return {}
        expression = _regex(template.format(re.escape(str(value))))
        if negate:
            expression = {"$not": expression}
        return {ctx.path(condition.field): expression}

    return build


def _is_empty(condition: Condition, ctx: CompileContext) -> Predicate:
    path = ctx.path(condition.field)
    return {
        "$or": [
            {path: {"$exists": False}},
            {path: {"$eq": None}},
            {path: {"$eq": ""}},
            {path: {"$eq": []}},
        ]
    }


def _is_not_empty(condition: Condition, ctx: CompileContext) -> Predicate:
    # Spelled out rather than negating _is_empty so no compound $not is needed
    path = ctx.path(condition.field)
    return {
        "$and": [
            {path: {"$exists": True}},
            {path: {"$ne": None}},
            {path: {"$ne": ""}},
            {path: {"$ne": []}},
        ]
    }


def _comparison(mongo_operator: str, convert: Callable[[Any], Any]) -> Callable[[Condition, CompileContext], Predicate]:
    def build(condition: Condition, ctx: CompileContext) -> Predicate:
        raw = _single_value(condition)
        if raw is None:
            return {}
        value = convert(raw)
        if value is None:
            logger.warning(f"Condition {condition.id}: cannot use {raw!r} with '{condition.operator}', skipping")
            return {}
        return {ctx.path(condition.field): {mongo_operator: value}}

    return build


def _bounds(condition: Condition, convert: Callable[[Any], Any]) -> Optional[tuple]:
    operand = _range_values(condition)
    if operand is None:
        return None
    lower, upper = convert(operand.value_from), convert(operand.value_to)
    if lower is None or upper is None:
        logger.warning(
            f"Condition {condition.id}: cannot use range {operand.value_from!r}..{operand.value_to!r} "
            f"with '{condition.operator}', skipping"
        )
        return None
    return lower, upper


def _between(convert: Callable[[Any], Any]) -> Callable[[Condition, CompileContext], Predicate]:
    def build(condition: Condition, ctx: CompileContext) -> Predicate:
        bounds = _bounds(condition, convert)
        if bounds is None:
            return {}
        return {ctx.path(condition.field): {"$gte": bounds[0], "$lte": bounds[1]}}

    return build


def _not_between(condition: Condition, ctx: CompileContext) -> Predicate:
    bounds = _bounds(condition, to_number)
    if bounds is None:
        return {}
    path = ctx.path(condition.field)
    return {"$or": [{path: {"$lt": bounds[0]}}, {path: {"$gt": bounds[1]}}]}


def _date_range(path: str, date_range: Optional[DateRange]) -> Predicate:
    if date_range is None:
        return {}
    return {path: {"$gte": date_range.start, "$lte": date_range.end}}


def _date_shortcut(condition: Condition, ctx: CompileContext) -> Predicate:
    period = DATE_SHORTCUT_PERIODS[FilterOperator(condition.operator)]
    return _date_range(ctx.path(condition.field), resolve_period(period, now=ctx.now))


def _date_is_relative(condition: Condition, ctx: CompileContext) -> Predicate:
    operand = condition.operand
    if not isinstance(operand, RelativeValue):
        return {}
    return _date_range(ctx.path(condition.field), resolve_period(operand.period, now=ctx.now))


def _boolean(flag: bool) -> Callable[[Condition, CompileContext], Predicate]:
    def build(condition: Condition, ctx: CompileContext) -> Predicate:
        return {ctx.path(condition.field): {"$eq": flag}}

    return build


def _membership(mongo_operator: str) -> Callable[[Condition, CompileContext], Predicate]:
    def build(condition: Condition, ctx: CompileContext) -> Predicate:
        value = _single_value(condition)
        if value is None:
            return {}
        values = value if isinstance(value, list) else [value]
        values = coerce_value(values, ctx.field_type(condition.field))
        return {ctx.path(condition.field): {mongo_operator: values}}

    return build


OPERATOR_BUILDERS: Dict[FilterOperator, Callable[[Condition, CompileContext], Predicate]] = {
    FilterOperator.EQUALS: _equality("$eq"),
    FilterOperator.NOT_EQUALS: _equality("$ne"),
    FilterOperator.CONTAINS: _text_match("{}"),
    FilterOperator.NOT_CONTAINS: _text_match("{}", negate=True),
    FilterOperator.STARTS_WITH: _text_match("^{}"),
    FilterOperator.ENDS_WITH: _text_match("{}$"),
    FilterOperator.IS_EMPTY: _is_empty,
    FilterOperator.IS_NOT_EMPTY: _is_not_empty,
    FilterOperator.GREATER_THAN: _comparison("$gt", to_number),
    FilterOperator.GREATER_THAN_OR_EQUAL: _comparison("$gte", to_number),
    FilterOperator.LESS_THAN: _comparison("$lt", to_number),
    FilterOperator.LESS_THAN_OR_EQUAL: _comparison("$lte", to_number),
    FilterOperator.BETWEEN: _between(to_number),
    FilterOperator.NOT_BETWEEN: _not_between,
    FilterOperator.DATE_IS: _comparison("$eq", to_datetime),
    FilterOperator.DATE_IS_NOT: _comparison("$ne", to_datetime),
    FilterOperator.DATE_BEFORE: _comparison("$lt", to_datetime),
    FilterOperator.DATE_AFTER: _comparison("$gt", to_datetime),
    FilterOperator.DATE_BETWEEN: _between(to_datetime),
    FilterOperator.DATE_THIS_WEEK: _date_shortcut,
    FilterOperator.DATE_THIS_MONTH: _date_shortcut,
    FilterOperator.DATE_THIS_YEAR: _date_shortcut,
    FilterOperator.DATE_IS_RELATIVE: _date_is_relative,
    FilterOperator.IS_TRUE: _boolean(True),
    FilterOperator.IS_FALSE: _boolean(False),
    FilterOperator.IN: _membership("$in"),
    FilterOperator.NOT_IN: _membership("$nin"),
}

SUPPORTED_OPERATORS = frozenset(OPERATOR_BUILDERS)


def _combine(fragments: List[Predicate], logical_operator: LogicalOperator) -> Predicate:
    """Reduce fragments under one logical operator, dropping identity fragments."""
    fragments = [fragment for fragment in fragments if fragment]
    if not fragments:
        return {}
    if len(fragments) == 1:
        return fragments[0]
    return {LOGICAL_OPERATOR_MAP[logical_operator]: fragments}


def _compile_condition(condition: Condition, ctx: CompileContext) -> Predicate:
    if not condition.field.strip() or not condition.operator:
        return {}
    operator = FilterOperator.parse(condition.operator)
    if operator is None:
        logger.debug(f"Condition {condition.id}: unknown operator '{condition.operator}', skipping")
        return {}
    return OPERATOR_BUILDERS[operator](condition, ctx)


def _compile_group(group: FilterGroup, ctx: CompileContext) -> Predicate:
    # Post-order walk with an explicit stack so nesting depth is not bounded by the recursion limit
    compiled: Dict[int, Predicate] = {}
    stack = [(group, False)]
    while stack:
        node, children_done = stack.pop()
        if not children_done:
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.groups))
            continue
        fragments = [_compile_condition(condition, ctx) for condition in node.conditions]
        fragments.extend(compiled[id(child)] for child in node.groups)
        compiled[id(node)] = _combine(fragments, node.logical_operator)
    return compiled[id(group)]


def condition_to_predicate(
    condition: Condition,
    field_path: str = "",
    now: Optional[datetime] = None,
    catalog: Optional[FieldCatalog] = None,
) -> Predicate:
    """Compile one condition, ``{}`` when it places no constraint."""
    return _compile_condition(condition, CompileContext(field_path, now, catalog))


def group_to_predicate(
    group: FilterGroup,
    field_path: str = "",
    now: Optional[datetime] = None,
    catalog: Optional[FieldCatalog] = None,
) -> Predicate:
    """Compile a group: conditions first, then nested groups, under the group's operator."""
    return _compile_group(group, CompileContext(field_path, now, catalog))


def advanced_filter_to_predicate(
    advanced_filter: AdvancedFilter,
    now: Optional[datetime] = None,
    catalog: Optional[FieldCatalog] = None,
    field_path: str = "",
) -> Predicate:
    """Compile a whole filter into one MongoDB filter document.

    ``now`` is captured once, so every relative date in the filter shares the
    same anchor.
    """
    ctx = CompileContext(field_path, now, catalog)
    fragments = [_compile_group(group, ctx) for group in advanced_filter.groups]
    return _combine(fragments, advanced_filter.global_logical_operator)


def build_search_predicate(text: Optional[str], fields: List[str]) -> Predicate:
    """Case-insensitive substring match of ``text`` on any of ``fields``."""
    if not text or not text.strip() or not fields:
        return {}
    pattern = re.escape(text.strip())
    return {"$or": [{field: _regex(pattern)} for field in fields]}


def combine(filter_predicate: Predicate, search_predicate: Predicate) -> Predicate:
    """AND a compiled filter with a search predicate.

    Search stays additive regardless of the filter's own OR logic.
    """
    return _combine([filter_predicate, search_predicate], LogicalOperator.AND)
