"""Compact chip summaries of simple filters."""

from typing import List, Optional

from pydantic import BaseModel, Field

from view_filters.date_range import period_label
from view_filters.models.field import FieldCatalog
from view_filters.models.filter_types import Condition, RangeValue, RelativeValue, SingleValue
from view_filters.models.operators import OperatorDescriptor, find_operator, get_operator_descriptor


class FilterChip(BaseModel):
    """What the chip bar shows for one condition."""

    condition_id: str
    field: str
    field_label: str = Field(description="Column header, or the raw field name when it is not in the catalog")
    operator_label: str = Field(description="Verb phrase, or the raw operator key when it is unknown")
    value_text: str = Field(default="", description="Formatted value, empty for value-less operators")


def _format_scalar(value) -> str:
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    return str(value)


def format_condition_value(condition: Condition, descriptor: Optional[OperatorDescriptor]) -> str:
    """Text shown after the operator on a chip."""
    if descriptor is None:
        return ""
    operand = condition.operand
    if descriptor.requires_period:
        return period_label(operand.period) if isinstance(operand, RelativeValue) else ""
    if not descriptor.requires_value:
        return ""
    if descriptor.requires_range:
        if isinstance(operand, RangeValue) and operand.value_from not in (None, "") and operand.value_to not in (None, ""):
            return f"{operand.value_from} - {operand.value_to}"
        return ""
    if isinstance(operand, SingleValue):
        return _format_scalar(operand.value)
    return ""


def summarize_condition(condition: Condition, catalog: FieldCatalog) -> FilterChip:
    definition = catalog.find(condition.field)
    descriptor = find_operator(catalog.field_type(condition.field), condition.operator)
    if descriptor is None:
        descriptor = get_operator_descriptor(condition.operator)
    return FilterChip(
        condition_id=condition.id,
        field=condition.field,
        field_label=definition.header_name if definition else condition.field,
        operator_label=descriptor.label if descriptor else condition.operator,
        value_text=format_condition_value(condition, descriptor),
    )


def summarize_filters(conditions: List[Condition], catalog: FieldCatalog) -> List[FilterChip]:
    """Chips for every condition that has a field selected."""
    return [summarize_condition(condition, catalog) for condition in conditions if not condition.is_blank]
