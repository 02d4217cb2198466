"""Operator catalog: the legal operators for each semantic field type."""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from view_filters.models.types import TEXT_ALIASES, FieldType, FilterOperator


class OperatorDescriptor(BaseModel):
    """Catalog entry describing one operator's label and value arity."""

    value: FilterOperator = Field(description="Operator key")
    label: str = Field(description="Human-readable verb phrase shown in the editor")
    requires_value: bool = Field(default=True, description="Whether the operator takes a value at all")
    requires_range: bool = Field(default=False, description="Whether the operator takes a from/to pair")
    requires_period: bool = Field(default=False, description="Whether the operator takes a relative period key")

    model_config = {"frozen": True}


def _op(operator: FilterOperator, label: str, **flags) -> OperatorDescriptor:
    return OperatorDescriptor(value=operator, label=label, **flags)


TEXT_OPERATORS: List[OperatorDescriptor] = [
    _op(FilterOperator.CONTAINS, "contains"),
    _op(FilterOperator.NOT_CONTAINS, "not contains"),
    _op(FilterOperator.STARTS_WITH, "starts with"),
    _op(FilterOperator.ENDS_WITH, "ends with"),
    _op(FilterOperator.EQUALS, "is"),
    _op(FilterOperator.NOT_EQUALS, "is not"),
    _op(FilterOperator.IS_EMPTY, "empty", requires_value=False),
    _op(FilterOperator.IS_NOT_EMPTY, "not empty", requires_value=False),
]

NUMBER_OPERATORS: List[OperatorDescriptor] = [
    _op(FilterOperator.EQUALS, "is"),
    _op(FilterOperator.NOT_EQUALS, "is not"),
    _op(FilterOperator.GREATER_THAN, "greater than"),
    _op(FilterOperator.GREATER_THAN_OR_EQUAL, "greater than or equal"),
    _op(FilterOperator.LESS_THAN, "less than"),
    _op(FilterOperator.LESS_THAN_OR_EQUAL, "less than or equal"),
    _op(FilterOperator.BETWEEN, "between", requires_range=True),
    _op(FilterOperator.NOT_BETWEEN, "not between", requires_range=True),
    _op(FilterOperator.IS_EMPTY, "empty", requires_value=False),
    _op(FilterOperator.IS_NOT_EMPTY, "not empty", requires_value=False),
]

DATE_OPERATORS: List[OperatorDescriptor] = [
    _op(FilterOperator.DATE_IS, "is"),
    _op(FilterOperator.DATE_IS_NOT, "is not"),
    _op(FilterOperator.DATE_BEFORE, "before"),
    _op(FilterOperator.DATE_AFTER, "after"),
    _op(FilterOperator.DATE_BETWEEN, "between", requires_range=True),
    _op(FilterOperator.DATE_THIS_WEEK, "this week", requires_value=False),
    _op(FilterOperator.DATE_THIS_MONTH, "this month", requires_value=False),
    _op(FilterOperator.DATE_THIS_YEAR, "this year", requires_value=False),
    _op(FilterOperator.IS_EMPTY, "empty", requires_value=False),
    _op(FilterOperator.IS_NOT_EMPTY, "not empty", requires_value=False),
]

BOOLEAN_OPERATORS: List[OperatorDescriptor] = [
    _op(FilterOperator.EQUALS, "is"),
    _op(FilterOperator.NOT_EQUALS, "is not"),
]

SELECT_OPERATORS: List[OperatorDescriptor] = [
    _op(FilterOperator.EQUALS, "is"),
    _op(FilterOperator.NOT_EQUALS, "is not"),
    _op(FilterOperator.IS_EMPTY, "empty", requires_value=False),
    _op(FilterOperator.IS_NOT_EMPTY, "not empty", requires_value=False),
]

MULTI_SELECT_OPERATORS: List[OperatorDescriptor] = [
    _op(FilterOperator.IN, "contains any"),
    _op(FilterOperator.NOT_IN, "does not contain any"),
    _op(FilterOperator.CONTAINS, "contains"),
    _op(FilterOperator.NOT_CONTAINS, "not contains"),
    _op(FilterOperator.IS_EMPTY, "empty", requires_value=False),
    _op(FilterOperator.IS_NOT_EMPTY, "not empty", requires_value=False),
]

RELATION_OPERATORS: List[OperatorDescriptor] = [
    _op(FilterOperator.EQUALS, "is"),
    _op(FilterOperator.NOT_EQUALS, "is not"),
    _op(FilterOperator.IN, "is any of"),
    _op(FilterOperator.NOT_IN, "is not any of"),
    _op(FilterOperator.IS_EMPTY, "empty", requires_value=False),
    _op(FilterOperator.IS_NOT_EMPTY, "not empty", requires_value=False),
]

# Accepted by the compiler for a field type but never offered by the editor
COMPILER_OPERATORS: Dict[FieldType, List[OperatorDescriptor]] = {
    FieldType.DATE: [
        _op(FilterOperator.DATE_IS_RELATIVE, "is relative", requires_value=False, requires_period=True),
    ],
    FieldType.BOOLEAN: [
        _op(FilterOperator.IS_TRUE, "is true", requires_value=False),
        _op(FilterOperator.IS_FALSE, "is false", requires_value=False),
    ],
}

OPERATORS_BY_FIELD_TYPE: Dict[FieldType, List[OperatorDescriptor]] = {
    FieldType.TEXT: TEXT_OPERATORS,
    FieldType.NUMBER: NUMBER_OPERATORS,
    FieldType.DATE: DATE_OPERATORS,
    FieldType.BOOLEAN: BOOLEAN_OPERATORS,
    FieldType.SELECT: SELECT_OPERATORS,
    FieldType.MULTI_SELECT: MULTI_SELECT_OPERATORS,
    FieldType.RELATION: RELATION_OPERATORS,
}


def normalize_field_type(field_type: Union[FieldType, str, None]) -> FieldType:
    """Map a raw type name onto the field type whose operator set it uses.

    Email, phone and url share the text set; anything unknown falls back to text.
    """
    try:
        resolved = FieldType(field_type)
    except ValueError:
        return FieldType.TEXT
    if resolved in TEXT_ALIASES or resolved not in OPERATORS_BY_FIELD_TYPE:
        return FieldType.TEXT
    return resolved


def operators_for_field_type(field_type: Union[FieldType, str, None]) -> List[OperatorDescriptor]:
    """Return the ordered operator descriptors legal for a field type.

    The first descriptor is the default operator for a freshly selected field.
    """
    return list(OPERATORS_BY_FIELD_TYPE[normalize_field_type(field_type)])


def default_operator(field_type: Union[FieldType, str, None]) -> OperatorDescriptor:
    return OPERATORS_BY_FIELD_TYPE[normalize_field_type(field_type)][0]


def find_operator(field_type: Union[FieldType, str, None], operator: Union[FilterOperator, str]) -> Optional[OperatorDescriptor]:
    """Look an operator up within one field type's set, compiler-level operators included."""
    resolved = normalize_field_type(field_type)
    for descriptor in (*OPERATORS_BY_FIELD_TYPE[resolved], *COMPILER_OPERATORS.get(resolved, [])):
        if descriptor.value == operator:
            return descriptor
    return None


def get_operator_descriptor(operator: Union[FilterOperator, str]) -> Optional[OperatorDescriptor]:
    """Look an operator up across every set, first match wins."""
    for descriptors in (*OPERATORS_BY_FIELD_TYPE.values(), *COMPILER_OPERATORS.values()):
        for descriptor in descriptors:
            if descriptor.value == operator:
                return descriptor
    return None


def all_catalog_operators() -> List[FilterOperator]:
    """Every operator listed by any field type's set, in first-seen order."""
    seen: List[FilterOperator] = []
    for descriptors in OPERATORS_BY_FIELD_TYPE.values():
        for descriptor in descriptors:
            if descriptor.value not in seen:
                seen.append(descriptor.value)
    return seen
