"""Models package for the filter engine."""

from view_filters.models.field import (
    FieldCatalog,
    FieldDefinition,
    get_field_catalog,
    get_search_fields,
)
from view_filters.models.filter_types import (
    AdvancedFilter,
    Condition,
    FilterGroup,
    NoValue,
    Operand,
    RangeValue,
    RelativeValue,
    SingleValue,
)
from view_filters.models.operators import (
    OperatorDescriptor,
    default_operator,
    get_operator_descriptor,
    operators_for_field_type,
)
from view_filters.models.types import (
    FieldType,
    FilterOperator,
    LogicalOperator,
    RelativePeriod,
)

__all__ = [
    "AdvancedFilter",
    "Condition",
    "FieldCatalog",
    "FieldDefinition",
    "FieldType",
    "FilterGroup",
    "FilterOperator",
    "LogicalOperator",
    "NoValue",
    "Operand",
    "OperatorDescriptor",
    "RangeValue",
    "RelativePeriod",
    "RelativeValue",
    "SingleValue",
    "default_operator",
    "get_field_catalog",
    "get_operator_descriptor",
    "get_search_fields",
    "operators_for_field_type",
]
