"""Composable view filters compiled to MongoDB filter documents."""

from view_filters.compiler import (
    advanced_filter_to_predicate,
    build_search_predicate,
    combine,
    condition_to_predicate,
    group_to_predicate,
)
from view_filters.date_range import DateRange, resolve_period
from view_filters.editor import expand, flatten, to_simple_filters
from view_filters.exceptions import (
    FilterEngineError,
    InvalidFilterError,
    InvalidOperandError,
    InvalidOperatorError,
    UnknownFieldError,
    UnknownObjectTypeError,
)
from view_filters.models import (
    AdvancedFilter,
    Condition,
    FieldCatalog,
    FieldDefinition,
    FieldType,
    FilterGroup,
    FilterOperator,
    LogicalOperator,
    OperatorDescriptor,
    RelativePeriod,
    get_field_catalog,
    get_search_fields,
    operators_for_field_type,
)
from view_filters.query import ViewQuery, dump_view_filters, load_view_filters
from view_filters.summary import FilterChip, summarize_filters

__all__ = [
    # Compiler
    "advanced_filter_to_predicate",
    "build_search_predicate",
    "combine",
    "condition_to_predicate",
    "group_to_predicate",
    # Relative dates
    "DateRange",
    "resolve_period",
    # Editor
    "expand",
    "flatten",
    "to_simple_filters",
    # Models
    "AdvancedFilter",
    "Condition",
    "FieldCatalog",
    "FieldDefinition",
    "FieldType",
    "FilterGroup",
    "FilterOperator",
    "LogicalOperator",
    "OperatorDescriptor",
    "RelativePeriod",
    "get_field_catalog",
    "get_search_fields",
    "operators_for_field_type",
    # Views
    "ViewQuery",
    "dump_view_filters",
    "load_view_filters",
    # Chips
    "FilterChip",
    "summarize_filters",
    # Exceptions
    "FilterEngineError",
    "InvalidFilterError",
    "InvalidOperandError",
    "InvalidOperatorError",
    "UnknownFieldError",
    "UnknownObjectTypeError",
]
