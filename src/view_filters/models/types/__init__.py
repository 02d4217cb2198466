"""Type definitions for the filter engine."""

from view_filters.models.types.constants import (
    DATE_SHORTCUT_PERIODS,
    RELATIVE_PERIOD_LABELS,
    ROLLING_PERIOD_DAYS,
    TEXT_ALIASES,
    FieldType,
    FilterOperator,
    LogicalOperator,
    RelativePeriod,
)

__all__ = [
    "DATE_SHORTCUT_PERIODS",
    "FieldType",
    "FilterOperator",
    "LogicalOperator",
    "RELATIVE_PERIOD_LABELS",
    "ROLLING_PERIOD_DAYS",
    "RelativePeriod",
    "TEXT_ALIASES",
]
