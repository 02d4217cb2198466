"""Constants and enums for the filter type system."""

from enum import Enum
from typing import Dict, Optional


class FieldType(str, Enum):
    """Semantic field types a view column can declare."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    EMAIL = "email"
    PHONE = "phone"
    URL = "url"
    ID = "id"
    IMAGE = "image"
    OBJECT = "object"
    RELATION = "relation"


class LogicalOperator(str, Enum):
    """Logical operators for combining conditions and groups."""

    AND = "and"
    OR = "or"


class FilterOperator(str, Enum):
    """Every operator key the compiler understands."""

    # Text
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"

    # Number
    GREATER_THAN = "greater_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    LESS_THAN = "less_than"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    BETWEEN = "between"
    NOT_BETWEEN = "not_between"

    # Date
    DATE_IS = "date_is"
    DATE_IS_NOT = "date_is_not"
    DATE_BEFORE = "date_before"
    DATE_AFTER = "date_after"
    DATE_BETWEEN = "date_between"
    DATE_THIS_WEEK = "date_this_week"
    DATE_THIS_MONTH = "date_this_month"
    DATE_THIS_YEAR = "date_this_year"
    DATE_IS_RELATIVE = "date_is_relative"

    # Boolean
    IS_TRUE = "is_true"
    IS_FALSE = "is_false"

    # Select
    IN = "in"
    NOT_IN = "not_in"

    @classmethod
    def parse(cls, value: str) -> Optional["FilterOperator"]:
        """Return the operator for a raw key, or None if it is not recognised."""
        try:
            return cls(value)
        except ValueError:
            return None


class RelativePeriod(str, Enum):
    """Symbolic date periods anchored to the current instant."""

    TODAY = "today"
    YESTERDAY = "yesterday"
    TOMORROW = "tomorrow"
    THIS_WEEK = "this_week"
    LAST_WEEK = "last_week"
    NEXT_WEEK = "next_week"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    NEXT_MONTH = "next_month"
    THIS_YEAR = "this_year"
    LAST_YEAR = "last_year"
    NEXT_YEAR = "next_year"
    LAST_7_DAYS = "last_7_days"
    LAST_30_DAYS = "last_30_days"
    LAST_90_DAYS = "last_90_days"
    LAST_365_DAYS = "last_365_days"


# Field types that share the text operator set
TEXT_ALIASES = {FieldType.EMAIL, FieldType.PHONE, FieldType.URL}

# Rolling windows measured in days back from today
ROLLING_PERIOD_DAYS: Dict[RelativePeriod, int] = {
    RelativePeriod.LAST_7_DAYS: 7,
    RelativePeriod.LAST_30_DAYS: 30,
    RelativePeriod.LAST_90_DAYS: 90,
    RelativePeriod.LAST_365_DAYS: 365,
}

# Catalog date shortcuts and the period each one resolves to
DATE_SHORTCUT_PERIODS: Dict[FilterOperator, RelativePeriod] = {
    FilterOperator.DATE_THIS_WEEK: RelativePeriod.THIS_WEEK,
    FilterOperator.DATE_THIS_MONTH: RelativePeriod.THIS_MONTH,
    FilterOperator.DATE_THIS_YEAR: RelativePeriod.THIS_YEAR,
}

RELATIVE_PERIOD_LABELS: Dict[RelativePeriod, str] = {
    RelativePeriod.TODAY: "Today",
    RelativePeriod.YESTERDAY: "Yesterday",
    RelativePeriod.TOMORROW: "Tomorrow",
    RelativePeriod.THIS_WEEK: "This week",
    RelativePeriod.LAST_WEEK: "Last week",
    RelativePeriod.NEXT_WEEK: "Next week",
    RelativePeriod.THIS_MONTH: "This month",
    RelativePeriod.LAST_MONTH: "Last month",
    RelativePeriod.NEXT_MONTH: "Next month",
    RelativePeriod.THIS_YEAR: "This year",
    RelativePeriod.LAST_YEAR: "Last year",
    RelativePeriod.NEXT_YEAR: "Next year",
    RelativePeriod.LAST_7_DAYS: "Last 7 days",
    RelativePeriod.LAST_30_DAYS: "Last 30 days",
    RelativePeriod.LAST_90_DAYS: "Last 90 days",
    RelativePeriod.LAST_365_DAYS: "Last 365 days",
}
