"""Custom exceptions for the filter engine.

Compilation never raises; these are raised by the opt-in strict validation
and by catalog lookups.
"""


class FilterEngineError(Exception):
    """Base exception for filter engine errors."""

    pass


class InvalidFilterError(FilterEngineError):
    """Raised when a filter does not validate against a field catalog."""

    pass


class UnknownFieldError(InvalidFilterError):
    """Raised when a condition targets a field missing from the catalog."""

    pass


class InvalidOperatorError(InvalidFilterError):
    """Raised when an operator is not legal for the field's type."""

    pass


class InvalidOperandError(InvalidFilterError):
    """Raised when a condition's value shape does not match its operator."""

    pass


class UnknownObjectTypeError(FilterEngineError):
    """Raised when no built-in catalog exists for a record kind."""

    pass
