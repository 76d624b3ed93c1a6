"""Domain-specific exceptions for POS Reports.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from ReportError for easy catching.
"""


class ReportError(Exception):
    """Base exception for all POS Reports errors.

    This is the base class for all domain-specific exceptions in the package.
    Callers can catch this exception to handle any reporting error.
    """

    pass


class ConfigError(ReportError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - The stores.json directory file cannot be loaded or parsed
    - A persisted category settings file is unreadable
    """

    pass


class DataQualityError(ReportError):
    """Raised when source records cannot be interpreted.

    This exception is raised when:
    - Required columns are missing from a record CSV file
    - A record carries an unknown status, category or method value
    """

    pass


class InvalidRangeError(ReportError):
    """Raised when a daily-series query is given a start after its end."""

    pass


class InvalidMonthError(ReportError):
    """Raised when the calendar boundaries of a month cannot be resolved."""

    pass


class ExportError(ReportError):
    """Raised when a rendered report cannot be written to its sink.

    The underlying ``OSError`` is kept as ``__cause__``.
    """

    pass
