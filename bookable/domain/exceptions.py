"""
Domain-specific exception hierarchy for the bookable application.

The pure availability functions never raise; these are used by the
configuration, adapter and CLI layers.
"""


class BookableError(Exception):
    """Base class for all application-level errors."""


class ConfigurationError(BookableError):
    """Raised when configuration values cannot be used for a query."""


class SnapshotError(BookableError):
    """Raised when an availability snapshot cannot be read or parsed."""
