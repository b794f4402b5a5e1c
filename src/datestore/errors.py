"""Exceptions raised by DateStore.

Problems that make a store unusable (bad options, an unreadable or
unwritable backing file) are raised. A missing or corrupt file, or a stored
value that is not a date, is not an error.
"""

from pathlib import Path
from typing import Any, Optional, Union


class DateStoreError(Exception):
    """Base class for errors raised by a DateStore.

    Attributes:
        message: Text naming the store file, key or option at fault
        error_code: Stable code callers can branch on, e.g. "store_access_denied"
        context: Values behind the error, e.g. ``{"path": ..., "operation": "write"}``
            for file failures or ``{"key": ...}`` for a missing date
    """

    def __init__(
        self, message: str, error_code: str, context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}


class ConfigurationError(DateStoreError):
    """Raised when a store is constructed with invalid options.

    This is surfaced immediately from the constructor, before any file
    access takes place.
    """

    def __init__(self, reason: str, option: Optional[str] = None) -> None:
        """Initialize configuration error.

        Args:
            reason: Description of what is wrong with the configuration
            option: Optional name of the offending option
        """
        if option:
            message = f"Invalid store option '{option}': {reason}"
        else:
            message = f"Invalid store configuration: {reason}"

        context: dict[str, Any] = {"reason": reason}
        if option:
            context["option"] = option

        super().__init__(
            message=message,
            error_code="invalid_configuration",
            context=context,
        )
        self.reason = reason
        self.option = option


class StoreAccessError(DateStoreError):
    """Raised when the backing file cannot be read or written.

    A missing or corrupt file is not an access error; those are treated as
    an empty store. This error indicates the store is unusable, e.g. the
    file is not readable by the current user.
    """

    def __init__(self, path: Union[str, Path], operation: str, reason: str) -> None:
        """Initialize store access error.

        Args:
            path: Path of the backing file
            operation: The operation that failed ("load" or "write")
            reason: Description of the underlying failure
        """
        super().__init__(
            message=f"Failed to {operation} date store at {path}: {reason}",
            error_code="store_access_denied",
            context={"path": str(path), "operation": operation, "reason": reason},
        )
        self.path = Path(path)
        self.operation = operation
        self.reason = reason


class InvalidDateError(DateStoreError, ValueError):
    """Raised when a numeric time is requested for a key without a valid date."""

    def __init__(self, key: str) -> None:
        super().__init__(
            message=f"No valid date is stored for '{key}'",
            error_code="invalid_date",
            context={"key": key},
        )
        self.key = key
