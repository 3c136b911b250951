"""
Custom exceptions for the application.
Following SOLID principles - centralized error handling.

Every error raised by the core derives from ToolTrackerError so that a
presentation layer can catch the family once and map each subclass to
its own response (bad request, not found, conflict, internal error).
"""

from typing import Optional


class ToolTrackerError(Exception):
    """Base class for all errors raised by the tool tracker core."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ToolTrackerError):
    """
    Raised for malformed ids, empty required fields, invalid enum values
    and illegal state transitions.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(ToolTrackerError):
    """Raised when a referenced tool, user or event does not exist."""

    resource = "resource"

    def __init__(self, resource_id: Optional[str] = None, message: Optional[str] = None):
        super().__init__(message or f"{self.resource} not found")
        self.resource_id = resource_id


class ToolNotFoundError(NotFoundError):
    resource = "tool"


class UserNotFoundError(NotFoundError):
    resource = "user"


class EventNotFoundError(NotFoundError):
    resource = "event"


class ConflictError(ToolTrackerError):
    """Raised when a write would break a uniqueness rule (duplicate email)."""

    pass


class StorageError(ToolTrackerError):
    """
    Opaque repository failure.
    Services pass it through unchanged; the underlying driver error is
    available as __cause__.
    """

    pass
