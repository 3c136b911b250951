"""
Common validation primitives for the tool tracker.

These are pure functions with no dependencies on the rest of the package:
they only check values and raise ValidationError, so services can run
them eagerly before any repository call.
"""

import logging
import re
from enum import Enum
from typing import Any, Optional, Tuple, Type, TypeVar

from .exceptions import ValidationError

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def is_valid_uuid(value: Any) -> bool:
    """Check whether value is a UUID-shaped string (8-4-4-4-12 hex)."""
    return isinstance(value, str) and bool(UUID_PATTERN.match(value))


def validate_uuid(value: Any, field: str) -> str:
    """Validate a UUID string and return it unchanged.

    Raises:
        ValidationError: "<field> is required" when empty,
            "<field> must be a valid UUID" when malformed.
    """
    if value is None or value == "":
        raise ValidationError(f"{field} is required", field)
    if not is_valid_uuid(value):
        raise ValidationError(f"{field} must be a valid UUID", field)
    return value


def validate_optional_uuid(value: Any, field: str) -> Optional[str]:
    """Like validate_uuid, but None is accepted and returned as None."""
    if value is None:
        return None
    return validate_uuid(value, field)


def validate_required_field(value: Any, field: str) -> str:
    """Validate that a required text field is a non-blank string."""
    if value is None or (isinstance(value, str) and value.strip() == ""):
        raise ValidationError(f"{field} is required", field)
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string", field)
    return value


def validate_email(value: Any, field: str = "email") -> str:
    """Validate email presence and basic syntax."""
    validate_required_field(value, field)
    if not EMAIL_PATTERN.match(value):
        raise ValidationError("invalid email format", field)
    return value


def validate_choice(value: Any, enum_cls: Type[E], field: str) -> E:
    """Validate enum membership and return the enum member.

    Accepts either a member of enum_cls or its exact (case-sensitive)
    string value.
    """
    if isinstance(value, enum_cls):
        return value
    if value is None or value == "":
        raise ValidationError(f"{field} is required", field)
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"invalid {field} {value}", field) from None


def clamp_pagination(
    limit: Optional[int],
    offset: Optional[int],
    default_limit: int = 10,
    max_limit: int = 100,
) -> Tuple[int, int]:
    """Clamp limit to (0, max_limit] and offset to >= 0.

    A missing or non-positive limit becomes default_limit.
    """
    if limit is None or limit <= 0:
        limit = default_limit
    if limit > max_limit:
        logger.debug(f"Pagination limit {limit} clamped to {max_limit}")
        limit = max_limit
    if offset is None or offset < 0:
        offset = 0
    return limit, offset
