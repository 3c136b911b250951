"""
Domain entities - Pure business logic, no framework dependencies.

Following SOLID principles:
- Single Responsibility: Each entity represents one business concept
- Open/Closed: Entities can be extended without modification

Entities validate themselves when constructed and expose validate() so a
service can re-check every invariant after mutating one in memory.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from ..core.exceptions import ValidationError
from ..core.validation import (
    validate_choice,
    validate_email,
    validate_optional_uuid,
    validate_required_field,
)


def utcnow() -> datetime:
    """Timezone-aware current UTC time used for all entity timestamps."""
    return datetime.now(timezone.utc)


class ToolStatus(str, Enum):
    """Lifecycle state of a tool."""

    IN_OFFICE = "IN_OFFICE"
    CHECKED_OUT = "CHECKED_OUT"
    MAINTENANCE = "MAINTENANCE"
    LOST = "LOST"


class UserRole(str, Enum):
    EMPLOYEE = "EMPLOYEE"
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"


class EventType(str, Enum):
    """Closed set of audit event types."""

    TOOL_CREATED = "TOOL_CREATED"
    TOOL_UPDATED = "TOOL_UPDATED"
    TOOL_DELETED = "TOOL_DELETED"
    TOOL_CHECKED_OUT = "TOOL_CHECKED_OUT"
    TOOL_CHECKED_IN = "TOOL_CHECKED_IN"
    TOOL_MAINTENANCE = "TOOL_MAINTENANCE"
    TOOL_LOST = "TOOL_LOST"
    USER_CREATED = "USER_CREATED"
    USER_UPDATED = "USER_UPDATED"
    USER_DELETED = "USER_DELETED"


def validate_tool_status(value: Any) -> ToolStatus:
    return validate_choice(value, ToolStatus, "status")


def validate_user_role(value: Any) -> UserRole:
    return validate_choice(value, UserRole, "role")


def validate_event_type(value: Any) -> EventType:
    return validate_choice(value, EventType, "event type")


@dataclass
class Tool:
    """Domain entity representing a tracked tool.

    Invariant: current_user_id is set if and only if status is CHECKED_OUT.
    The transition methods below mutate the entity in memory; they never
    touch storage.
    """

    name: str = ""
    status: ToolStatus = ToolStatus.IN_OFFICE
    id: Optional[str] = None
    current_user_id: Optional[str] = None
    last_checked_out_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Validate domain rules, failing on the first violation."""
        validate_required_field(self.name, "name")
        self.status = validate_tool_status(self.status)
        validate_optional_uuid(self.current_user_id, "current_user_id")

        if self.current_user_id is not None and self.status != ToolStatus.CHECKED_OUT:
            raise ValidationError(
                f"tool with a current holder must be {ToolStatus.CHECKED_OUT.value}, "
                f"not {self.status.value}",
                "current_user_id",
            )
        if self.status == ToolStatus.CHECKED_OUT and self.current_user_id is None:
            raise ValidationError(
                "checked out tool must have a current holder", "current_user_id"
            )

    @property
    def is_checked_out(self) -> bool:
        return self.current_user_id is not None

    # --- transitions -------------------------------------------------------

    def check_out(self, user_id: str, at: Optional[datetime] = None) -> None:
        if self.is_checked_out:
            raise ValidationError("tool is already checked out", "status")
        if self.status == ToolStatus.LOST:
            raise ValidationError("lost tools cannot be checked out", "status")

        self.status = ToolStatus.CHECKED_OUT
        self.current_user_id = user_id
        self.last_checked_out_at = at or utcnow()

    def check_in(self) -> str:
        """Return the tool to the office and give back the prior holder id."""
        if not self.is_checked_out:
            raise ValidationError("tool is not checked out", "status")

        prior_holder = self.current_user_id
        self.current_user_id = None
        self.status = ToolStatus.IN_OFFICE
        return prior_holder

    def send_to_maintenance(self) -> None:
        # The holder is never cleared here, so a held tool cannot enter MAINTENANCE
        if self.status == ToolStatus.LOST:
            raise ValidationError("lost tools cannot be sent to maintenance", "status")
        if self.is_checked_out:
            raise ValidationError(
                "checked out tools must be checked in before maintenance", "status"
            )
        if self.status == ToolStatus.MAINTENANCE:
            return
        self.status = ToolStatus.MAINTENANCE

    def mark_lost(self) -> Optional[str]:
        """Mark the tool lost and give back whoever was holding it, if anyone."""
        if self.status == ToolStatus.LOST:
            return None

        prior_holder = self.current_user_id
        self.current_user_id = None
        self.status = ToolStatus.LOST
        return prior_holder


@dataclass
class User:
    """Domain entity representing a person who holds or manages tools."""

    name: str = ""
    email: str = ""
    role: UserRole = UserRole.EMPLOYEE
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        validate_required_field(self.name, "name")
        validate_email(self.email, "email")
        self.role = validate_user_role(self.role)


@dataclass(frozen=True)
class Event:
    """Immutable audit record.

    Only the type is required; the tool, subject user and actor references
    are optional depending on the event type.
    """

    event_type: EventType
    tool_id: Optional[str] = None
    user_id: Optional[str] = None
    actor_id: Optional[str] = None
    notes: str = ""
    metadata: Optional[Dict[str, Any]] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "event_type", validate_event_type(self.event_type))
        if self.notes is None:
            object.__setattr__(self, "notes", "")
        if self.metadata is not None and not isinstance(self.metadata, dict):
            raise ValidationError("metadata must be a mapping", "metadata")


def new_tool(name: str, status: Optional[Any] = None) -> Tool:
    """Build and validate a new tool; status defaults to IN_OFFICE."""
    return Tool(
        name=name.strip() if isinstance(name, str) else name,
        status=status or ToolStatus.IN_OFFICE,
    )


def new_user(name: str, email: str, role: Optional[Any] = None) -> User:
    """Build and validate a new user; role defaults to EMPLOYEE."""
    return User(
        name=name.strip() if isinstance(name, str) else name,
        email=email.strip() if isinstance(email, str) else email,
        role=role or UserRole.EMPLOYEE,
    )
