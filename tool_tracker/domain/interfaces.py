"""
Abstract interfaces for repositories following Interface Segregation Principle.

These interfaces define contracts without implementation details,
enabling dependency injection and easier testing. Lifecycle services
depend only on these, never on a concrete store.

Conventions shared by every repository:
- get/get_by_* raise the matching NotFoundError instead of returning None
- update/delete raise NotFoundError when the row does not exist
- list_* return newest rows first
- storage failures surface as StorageError
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .entities import Event, EventType, Tool, ToolStatus, User, UserRole


class IToolReader(ABC):
    """Interface for tool read operations."""

    @abstractmethod
    def get(self, tool_id: str) -> Tool:
        """Get tool by ID."""
        pass

    @abstractmethod
    def list(self, limit: int, offset: int) -> List[Tool]:
        """List tools, newest first."""
        pass

    @abstractmethod
    def list_by_status(self, status: ToolStatus, limit: int, offset: int) -> List[Tool]:
        """List tools in the given status."""
        pass

    @abstractmethod
    def list_by_user(self, user_id: str, limit: int, offset: int) -> List[Tool]:
        """List tools currently held by a user, most recently checked out first."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Count all tools."""
        pass

    @abstractmethod
    def count_by_status(self) -> Dict[ToolStatus, int]:
        """Count tools grouped by status (statuses with no tools may be absent)."""
        pass


class IToolWriter(ABC):
    """Interface for tool write operations."""

    @abstractmethod
    def create(self, name: str, status: ToolStatus) -> Tool:
        """Create a new tool and return it with its assigned ID."""
        pass

    @abstractmethod
    def update(self, tool: Tool) -> Tool:
        """Persist name, status, holder and checkout time of an existing tool."""
        pass

    @abstractmethod
    def delete(self, tool_id: str) -> None:
        """Delete a tool."""
        pass


class IToolRepository(IToolReader, IToolWriter):
    """Complete tool repository interface combining read/write operations."""

    pass


class IUserReader(ABC):
    """Interface for user read operations - Interface Segregation Principle."""

    @abstractmethod
    def get(self, user_id: str) -> User:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_by_email(self, email: str) -> User:
        """Get user by email."""
        pass

    @abstractmethod
    def list(self, limit: int, offset: int) -> List[User]:
        """List users, newest first."""
        pass

    @abstractmethod
    def list_by_role(self, role: UserRole, limit: int, offset: int) -> List[User]:
        """List users with the given role."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Count all users."""
        pass

    @abstractmethod
    def count_by_role(self) -> Dict[UserRole, int]:
        """Count users grouped by role (roles with no users may be absent)."""
        pass


class IUserWriter(ABC):
    """Interface for user write operations - Interface Segregation Principle."""

    @abstractmethod
    def create(self, name: str, email: str, role: UserRole) -> User:
        """Create a new user."""
        pass

    @abstractmethod
    def update(self, user_id: str, name: str, email: str, role: UserRole) -> User:
        """Update an existing user."""
        pass

    @abstractmethod
    def delete(self, user_id: str) -> None:
        """Delete a user."""
        pass


class IUserRepository(IUserReader, IUserWriter):
    """Complete user repository interface combining read/write operations."""

    pass


@dataclass
class EventFilter:
    """Optional criteria for listing events; None means "any".

    user_id matches the subject user or the actor of an event.
    """

    event_type: Optional[EventType] = None
    tool_id: Optional[str] = None
    user_id: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.event_type is None and self.tool_id is None and self.user_id is None


class IEventReader(ABC):
    """Interface for audit trail read operations."""

    @abstractmethod
    def get(self, event_id: str) -> Event:
        """Get event by ID."""
        pass

    @abstractmethod
    def list(self, limit: int, offset: int) -> List[Event]:
        """List events, newest first."""
        pass

    @abstractmethod
    def list_by_type(self, event_type: EventType, limit: int, offset: int) -> List[Event]:
        pass

    @abstractmethod
    def list_by_tool(self, tool_id: str, limit: int, offset: int) -> List[Event]:
        pass

    @abstractmethod
    def list_by_user(self, user_id: str, limit: int, offset: int) -> List[Event]:
        """List events where user_id is the subject or the actor."""
        pass

    @abstractmethod
    def list_with_filter(self, event_filter: EventFilter, limit: int, offset: int) -> List[Event]:
        """List events matching every criterion set on the filter."""
        pass

    @abstractmethod
    def count(self) -> int:
        pass


class IEventWriter(ABC):
    """Interface for appending to the audit trail. Events are never updated or deleted."""

    @abstractmethod
    def create(
        self,
        event_type: EventType,
        tool_id: Optional[str],
        user_id: Optional[str],
        actor_id: Optional[str],
        notes: str,
        metadata: Optional[Dict[str, Any]],
    ) -> Event:
        """Append a new event."""
        pass


class IEventRepository(IEventReader, IEventWriter):
    """Complete event repository interface."""

    pass


class IEventLogger(ABC):
    """
    Capability the lifecycle services use to record audit events.

    Each method fixes which argument is the tool reference, the subject
    user and the actor. Implementations must not raise: they return the
    created Event, or None when the event could not be recorded.
    """

    @abstractmethod
    def log_tool_created(
        self,
        tool_id: str,
        actor_id: Optional[str],
        notes: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Event]:
        pass

    @abstractmethod
    def log_tool_updated(
        self,
        tool_id: str,
        actor_id: Optional[str],
        notes: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Event]:
        pass

    @abstractmethod
    def log_tool_deleted(
        self,
        tool_id: str,
        actor_id: Optional[str],
        notes: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Event]:
        pass

    @abstractmethod
    def log_tool_checked_out(
        self,
        tool_id: str,
        user_id: str,
        actor_id: Optional[str],
        notes: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Event]:
        pass

    @abstractmethod
    def log_tool_checked_in(
        self,
        tool_id: str,
        user_id: str,
        actor_id: Optional[str],
        notes: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Event]:
        pass

    @abstractmethod
    def log_tool_maintenance(
        self,
        tool_id: str,
        actor_id: Optional[str],
        notes: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Event]:
        pass

    @abstractmethod
    def log_tool_lost(
        self,
        tool_id: str,
        actor_id: Optional[str],
        notes: str = "",
        user_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Event]:
        pass

    @abstractmethod
    def log_user_created(
        self, user_id: str, actor_id: Optional[str], notes: str = ""
    ) -> Optional[Event]:
        pass

    @abstractmethod
    def log_user_updated(
        self, user_id: str, actor_id: Optional[str], notes: str = ""
    ) -> Optional[Event]:
        pass

    @abstractmethod
    def log_user_deleted(
        self, user_id: str, actor_id: Optional[str], notes: str = ""
    ) -> Optional[Event]:
        pass
