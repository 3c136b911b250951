"""
Repository test factories following Interface Segregation Principle.

This module provides mock factories for repository interfaces, ensuring
tests only depend on the specific interfaces they need, plus small
builders for domain entities.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional
from unittest.mock import Mock

from tool_tracker.core.exceptions import UserNotFoundError
from tool_tracker.domain.entities import Event, Tool, ToolStatus, User, UserRole
from tool_tracker.domain.interfaces import (
    IEventLogger,
    IEventRepository,
    IToolReader,
    IToolRepository,
    IUserRepository,
)


def make_tool(
    name: str = "Hammer",
    status: ToolStatus = ToolStatus.IN_OFFICE,
    tool_id: Optional[str] = None,
    current_user_id: Optional[str] = None,
) -> Tool:
    """Build a persisted-looking tool."""
    now = datetime.now(timezone.utc)
    return Tool(
        id=tool_id or str(uuid.uuid4()),
        name=name,
        status=status,
        current_user_id=current_user_id,
        last_checked_out_at=now if current_user_id else None,
        created_at=now,
        updated_at=now,
    )


def make_user(
    name: str = "Jane Doe",
    email: str = "jane@example.com",
    role: UserRole = UserRole.EMPLOYEE,
    user_id: Optional[str] = None,
) -> User:
    now = datetime.now(timezone.utc)
    return User(
        id=user_id or str(uuid.uuid4()),
        name=name,
        email=email,
        role=role,
        created_at=now,
        updated_at=now,
    )


class ToolRepositoryFactory:
    """Factory for creating Tool repository mocks following Interface Segregation."""

    @staticmethod
    def create_mock_reader() -> Mock:
        """Create mock that only implements IToolReader operations."""
        mock_reader = Mock(spec=IToolReader)
        mock_reader.list.return_value = []
        mock_reader.count.return_value = 0
        mock_reader.count_by_status.return_value = {}
        return mock_reader

    @staticmethod
    def create_mock_full() -> Mock:
        """Create full repository mock implementing IToolRepository.

        create() echoes a new IN_OFFICE/given-status tool and update()
        returns whatever it is given, so services see realistic results.
        """
        mock_repo = Mock(spec=IToolRepository)

        mock_repo.create.side_effect = lambda name, status: make_tool(name=name, status=status)
        mock_repo.update.side_effect = lambda tool: tool
        mock_repo.delete.return_value = None
        mock_repo.list.return_value = []
        mock_repo.list_by_status.return_value = []
        mock_repo.list_by_user.return_value = []
        mock_repo.count.return_value = 0
        mock_repo.count_by_status.return_value = {}

        return mock_repo


class UserRepositoryFactory:
    """Factory for creating User repository mocks."""

    @staticmethod
    def create_mock_full() -> Mock:
        """Create full repository mock implementing IUserRepository.

        get_by_email() raises UserNotFoundError by default, meaning the
        email is free.
        """
        mock_repo = Mock(spec=IUserRepository)

        mock_repo.get_by_email.side_effect = UserNotFoundError()
        mock_repo.create.side_effect = lambda name, email, role: make_user(
            name=name, email=email, role=role
        )
        mock_repo.update.side_effect = lambda user_id, name, email, role: make_user(
            name=name, email=email, role=role, user_id=user_id
        )
        mock_repo.delete.return_value = None
        mock_repo.list.return_value = []
        mock_repo.list_by_role.return_value = []
        mock_repo.count.return_value = 0
        mock_repo.count_by_role.return_value = {}

        return mock_repo


class EventRepositoryFactory:
    """Factory for creating Event repository mocks."""

    @staticmethod
    def create_mock_full() -> Mock:
        mock_repo = Mock(spec=IEventRepository)

        def _create(event_type, tool_id, user_id, actor_id, notes, metadata):
            return Event(
                id=str(uuid.uuid4()),
                event_type=event_type,
                tool_id=tool_id,
                user_id=user_id,
                actor_id=actor_id,
                notes=notes,
                metadata=metadata,
                created_at=datetime.now(timezone.utc),
            )

        mock_repo.create.side_effect = _create
        mock_repo.list.return_value = []
        mock_repo.list_by_type.return_value = []
        mock_repo.list_by_tool.return_value = []
        mock_repo.list_by_user.return_value = []
        mock_repo.list_with_filter.return_value = []
        mock_repo.count.return_value = 0

        return mock_repo


class EventLoggerFactory:
    """Factory for IEventLogger mocks used to assert audit emission."""

    @staticmethod
    def create_mock() -> Mock:
        mock_logger = Mock(spec=IEventLogger)
        for name in (
            "log_tool_created",
            "log_tool_updated",
            "log_tool_deleted",
            "log_tool_checked_out",
            "log_tool_checked_in",
            "log_tool_maintenance",
            "log_tool_lost",
            "log_user_created",
            "log_user_updated",
            "log_user_deleted",
        ):
            getattr(mock_logger, name).return_value = None
        return mock_logger


__all__ = [
    "EventLoggerFactory",
    "EventRepositoryFactory",
    "ToolRepositoryFactory",
    "UserRepositoryFactory",
    "make_tool",
    "make_user",
]
