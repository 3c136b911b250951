"""
Domain package - Pure business logic layer.

This package contains:
- entities.py: Domain entities, enums and tool transitions
- interfaces.py: Repository and event logger contracts
"""

from .entities import (
    Event,
    EventType,
    Tool,
    ToolStatus,
    User,
    UserRole,
    new_tool,
    new_user,
)
from .interfaces import (
    EventFilter,
    IEventLogger,
    IEventReader,
    IEventRepository,
    IEventWriter,
    IToolReader,
    IToolRepository,
    IToolWriter,
    IUserReader,
    IUserRepository,
    IUserWriter,
)

__all__ = [
    # Domain entities
    "Tool",
    "User",
    "Event",
    "ToolStatus",
    "UserRole",
    "EventType",
    "new_tool",
    "new_user",
    # Repository interfaces
    "IToolRepository",
    "IUserRepository",
    "IEventRepository",
    "IEventLogger",
    "EventFilter",
    # Segregated interfaces
    "IToolReader",
    "IToolWriter",
    "IUserReader",
    "IUserWriter",
    "IEventReader",
    "IEventWriter",
]
