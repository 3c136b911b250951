from .event_repo import EventRepository
from .tool_repo import ToolRepository
from .user_repo import UserRepository

__all__ = ["EventRepository", "ToolRepository", "UserRepository"]
