from .event_service import EventService, NullEventLogger
from .stats_service import StatsService, SystemStats
from .tool_service import ToolService
from .user_service import UserService

__all__ = [
    "EventService",
    "NullEventLogger",
    "StatsService",
    "SystemStats",
    "ToolService",
    "UserService",
]
