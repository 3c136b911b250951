import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from ..domain.entities import ToolStatus, UserRole
from ..domain.interfaces import IEventRepository, IToolRepository, IUserRepository

logger = logging.getLogger(__name__)


@dataclass
class SystemStats:
    """Point-in-time counts for the admin overview."""

    total_tools: int = 0
    total_users: int = 0
    total_events: int = 0
    tools_by_status: Dict[str, int] = field(default_factory=dict)
    users_by_role: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_tools": self.total_tools,
            "total_users": self.total_users,
            "total_events": self.total_events,
            "tools_by_status": dict(self.tools_by_status),
            "users_by_role": dict(self.users_by_role),
        }


class StatsService:
    def __init__(
        self,
        tool_repo: IToolRepository,
        user_repo: IUserRepository,
        event_repo: IEventRepository,
    ) -> None:
        self.tool_repo = tool_repo
        self.user_repo = user_repo
        self.event_repo = event_repo

    def get_stats(self) -> SystemStats:
        """Collect totals plus per-status and per-role counts.

        Every status and role appears in the result, with 0 when the store
        reported nothing for it.
        """
        by_status = self.tool_repo.count_by_status()
        by_role = self.user_repo.count_by_role()

        stats = SystemStats(
            total_tools=self.tool_repo.count(),
            total_users=self.user_repo.count(),
            total_events=self.event_repo.count(),
            tools_by_status={s.value: by_status.get(s, 0) for s in ToolStatus},
            users_by_role={r.value: by_role.get(r, 0) for r in UserRole},
        )
        logger.debug("System stats collected", extra={"context": stats.to_dict()})
        return stats
