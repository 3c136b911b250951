import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from ..core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..core.validation import (
    clamp_pagination,
    validate_optional_uuid,
    validate_required_field,
    validate_uuid,
)
from ..domain.entities import Tool, ToolStatus, new_tool, validate_tool_status
from ..domain.interfaces import IEventLogger, IToolRepository
from .event_service import NullEventLogger

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _transition(from_status: ToolStatus, to_status: ToolStatus) -> Dict[str, Any]:
    return {"from_status": from_status.value, "to_status": to_status.value}


class ToolService:
    """Application service for the tool lifecycle.

    This service:
    - Validates every id before touching the repository
    - Applies state transitions on the domain entity, never in the store
    - Re-checks the entity invariants before persisting
    - Emits one audit event per successful mutation (best-effort)
    - Depends on abstractions (IToolRepository, IEventLogger) only
    """

    def __init__(self, repo: IToolRepository, events: Optional[IEventLogger] = None) -> None:
        self.repo = repo
        self.events = events or NullEventLogger()

    def _apply_and_save(
        self, tool_id: str, mutate: Callable[[Tool], T]
    ) -> Tuple[Tool, ToolStatus, T]:
        """Load a tool, mutate it in memory, re-validate and persist it.

        Returns the saved tool, its status before the mutation and whatever
        mutate returned. Nothing is written when mutate or validation fails.
        """
        validate_uuid(tool_id, "tool_id")
        tool = self.repo.get(tool_id)
        from_status = tool.status

        outcome = mutate(tool)
        tool.validate()

        saved = self.repo.update(tool)
        return saved, from_status, outcome

    def create_tool(
        self,
        name: str,
        status: Optional[Any] = None,
        actor_id: Optional[str] = None,
        notes: str = "",
    ) -> Tool:
        validate_optional_uuid(actor_id, "actor_id")
        draft = new_tool(name, status)

        tool = self.repo.create(draft.name, draft.status)
        logger.info(
            "Tool created",
            extra={"context": {"tool_id": tool.id, "status": tool.status.value}},
        )
        self.events.log_tool_created(
            tool.id, actor_id, notes, metadata={"name": tool.name, "status": tool.status.value}
        )
        return tool

    def check_out_tool(
        self, tool_id: str, user_id: str, actor_id: Optional[str] = None, notes: str = ""
    ) -> Tool:
        """Hand a tool to user_id.

        Raises:
            ValidationError: the tool is already held or is LOST.
            ToolNotFoundError: no tool with this id.
        """
        validate_uuid(tool_id, "tool_id")
        validate_uuid(user_id, "user_id")
        validate_optional_uuid(actor_id, "actor_id")

        tool, from_status, _ = self._apply_and_save(tool_id, lambda t: t.check_out(user_id))
        logger.info(
            "Tool checked out",
            extra={"context": {"tool_id": tool_id, "user_id": user_id, "actor_id": actor_id}},
        )
        self.events.log_tool_checked_out(
            tool_id, user_id, actor_id, notes, metadata=_transition(from_status, tool.status)
        )
        return tool

    def check_in_tool(self, tool_id: str, actor_id: Optional[str] = None, notes: str = "") -> Tool:
        """Return a held tool to the office; the prior holder is the event subject."""
        validate_uuid(tool_id, "tool_id")
        validate_optional_uuid(actor_id, "actor_id")

        tool, from_status, prior_holder = self._apply_and_save(tool_id, lambda t: t.check_in())
        logger.info(
            "Tool checked in",
            extra={
                "context": {"tool_id": tool_id, "user_id": prior_holder, "actor_id": actor_id}
            },
        )
        self.events.log_tool_checked_in(
            tool_id, prior_holder, actor_id, notes, metadata=_transition(from_status, tool.status)
        )
        return tool

    def send_to_maintenance(
        self, tool_id: str, actor_id: Optional[str] = None, notes: str = ""
    ) -> Tool:
        """Move a tool to MAINTENANCE.

        The holder is never cleared, so a checked out tool is rejected and
        has to be checked in first. Calling it on a tool already
        in maintenance succeeds and records another event.
        """
        validate_uuid(tool_id, "tool_id")
        validate_optional_uuid(actor_id, "actor_id")

        tool, from_status, _ = self._apply_and_save(tool_id, lambda t: t.send_to_maintenance())
        logger.info(
            "Tool sent to maintenance",
            extra={"context": {"tool_id": tool_id, "from_status": from_status.value}},
        )
        self.events.log_tool_maintenance(
            tool_id, actor_id, notes, metadata=_transition(from_status, tool.status)
        )
        return tool

    def mark_lost(self, tool_id: str, actor_id: Optional[str] = None, notes: str = "") -> Tool:
        """Mark a tool LOST (idempotent). Whoever held it becomes the event subject."""
        validate_uuid(tool_id, "tool_id")
        validate_optional_uuid(actor_id, "actor_id")

        tool, from_status, prior_holder = self._apply_and_save(tool_id, lambda t: t.mark_lost())
        logger.info(
            "Tool marked lost",
            extra={
                "context": {
                    "tool_id": tool_id,
                    "from_status": from_status.value,
                    "user_id": prior_holder,
                }
            },
        )
        self.events.log_tool_lost(
            tool_id,
            actor_id,
            notes,
            user_id=prior_holder,
            metadata=_transition(from_status, tool.status),
        )
        return tool

    def update_tool(
        self,
        tool_id: str,
        name: str,
        status: Optional[Any] = None,
        actor_id: Optional[str] = None,
        notes: str = "",
    ) -> Tool:
        """Overwrite name and, when given, status. The holder is left as is."""
        validate_uuid(tool_id, "tool_id")
        validate_required_field(name, "name")
        new_status = validate_tool_status(status) if status is not None else None
        validate_optional_uuid(actor_id, "actor_id")

        def overwrite(tool: Tool) -> None:
            tool.name = name.strip()
            if new_status is not None:
                tool.status = new_status

        tool, from_status, _ = self._apply_and_save(tool_id, overwrite)
        logger.info(
            "Tool updated",
            extra={"context": {"tool_id": tool_id, "status": tool.status.value}},
        )
        self.events.log_tool_updated(
            tool_id,
            actor_id,
            notes,
            metadata={"name": tool.name, **_transition(from_status, tool.status)},
        )
        return tool

    def delete_tool(self, tool_id: str, actor_id: Optional[str] = None, notes: str = "") -> None:
        validate_uuid(tool_id, "tool_id")
        validate_optional_uuid(actor_id, "actor_id")

        tool = self.repo.get(tool_id)
        self.repo.delete(tool_id)
        logger.info("Tool deleted", extra={"context": {"tool_id": tool_id}})
        self.events.log_tool_deleted(
            tool_id, actor_id, notes, metadata={"name": tool.name, "status": tool.status.value}
        )

    # --- reads ---------------------------------------------------------------

    def get_tool(self, tool_id: str) -> Tool:
        validate_uuid(tool_id, "tool_id")
        return self.repo.get(tool_id)

    def list_tools(self, limit: Optional[int] = None, offset: Optional[int] = None) -> List[Tool]:
        limit, offset = clamp_pagination(limit, offset, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)
        return self.repo.list(limit, offset)

    def list_tools_by_status(
        self, status: Any, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[Tool]:
        status = validate_tool_status(status)
        limit, offset = clamp_pagination(limit, offset, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)
        return self.repo.list_by_status(status, limit, offset)

    def list_tools_by_user(
        self, user_id: str, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[Tool]:
        validate_uuid(user_id, "user_id")
        limit, offset = clamp_pagination(limit, offset, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)
        return self.repo.list_by_user(user_id, limit, offset)

    def count_tools(self) -> int:
        return self.repo.count()
