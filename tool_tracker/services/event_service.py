"""
Audit trail service.

EventService is the only writer of the audit trail. create_event raises
on failure; the log_* convenience methods used by the lifecycle services
never do: a failed write is logged and reported as None so that the
mutation which triggered it still succeeds.
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.config import DEFAULT_PAGE_SIZE, HISTORY_LIMIT, MAX_PAGE_SIZE
from ..core.exceptions import ValidationError
from ..core.validation import clamp_pagination, validate_optional_uuid, validate_uuid
from ..domain.entities import Event, EventType, validate_event_type
from ..domain.interfaces import EventFilter, IEventLogger, IEventRepository

logger = logging.getLogger(__name__)

RECENT_AUDIT_LOG_LIMIT = 100


class EventService(IEventLogger):
    """Application service for recording and reading audit events."""

    def __init__(self, repo: IEventRepository) -> None:
        self.repo = repo

    def create_event(
        self,
        event_type: Any,
        tool_id: Optional[str] = None,
        user_id: Optional[str] = None,
        actor_id: Optional[str] = None,
        notes: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Event:
        """Validate and append one event.

        Raises:
            ValidationError: unknown type, malformed reference ids or
                non-mapping metadata.
            StorageError: the repository could not store the event.
        """
        event_type = validate_event_type(event_type)
        validate_optional_uuid(tool_id, "tool_id")
        validate_optional_uuid(user_id, "user_id")
        validate_optional_uuid(actor_id, "actor_id")
        if metadata is not None and not isinstance(metadata, dict):
            raise ValidationError("metadata must be a mapping", "metadata")

        event = self.repo.create(event_type, tool_id, user_id, actor_id, notes or "", metadata)
        logger.debug(
            "Audit event recorded",
            extra={
                "context": {
                    "event_id": event.id,
                    "event_type": event_type.value,
                    "tool_id": tool_id,
                    "user_id": user_id,
                    "actor_id": actor_id,
                }
            },
        )
        return event

    def _record(
        self,
        event_type: EventType,
        tool_id: Optional[str] = None,
        user_id: Optional[str] = None,
        actor_id: Optional[str] = None,
        notes: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Event]:
        try:
            return self.create_event(event_type, tool_id, user_id, actor_id, notes, metadata)
        except Exception as e:
            logger.error(
                "Failed to record audit event",
                extra={
                    "context": {
                        "event_type": event_type.value,
                        "tool_id": tool_id,
                        "user_id": user_id,
                        "actor_id": actor_id,
                        "error": str(e),
                    }
                },
                exc_info=True,
            )
            return None

    # --- IEventLogger --------------------------------------------------------

    def log_tool_created(self, tool_id, actor_id, notes="", metadata=None):
        return self._record(
            EventType.TOOL_CREATED, tool_id=tool_id, actor_id=actor_id, notes=notes, metadata=metadata
        )

    def log_tool_updated(self, tool_id, actor_id, notes="", metadata=None):
        return self._record(
            EventType.TOOL_UPDATED, tool_id=tool_id, actor_id=actor_id, notes=notes, metadata=metadata
        )

    def log_tool_deleted(self, tool_id, actor_id, notes="", metadata=None):
        return self._record(
            EventType.TOOL_DELETED, tool_id=tool_id, actor_id=actor_id, notes=notes, metadata=metadata
        )

    def log_tool_checked_out(self, tool_id, user_id, actor_id, notes="", metadata=None):
        return self._record(
            EventType.TOOL_CHECKED_OUT,
            tool_id=tool_id,
            user_id=user_id,
            actor_id=actor_id,
            notes=notes,
            metadata=metadata,
        )

    def log_tool_checked_in(self, tool_id, user_id, actor_id, notes="", metadata=None):
        return self._record(
            EventType.TOOL_CHECKED_IN,
            tool_id=tool_id,
            user_id=user_id,
            actor_id=actor_id,
            notes=notes,
            metadata=metadata,
        )

    def log_tool_maintenance(self, tool_id, actor_id, notes="", metadata=None):
        return self._record(
            EventType.TOOL_MAINTENANCE,
            tool_id=tool_id,
            actor_id=actor_id,
            notes=notes,
            metadata=metadata,
        )

    def log_tool_lost(self, tool_id, actor_id, notes="", user_id=None, metadata=None):
        return self._record(
            EventType.TOOL_LOST,
            tool_id=tool_id,
            user_id=user_id,
            actor_id=actor_id,
            notes=notes,
            metadata=metadata,
        )

    def log_user_created(self, user_id, actor_id, notes=""):
        return self._record(EventType.USER_CREATED, user_id=user_id, actor_id=actor_id, notes=notes)

    def log_user_updated(self, user_id, actor_id, notes=""):
        return self._record(EventType.USER_UPDATED, user_id=user_id, actor_id=actor_id, notes=notes)

    def log_user_deleted(self, user_id, actor_id, notes=""):
        return self._record(EventType.USER_DELETED, user_id=user_id, actor_id=actor_id, notes=notes)

    # --- reads ---------------------------------------------------------------

    def get_event(self, event_id: str) -> Event:
        validate_uuid(event_id, "event_id")
        return self.repo.get(event_id)

    def list_events(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        event_type: Optional[Any] = None,
        tool_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> List[Event]:
        """List events newest first, optionally narrowed by type, tool and user."""
        event_filter = EventFilter(
            event_type=validate_event_type(event_type) if event_type is not None else None,
            tool_id=validate_optional_uuid(tool_id, "tool_id"),
            user_id=validate_optional_uuid(user_id, "user_id"),
        )
        limit, offset = clamp_pagination(limit, offset, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)
        if event_filter.is_empty:
            return self.repo.list(limit, offset)
        return self.repo.list_with_filter(event_filter, limit, offset)

    def list_events_by_type(
        self, event_type: Any, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[Event]:
        event_type = validate_event_type(event_type)
        limit, offset = clamp_pagination(limit, offset, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)
        return self.repo.list_by_type(event_type, limit, offset)

    def count_events(self) -> int:
        return self.repo.count()

    def tool_history(self, tool_id: str) -> List[Event]:
        """Every event referencing the tool, newest first, capped at HISTORY_LIMIT."""
        validate_uuid(tool_id, "tool_id")
        return self.repo.list_by_tool(tool_id, HISTORY_LIMIT, 0)

    def user_activity(self, user_id: str) -> List[Event]:
        """Events the user was subject or actor of, newest first, up to HISTORY_LIMIT."""
        validate_uuid(user_id, "user_id")
        return self.repo.list_by_user(user_id, HISTORY_LIMIT, 0)

    def recent_audit_log(self, limit: int = RECENT_AUDIT_LOG_LIMIT) -> List[Event]:
        limit, _ = clamp_pagination(limit, 0, RECENT_AUDIT_LOG_LIMIT, HISTORY_LIMIT)
        return self.repo.list(limit, 0)


class NullEventLogger(IEventLogger):
    """Event logger that records nothing. Default for services built without one."""

    def log_tool_created(self, tool_id, actor_id, notes="", metadata=None):
        return None

    def log_tool_updated(self, tool_id, actor_id, notes="", metadata=None):
        return None

    def log_tool_deleted(self, tool_id, actor_id, notes="", metadata=None):
        return None

    def log_tool_checked_out(self, tool_id, user_id, actor_id, notes="", metadata=None):
        return None

    def log_tool_checked_in(self, tool_id, user_id, actor_id, notes="", metadata=None):
        return None

    def log_tool_maintenance(self, tool_id, actor_id, notes="", metadata=None):
        return None

    def log_tool_lost(self, tool_id, actor_id, notes="", user_id=None, metadata=None):
        return None

    def log_user_created(self, user_id, actor_id, notes=""):
        return None

    def log_user_updated(self, user_id, actor_id, notes=""):
        return None

    def log_user_deleted(self, user_id, actor_id, notes=""):
        return None
