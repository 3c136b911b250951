from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_

from ..core.exceptions import EventNotFoundError
from ..db.base import Event as DbEvent
from ..domain.entities import Event as DomainEvent
from ..domain.entities import EventType
from ..domain.interfaces import EventFilter, IEventRepository
from .base import SqlAlchemyRepository


class EventRepository(SqlAlchemyRepository, IEventRepository):
    """Append-only store for audit events.

    Every list query orders by created_at descending, so the newest event
    comes first; rows sharing a timestamp fall back to id order. A user
    filter matches events where the user is either the subject or the actor.
    """

    def create(
        self,
        event_type: EventType,
        tool_id: Optional[str],
        user_id: Optional[str],
        actor_id: Optional[str],
        notes: str,
        metadata: Optional[Dict[str, Any]],
    ) -> DomainEvent:
        db_event = DbEvent(
            type=EventType(event_type).value,
            tool_id=tool_id,
            user_id=user_id,
            actor_id=actor_id,
            notes=notes or "",
            event_metadata=metadata,
        )
        with self._storage_errors("create event"):
            self.db.add(db_event)
            self.db.commit()
            self.db.refresh(db_event)
        return self._to_domain(db_event)

    def get(self, event_id: str) -> DomainEvent:
        with self._storage_errors("get event"):
            db_event = self.db.query(DbEvent).filter_by(id=event_id).first()
        if db_event is None:
            raise EventNotFoundError(event_id)
        return self._to_domain(db_event)

    def list(self, limit: int, offset: int) -> List[DomainEvent]:
        return self.list_with_filter(EventFilter(), limit, offset)

    def list_by_type(self, event_type: EventType, limit: int, offset: int) -> List[DomainEvent]:
        return self.list_with_filter(EventFilter(event_type=event_type), limit, offset)

    def list_by_tool(self, tool_id: str, limit: int, offset: int) -> List[DomainEvent]:
        return self.list_with_filter(EventFilter(tool_id=tool_id), limit, offset)

    def list_by_user(self, user_id: str, limit: int, offset: int) -> List[DomainEvent]:
        return self.list_with_filter(EventFilter(user_id=user_id), limit, offset)

    def list_with_filter(
        self, event_filter: EventFilter, limit: int, offset: int
    ) -> List[DomainEvent]:
        query = self.db.query(DbEvent)
        if event_filter.event_type is not None:
            query = query.filter(DbEvent.type == EventType(event_filter.event_type).value)
        if event_filter.tool_id is not None:
            query = query.filter(DbEvent.tool_id == event_filter.tool_id)
        if event_filter.user_id is not None:
            user_id = event_filter.user_id
            query = query.filter(or_(DbEvent.user_id == user_id, DbEvent.actor_id == user_id))

        with self._storage_errors("list events"):
            db_events = (
                query.order_by(DbEvent.created_at.desc(), DbEvent.id.desc())
                .limit(limit)
                .offset(offset)
                .all()
            )
        return [self._to_domain(db_event) for db_event in db_events]

    def count(self) -> int:
        with self._storage_errors("count events"):
            return self.db.query(func.count(DbEvent.id)).scalar() or 0

    def _to_domain(self, db_event: DbEvent) -> DomainEvent:
        return DomainEvent(
            id=db_event.id,
            event_type=db_event.type,
            tool_id=db_event.tool_id,
            user_id=db_event.user_id,
            actor_id=db_event.actor_id,
            notes=db_event.notes,
            metadata=db_event.event_metadata,
            created_at=db_event.created_at,
        )
