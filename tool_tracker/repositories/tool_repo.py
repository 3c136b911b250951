from typing import Dict, List, Optional

from sqlalchemy import func, select

from ..core.exceptions import ToolNotFoundError
from ..db.base import Tool as DbTool
from ..domain.entities import Tool as DomainTool
from ..domain.entities import ToolStatus
from ..domain.interfaces import IToolRepository
from .base import SqlAlchemyRepository


class ToolRepository(SqlAlchemyRepository, IToolRepository):
    """Repository for Tool persistence operations.

    This implementation:
    - Implements IToolRepository interface (Dependency Inversion)
    - Handles data access only (Single Responsibility)
    - Maps between domain entities and database models
    """

    def create(self, name: str, status: ToolStatus) -> DomainTool:
        """Insert a new tool and return it with its generated ID."""
        with self._storage_errors("create tool"):
            db_tool = DbTool(name=name, status=ToolStatus(status).value)
            self.db.add(db_tool)
            self.db.commit()
            self.db.refresh(db_tool)
            return self._to_domain(db_tool)

    def get(self, tool_id: str) -> DomainTool:
        with self._storage_errors("get tool"):
            db_tool = self._get_db(tool_id)
        if db_tool is None:
            raise ToolNotFoundError(tool_id)
        return self._to_domain(db_tool)

    def update(self, tool: DomainTool) -> DomainTool:
        """Persist the mutable fields of an existing tool."""
        with self._storage_errors("update tool"):
            db_tool = self._get_db(tool.id) if tool.id else None
            if db_tool is None:
                raise ToolNotFoundError(tool.id)

            db_tool.name = tool.name
            db_tool.status = ToolStatus(tool.status).value
            db_tool.current_user_id = tool.current_user_id
            db_tool.last_checked_out_at = tool.last_checked_out_at

            self.db.commit()
            self.db.refresh(db_tool)
            return self._to_domain(db_tool)

    def delete(self, tool_id: str) -> None:
        with self._storage_errors("delete tool"):
            db_tool = self._get_db(tool_id)
            if db_tool is None:
                raise ToolNotFoundError(tool_id)
            self.db.delete(db_tool)
            self.db.commit()

    def list(self, limit: int, offset: int) -> List[DomainTool]:
        query = select(DbTool).order_by(DbTool.created_at.desc(), DbTool.id.desc())
        return self._fetch(query, limit, offset)

    def list_by_status(self, status: ToolStatus, limit: int, offset: int) -> List[DomainTool]:
        query = (
            select(DbTool)
            .where(DbTool.status == ToolStatus(status).value)
            .order_by(DbTool.created_at.desc(), DbTool.id.desc())
        )
        return self._fetch(query, limit, offset)

    def list_by_user(self, user_id: str, limit: int, offset: int) -> List[DomainTool]:
        query = (
            select(DbTool)
            .where(DbTool.current_user_id == user_id)
            .order_by(DbTool.last_checked_out_at.desc(), DbTool.id.desc())
        )
        return self._fetch(query, limit, offset)

    def count(self) -> int:
        with self._storage_errors("count tools"):
            return self.db.scalar(select(func.count()).select_from(DbTool)) or 0

    def count_by_status(self) -> Dict[ToolStatus, int]:
        with self._storage_errors("count tools by status"):
            rows = self.db.execute(
                select(DbTool.status, func.count()).group_by(DbTool.status)
            ).all()
        return {ToolStatus(status): count for status, count in rows}

    def _get_db(self, tool_id: str) -> Optional[DbTool]:
        return self.db.get(DbTool, tool_id)

    def _fetch(self, query, limit: int, offset: int) -> List[DomainTool]:
        with self._storage_errors("list tools"):
            db_tools = self.db.scalars(query.limit(limit).offset(offset)).all()
        return [self._to_domain(db_tool) for db_tool in db_tools]

    def _to_domain(self, db_tool: DbTool) -> DomainTool:
        """Convert database model to domain entity (validates invariants)."""
        return DomainTool(
            id=db_tool.id,
            name=db_tool.name,
            status=db_tool.status,
            current_user_id=db_tool.current_user_id,
            last_checked_out_at=db_tool.last_checked_out_at,
            created_at=db_tool.created_at,
            updated_at=db_tool.updated_at,
        )
