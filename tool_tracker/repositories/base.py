import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import StorageError

logger = logging.getLogger(__name__)


class SqlAlchemyRepository:
    """Shared plumbing for repositories bound to one SQLAlchemy session."""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    @contextmanager
    def _storage_errors(self, action: str) -> Iterator[None]:
        """Roll back and re-raise driver failures as StorageError."""
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"Failed to {action}",
                extra={"context": {"error": str(e)}},
            )
            raise StorageError(f"failed to {action}: {e}") from e
