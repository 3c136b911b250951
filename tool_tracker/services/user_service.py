import logging
from typing import Any, List, Optional

from ..core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..core.exceptions import ConflictError, UserNotFoundError
from ..core.validation import (
    clamp_pagination,
    validate_email,
    validate_optional_uuid,
    validate_required_field,
    validate_uuid,
)
from ..domain.entities import User, new_user, validate_user_role
from ..domain.interfaces import IEventLogger, IUserRepository
from .event_service import NullEventLogger

logger = logging.getLogger(__name__)


class UserService:
    """Application service for user-related use-cases following SOLID principles.

    This service:
    - Keeps business rules separate from repositories (Single Responsibility)
    - Depends on abstractions (IUserRepository) not concrete implementations (Dependency Inversion)
    - Enforces email uniqueness by lookup before every write
    - Works with domain entities, not database models
    """

    def __init__(self, repo: IUserRepository, events: Optional[IEventLogger] = None) -> None:
        self.repo = repo
        self.events = events or NullEventLogger()

    def _ensure_email_available(self, email: str, user_id: Optional[str] = None) -> None:
        """Raise ConflictError when email belongs to a user other than user_id."""
        try:
            existing = self.repo.get_by_email(email)
        except UserNotFoundError:
            return
        if existing.id != user_id:
            raise ConflictError(f"user with email '{email}' already exists")

    def create_user(
        self,
        name: str,
        email: str,
        role: Optional[Any] = None,
        actor_id: Optional[str] = None,
        notes: str = "",
    ) -> User:
        """Create a user after checking the email is not taken.

        Business Rules:
        - Name is required, email must be well-formed
        - Role defaults to EMPLOYEE
        - Email must not belong to any existing user
        """
        validate_optional_uuid(actor_id, "actor_id")
        draft = new_user(name, email, role)
        self._ensure_email_available(draft.email)

        user = self.repo.create(draft.name, draft.email, draft.role)
        logger.info(
            "User created",
            extra={"context": {"user_id": user.id, "role": user.role.value}},
        )
        self.events.log_user_created(user.id, actor_id, notes)
        return user

    def update_user(
        self,
        user_id: str,
        name: str,
        email: str,
        role: Optional[Any] = None,
        actor_id: Optional[str] = None,
        notes: str = "",
    ) -> User:
        """Overwrite name, email and (when given) role of an existing user.

        Keeping one's own email is always allowed; changing it to an email
        owned by someone else raises ConflictError.
        """
        validate_uuid(user_id, "user_id")
        validate_optional_uuid(actor_id, "actor_id")
        validate_required_field(name, "name")
        email = validate_email(email.strip() if isinstance(email, str) else email, "email")
        if role is not None:
            validate_user_role(role)

        user = self.repo.get(user_id)
        current_email = user.email
        user.name = name.strip()
        user.email = email
        if role is not None:
            user.role = role
        user.validate()

        if user.email != current_email:
            self._ensure_email_available(user.email, user_id)

        updated = self.repo.update(user_id, user.name, user.email, user.role)
        logger.info(
            "User updated",
            extra={"context": {"user_id": user_id, "role": updated.role.value}},
        )
        self.events.log_user_updated(user_id, actor_id, notes)
        return updated

    def delete_user(self, user_id: str, actor_id: Optional[str] = None, notes: str = "") -> None:
        validate_uuid(user_id, "user_id")
        validate_optional_uuid(actor_id, "actor_id")

        self.repo.get(user_id)
        self.repo.delete(user_id)
        logger.info("User deleted", extra={"context": {"user_id": user_id}})
        self.events.log_user_deleted(user_id, actor_id, notes)

    # --- reads ---------------------------------------------------------------

    def get_user(self, user_id: str) -> User:
        validate_uuid(user_id, "user_id")
        return self.repo.get(user_id)

    def get_user_by_email(self, email: str) -> User:
        validate_required_field(email, "email")
        return self.repo.get_by_email(email.strip())

    def list_users(self, limit: Optional[int] = None, offset: Optional[int] = None) -> List[User]:
        limit, offset = clamp_pagination(limit, offset, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)
        return self.repo.list(limit, offset)

    def list_users_by_role(
        self, role: Any, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[User]:
        role = validate_user_role(role)
        limit, offset = clamp_pagination(limit, offset, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)
        return self.repo.list_by_role(role, limit, offset)

    def count_users(self) -> int:
        return self.repo.count()
