from typing import Dict, List

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from ..core.exceptions import ConflictError, UserNotFoundError
from ..db.base import User as DbUser
from ..domain.entities import User as DomainUser
from ..domain.entities import UserRole
from ..domain.interfaces import IUserRepository
from .base import SqlAlchemyRepository


class UserRepository(SqlAlchemyRepository, IUserRepository):
    """Repository for User persistence operations following SOLID principles.

    This implementation:
    - Implements IUserRepository interface (Dependency Inversion)
    - Handles data access only (Single Responsibility)
    - Can be easily substituted (Liskov Substitution)
    - Maps between domain entities and database models
    """

    def get(self, user_id: str) -> DomainUser:
        """Get user by ID, returning domain entity."""
        with self._storage_errors("get user"):
            db_user = self.db.query(DbUser).filter_by(id=user_id).first()
        if db_user is None:
            raise UserNotFoundError(user_id)
        return self._to_domain(db_user)

    def get_by_email(self, email: str) -> DomainUser:
        """Get user by email, returning domain entity."""
        with self._storage_errors("get user by email"):
            db_user = self.db.query(DbUser).filter_by(email=email).first()
        if db_user is None:
            raise UserNotFoundError()
        return self._to_domain(db_user)

    def list(self, limit: int, offset: int) -> List[DomainUser]:
        with self._storage_errors("list users"):
            db_users = (
                self.db.query(DbUser)
                .order_by(DbUser.created_at.desc(), DbUser.id.desc())
                .limit(limit)
                .offset(offset)
                .all()
            )
        return [self._to_domain(db_user) for db_user in db_users]

    def list_by_role(self, role: UserRole, limit: int, offset: int) -> List[DomainUser]:
        with self._storage_errors("list users by role"):
            db_users = (
                self.db.query(DbUser)
                .filter_by(role=UserRole(role).value)
                .order_by(DbUser.created_at.desc(), DbUser.id.desc())
                .limit(limit)
                .offset(offset)
                .all()
            )
        return [self._to_domain(db_user) for db_user in db_users]

    def count(self) -> int:
        with self._storage_errors("count users"):
            return self.db.query(func.count(DbUser.id)).scalar() or 0

    def count_by_role(self) -> Dict[UserRole, int]:
        with self._storage_errors("count users by role"):
            rows = (
                self.db.query(DbUser.role, func.count(DbUser.id))
                .group_by(DbUser.role)
                .all()
            )
        return {UserRole(role): count for role, count in rows}

    def create(self, name: str, email: str, role: UserRole) -> DomainUser:
        """Insert a new user and return it with its generated ID."""
        db_user = DbUser(name=name, email=email, role=UserRole(role).value)
        with self._storage_errors("create user"):
            try:
                self.db.add(db_user)
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                raise ConflictError(f"user with email '{email}' already exists") from e
            self.db.refresh(db_user)
        return self._to_domain(db_user)

    def update(self, user_id: str, name: str, email: str, role: UserRole) -> DomainUser:
        with self._storage_errors("update user"):
            db_user = self.db.query(DbUser).filter_by(id=user_id).first()
            if db_user is None:
                raise UserNotFoundError(user_id)

            db_user.name = name
            db_user.email = email
            db_user.role = UserRole(role).value
            try:
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                raise ConflictError(f"user with email '{email}' already exists") from e
            self.db.refresh(db_user)
        return self._to_domain(db_user)

    def delete(self, user_id: str) -> None:
        with self._storage_errors("delete user"):
            db_user = self.db.query(DbUser).filter_by(id=user_id).first()
            if db_user is None:
                raise UserNotFoundError(user_id)
            self.db.delete(db_user)
            self.db.commit()

    def _to_domain(self, db_user: DbUser) -> DomainUser:
        """Convert database model to domain entity."""
        return DomainUser(
            id=db_user.id,
            name=db_user.name,
            email=db_user.email,
            role=db_user.role,
            created_at=db_user.created_at,
            updated_at=db_user.updated_at,
        )
