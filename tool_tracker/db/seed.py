"""
Database seeding and initialization functions.

This module contains functions that ensure critical data exists in the
database, such as the system actor that unauthenticated actions are
attributed to.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import SYSTEM_ACTOR_ID
from ..domain.entities import UserRole
from .base import User

logger = logging.getLogger(__name__)

SYSTEM_ACTOR_NAME = "System"
SYSTEM_ACTOR_EMAIL = "system@tool-tracker.local"


def ensure_system_actor_user(db: Session, actor_id: Optional[str] = None) -> User:
    """
    Ensure the system actor user exists in the database.

    This function is idempotent - it can be called multiple times safely.
    If the user doesn't exist, it creates it. If it exists, it resets the
    role to ADMIN when it was changed.

    System actor details:
    - id: SYSTEM_ACTOR_ID (00000000-0000-0000-0000-000000000001 by default)
    - email: system@tool-tracker.local
    - name: System
    - role: ADMIN
    """
    actor_id = actor_id or SYSTEM_ACTOR_ID
    try:
        user: Optional[User] = db.get(User, actor_id)

        if user is None:
            user = User(
                id=actor_id,
                name=SYSTEM_ACTOR_NAME,
                email=SYSTEM_ACTOR_EMAIL,
                role=UserRole.ADMIN.value,
            )
            db.add(user)
            db.commit()
            logger.info(
                "System actor user created",
                extra={"context": {"user_id": actor_id, "email": SYSTEM_ACTOR_EMAIL}},
            )
        elif user.role != UserRole.ADMIN.value:
            user.role = UserRole.ADMIN.value
            db.commit()
            logger.info(
                "System actor user updated",
                extra={"context": {"user_id": actor_id, "changes": "role"}},
            )
        else:
            logger.debug(
                "System actor user already exists and is correct",
                extra={"context": {"user_id": actor_id}},
            )
        return user
    except SQLAlchemyError:
        db.rollback()
        logger.error(
            "Failed to ensure system actor user",
            extra={"context": {"user_id": actor_id}},
            exc_info=True,
        )
        raise
