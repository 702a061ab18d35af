"""
User Repository

Lookup and persistence of User rows, used by AuthService and the CLI.
"""
from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from backend.app.db.models import User
from backend.app.repositories.base import STORAGE_ERRORS, DuplicateRecordError, RepositoryError, is_storable_id
from backend.app.utils.datetime_utils import utcnow

logger = structlog.get_logger(__name__)

UPDATABLE_FIELDS = ("email", "password")


class UserRepository:
    """Data access for users. Emails are compared case-insensitively."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(self, user_id: int) -> Optional[User]:
        if not is_storable_id(user_id):
            return None
        try:
            return await self.session.get(User, user_id)
        except STORAGE_ERRORS as e:
            logger.error("Error finding user by id", user_id=user_id, error=str(e))
            raise RepositoryError("Failed to find user") from e

    async def find_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email (case-insensitive).

        Args:
            email: Email to search

        Returns:
            User or None if not found
        """
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        try:
            result = await self.session.execute(stmt)
            return result.scalars().first()
        except STORAGE_ERRORS as e:
            logger.error("Error finding user by email", error=str(e))
            raise RepositoryError("Failed to find user") from e

    async def list_all(self) -> List[User]:
        """All users ordered by id."""
        try:
            result = await self.session.execute(select(User).order_by(User.id))
            return list(result.scalars().all())
        except STORAGE_ERRORS as e:
            logger.error("Error listing users", error=str(e))
            raise RepositoryError("Failed to list users") from e

    async def create(self, email: str, password_hash: str) -> User:
        """
        Insert a new user.

        Args:
            email: Email (stored lower-cased)
            password_hash: bcrypt hash, never the plain password

        Raises:
            DuplicateRecordError: If the email is already registered
            RepositoryError: On any other storage failure
        """
        user = User(email=email.strip().lower(), password=password_hash)
        try:
            self.session.add(user)
            await self.session.commit()
            await self.session.refresh(user)
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning("Duplicate user rejected", error=str(e.orig))
            raise DuplicateRecordError("User already exists") from e
        except STORAGE_ERRORS as e:
            await self.session.rollback()
            logger.error("Error creating user", error=str(e))
            raise RepositoryError("Failed to create user") from e

        logger.info("User created", user_id=user.id)
        return user

    async def update(self, user_id: int, data: Dict[str, Any]) -> Optional[User]:
        """
        Apply a partial update (email and/or password hash).

        Returns:
            The updated user, or None if no user has this id
        """
        if not is_storable_id(user_id):
            return None
        try:
            user = await self.session.get(User, user_id)
            if user is None:
                return None

            for field, value in data.items():
                if field not in UPDATABLE_FIELDS:
                    continue
                setattr(user, field, value.strip().lower() if field == "email" else value)
            user.updated_at = utcnow()

            await self.session.commit()
            await self.session.refresh(user)
            return user
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateRecordError("User already exists") from e
        except STORAGE_ERRORS as e:
            await self.session.rollback()
            logger.error("Error updating user", user_id=user_id, error=str(e))
            raise RepositoryError("Failed to update user") from e

    async def delete(self, user_id: int) -> bool:
        """Delete a user (their transactions cascade). False if not found."""
        if not is_storable_id(user_id):
            return False
        try:
            user = await self.session.get(User, user_id)
            if user is None:
                return False
            await self.session.delete(user)
            await self.session.commit()
            return True
        except STORAGE_ERRORS as e:
            await self.session.rollback()
            logger.error("Error deleting user", user_id=user_id, error=str(e))
            raise RepositoryError("Failed to delete user") from e
