"""User registration, login and identity lookup."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Protocol

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.core.security import hash_password, verify_password
from inkwell.models.user import User

from .errors import InvalidCredentialsError, StoreError, UserExistsError, store_errors

logger = logging.getLogger(__name__)


class UserPublic(BaseModel):
    """Outward-facing user. Has no password hash field to leak."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    email: str
    created_at: datetime
    updated_at: datetime


class IdentityStore(Protocol):
    """Lookup of a user by identity, used by the auth gate."""

    async def get_by_id(self, user_id: str) -> UserPublic | None:
        """Return the user, or None if there is no such user.

        Raises:
            StoreError: On a storage fault (not on "not found")
        """
        ...


class UserService:
    """Service for user accounts backed by SQLAlchemy."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: str) -> UserPublic | None:
        with store_errors("Failed to load user"):
            user = await self.db.get(User, user_id)
        return UserPublic.model_validate(user) if user else None

    async def get_by_email(self, email: str) -> User | None:
        with store_errors("Failed to load user"):
            result = await self.db.execute(
                select(User).where(User.email == email.strip().lower())
            )
            return result.scalar_one_or_none()

    async def register(self, email: str, password: str) -> UserPublic:
        """Create a user with a bcrypt-hashed password.

        Raises:
            UserExistsError: If the email is already registered
            StoreError: On persistence failure
        """
        if await self.get_by_email(email) is not None:
            raise UserExistsError()

        user = User(email=email, hashed_password=hash_password(password))
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same email
            await self.db.rollback()
            raise UserExistsError() from e
        except SQLAlchemyError as e:
            raise StoreError("Failed to register user", str(e)) from e

        logger.info("New user registered: %s", user.email)
        return UserPublic.model_validate(user)

    async def authenticate(self, email: str, password: str) -> UserPublic:
        """Check credentials.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
        """
        user = await self.get_by_email(email)
        if user is None or not verify_password(password, user.hashed_password):
            raise InvalidCredentialsError()
        logger.info("User logged in: %s", user.email)
        return UserPublic.model_validate(user)
