"""Tests for the user service."""

from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.models.user import User
from inkwell.services.errors import InvalidCredentialsError, UserExistsError
from inkwell.services.users import UserPublic, UserService

TEST_PASSWORD = "TestPass123"


class TestRegister:
    async def test_stores_hash_not_password(self, db: AsyncSession) -> None:
        user = await UserService(db).register("new@example.com", TEST_PASSWORD)

        stored = await db.get(User, user.id)
        assert stored is not None
        assert stored.hashed_password != TEST_PASSWORD
        assert stored.hashed_password.startswith("$2")

    async def test_email_is_lower_cased(self, db: AsyncSession) -> None:
        user = await UserService(db).register("TEST@EXAMPLE.COM", TEST_PASSWORD)
        assert user.email == "test@example.com"

    async def test_duplicate_email(self, db: AsyncSession, owner: UserPublic) -> None:
        with pytest.raises(UserExistsError, match="User already exists"):
            await UserService(db).register("Owner@Example.com", TEST_PASSWORD)

    async def test_public_projection_has_no_hash(self, owner: UserPublic) -> None:
        assert "hashed_password" not in UserPublic.model_fields
        dumped = owner.model_dump(by_alias=True)
        assert set(dumped) == {"id", "email", "createdAt", "updatedAt"}


class TestAuthenticate:
    async def test_valid_credentials(self, db: AsyncSession, owner: UserPublic) -> None:
        user = await UserService(db).authenticate("owner@example.com", TEST_PASSWORD)
        assert user.id == owner.id

    async def test_wrong_password(self, db: AsyncSession, owner: UserPublic) -> None:
        with pytest.raises(InvalidCredentialsError):
            await UserService(db).authenticate("owner@example.com", "WrongPass123")

    async def test_unknown_email(self, db: AsyncSession) -> None:
        with pytest.raises(InvalidCredentialsError):
            await UserService(db).authenticate("nobody@example.com", TEST_PASSWORD)


class TestGetById:
    async def test_found(self, db: AsyncSession, owner: UserPublic) -> None:
        assert await UserService(db).get_by_id(owner.id) == owner

    async def test_not_found(self, db: AsyncSession) -> None:
        assert await UserService(db).get_by_id("missing") is None

    async def test_reloaded_timestamps_are_utc_aware(
        self, db: AsyncSession, owner: UserPublic
    ) -> None:
        db.expunge_all()

        reloaded = await UserService(db).get_by_id(owner.id)

        assert reloaded is not None
        assert reloaded.created_at.tzinfo is not None
        assert reloaded.created_at.utcoffset() == timedelta(0)
        assert reloaded.created_at == owner.created_at
        assert reloaded.updated_at == owner.updated_at
