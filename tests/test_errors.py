"""Tests for the service error taxonomy."""

import pytest
from sqlalchemy.exc import OperationalError

from inkwell.services.errors import (
    BookNotFoundError,
    InvalidCredentialsError,
    SectionNotFoundError,
    ServiceError,
    StoreError,
    UserExistsError,
    store_errors,
)


class TestMessages:
    @pytest.mark.parametrize(
        ("error", "message"),
        [
            (BookNotFoundError(), "Book not found"),
            (SectionNotFoundError(), "Section not found"),
            (UserExistsError(), "User already exists"),
            (InvalidCredentialsError(), "Invalid credentials"),
            (StoreError("Failed to fetch book", "boom"), "Failed to fetch book"),
        ],
    )
    def test_every_error_carries_its_message(self, error: ServiceError, message: str) -> None:
        assert isinstance(error, ServiceError)
        assert error.message == message
        assert str(error) == message

    def test_not_found_message_override(self) -> None:
        assert BookNotFoundError("Gone").message == "Gone"


class TestStoreErrors:
    def test_wraps_sqlalchemy_errors(self) -> None:
        with pytest.raises(StoreError) as exc_info:
            with store_errors("Failed to fetch books"):
                raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        assert exc_info.value.message == "Failed to fetch books"
        assert "connection refused" in exc_info.value.detail

    def test_other_errors_pass_through(self) -> None:
        with pytest.raises(KeyError):
            with store_errors("Failed to fetch books"):
                raise KeyError("x")
