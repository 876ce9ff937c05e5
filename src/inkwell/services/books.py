"""Ownership-scoped access to books.

Every book read, update or delete goes through ``BookRepository``, which is
bound to one owner and filters on ``{id, user_id}``. A book that does not
exist and a book owned by someone else both raise ``BookNotFoundError`` with
the same message.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.models.book import Book, Section

from .errors import BookNotFoundError, store_errors

logger = logging.getLogger(__name__)

UPDATABLE_BOOK_FIELDS = frozenset({"title", "description", "is_published"})


class BookView(BaseModel):
    """Outward-facing book."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    title: str
    description: str | None = None
    is_published: bool
    user: str = Field(validation_alias="user_id")
    created_at: datetime
    updated_at: datetime


class BookRepository:
    """Books visible to a single owner."""

    def __init__(self, db: AsyncSession, owner_id: str):
        self.db = db
        self.owner_id = owner_id

    async def list(self) -> list[Book]:
        """Owner's books, newest first."""
        with store_errors("Failed to fetch books"):
            result = await self.db.execute(
                select(Book)
                .where(Book.user_id == self.owner_id)
                .order_by(Book.created_at.desc())
            )
            return list(result.scalars().all())

    async def get(self, book_id: str) -> Book:
        """Resolve a book by ``{id, owner}``.

        Raises:
            BookNotFoundError: Missing, or owned by another user
        """
        with store_errors("Failed to fetch book"):
            result = await self.db.execute(
                select(Book).where(Book.id == book_id, Book.user_id == self.owner_id)
            )
            book = result.scalar_one_or_none()
        if book is None:
            raise BookNotFoundError()
        return book

    async def create(self, title: str, description: str | None = None) -> Book:
        book = Book(title=title, description=description, user_id=self.owner_id)
        self.db.add(book)
        with store_errors("Failed to create book"):
            await self.db.flush()
        logger.info("New book created: %s by user %s", book.id, self.owner_id)
        return book

    async def update(self, book_id: str, **changes: Any) -> Book:
        """Apply the supplied fields to an owned book.

        Raises:
            BookNotFoundError: Missing, or owned by another user
            ValueError: If a field is not updatable
        """
        unknown = set(changes) - UPDATABLE_BOOK_FIELDS
        if unknown:
            raise ValueError(f"Cannot update book fields: {sorted(unknown)}")
        book = await self.get(book_id)
        for field, value in changes.items():
            setattr(book, field, value)
        with store_errors("Failed to update book"):
            await self.db.flush()
        logger.info("Book updated: %s by user %s", book_id, self.owner_id)
        return book

    async def delete(self, book_id: str) -> None:
        """Delete an owned book and all of its sections.

        Sections are removed first, then the book, as two statements. Both
        run inside the caller's session, so they commit or roll back
        together with the request.

        Raises:
            BookNotFoundError: Missing, or owned by another user
        """
        book = await self.get(book_id)
        with store_errors("Failed to delete book"):
            await self.db.execute(delete(Section).where(Section.book_id == book.id))
            await self.db.execute(delete(Book).where(Book.id == book.id))
        logger.info("Book deleted: %s by user %s", book_id, self.owner_id)
