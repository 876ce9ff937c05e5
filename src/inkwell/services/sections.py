"""Section pipeline: ownership check, ordering, encryption and word counts.

Story text is encrypted before it reaches the database and decrypted after
it is read back. Plaintext only exists in memory while a request runs.
Responses to writes echo the plaintext the caller supplied and never
re-decrypt the stored value. Reads decrypt each section on its own, so one
corrupt record degrades to ``DECRYPTION_PLACEHOLDER`` instead of failing the
whole listing.

Order numbers for new sections are ``max(order) + 1`` within the book, read
then written without a lock. Two concurrent creates on the same book can
therefore get the same order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.core.encryption import Cipher, DecryptionError
from inkwell.models.book import Book, Section

from .books import BookRepository, BookView
from .errors import SectionNotFoundError, store_errors

logger = logging.getLogger(__name__)

DECRYPTION_PLACEHOLDER = "[Encryption Error]"


def count_words(text: str) -> int:
    """Number of whitespace-delimited words; 0 for blank text."""
    return len(text.split())


class SectionView(BaseModel):
    """Outward-facing section with plaintext (or placeholder) story."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    story: str
    book: str
    order: int
    word_count: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_section(cls, section: Section, story: str) -> SectionView:
        return cls(
            id=section.id,
            title=section.title,
            story=story,
            book=section.book_id,
            order=section.order,
            word_count=section.word_count,
            created_at=section.created_at,
            updated_at=section.updated_at,
        )


class BookSections(BaseModel):
    """A book together with its decrypted sections."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    book: BookView
    sections: list[SectionView] = Field(default_factory=list)


@dataclass(frozen=True)
class OpenedStory:
    """Result of decrypting one stored story."""

    text: str
    ok: bool


class SectionPipeline:
    """Section operations for one requesting user."""

    def __init__(self, db: AsyncSession, cipher: Cipher, owner_id: str):
        self.db = db
        self.cipher = cipher
        self.owner_id = owner_id
        self.books = BookRepository(db, owner_id)

    def open_story(self, section: Section) -> OpenedStory:
        """Decrypt a stored story, substituting the placeholder on failure."""
        try:
            return OpenedStory(self.cipher.decrypt(section.story), ok=True)
        except DecryptionError as e:
            logger.error("Failed to decrypt story for section %s: %s", section.id, e)
            return OpenedStory(DECRYPTION_PLACEHOLDER, ok=False)

    async def _next_order(self, book_id: str) -> int:
        result = await self.db.execute(
            select(func.max(Section.order)).where(Section.book_id == book_id)
        )
        current = result.scalar_one_or_none()
        return 1 if current is None else current + 1

    async def _get_section(self, book: Book, section_id: str) -> Section:
        with store_errors("Failed to fetch section"):
            result = await self.db.execute(
                select(Section).where(Section.id == section_id, Section.book_id == book.id)
            )
            section = result.scalar_one_or_none()
        if section is None:
            raise SectionNotFoundError()
        return section

    async def create(self, book_id: str, title: str, story: str) -> SectionView:
        """Add a section at the end of an owned book.

        Raises:
            BookNotFoundError: Missing, or owned by another user
            StoreError: On persistence failure
        """
        book = await self.books.get(book_id)
        with store_errors("Failed to add section"):
            order = await self._next_order(book.id)
            section = Section(
                title=title,
                story=self.cipher.encrypt(story),
                book_id=book.id,
                order=order,
                word_count=count_words(story),
            )
            self.db.add(section)
            await self.db.flush()
        logger.info("New section added to book %s: %s", book.id, section.id)
        return SectionView.from_section(section, story)

    async def list(self, book_id: str) -> BookSections:
        """Owned book plus its sections sorted by (order, created_at).

        Raises:
            BookNotFoundError: Missing, or owned by another user
        """
        book = await self.books.get(book_id)
        with store_errors("Failed to fetch book sections"):
            result = await self.db.execute(
                select(Section)
                .where(Section.book_id == book.id)
                .order_by(Section.order.asc(), Section.created_at.asc())
            )
            sections = result.scalars().all()
        opened = [(section, self.open_story(section)) for section in sections]
        unreadable = sum(1 for _, story in opened if not story.ok)
        if unreadable:
            logger.warning(
                "Book %s: %d of %d sections could not be decrypted",
                book.id,
                unreadable,
                len(opened),
            )
        views = [SectionView.from_section(section, story.text) for section, story in opened]
        return BookSections(book=BookView.model_validate(book), sections=views)

    async def get(self, book_id: str, section_id: str) -> SectionView:
        """Single section with decrypted story (or placeholder).

        Raises:
            BookNotFoundError: Missing, or owned by another user
            SectionNotFoundError: No such section in this book
        """
        book = await self.books.get(book_id)
        section = await self._get_section(book, section_id)
        return SectionView.from_section(section, self.open_story(section).text)

    async def update(
        self,
        book_id: str,
        section_id: str,
        *,
        title: str | None = None,
        story: str | None = None,
        order: int | None = None,
    ) -> SectionView:
        """Update fields that were supplied.

        A new story is re-encrypted and its word count recomputed. ``order``
        replaces the stored value as-is; other sections are not renumbered.

        Raises:
            BookNotFoundError: Missing, or owned by another user
            SectionNotFoundError: No such section in this book
        """
        book = await self.books.get(book_id)
        section = await self._get_section(book, section_id)

        changes: dict[str, Any] = {}
        if title is not None:
            changes["title"] = title
        if story is not None:
            changes["story"] = self.cipher.encrypt(story)
            changes["word_count"] = count_words(story)
        if order is not None:
            changes["order"] = order
        for field, value in changes.items():
            setattr(section, field, value)

        with store_errors("Failed to update section"):
            await self.db.flush()
        logger.info("Section updated: %s in book %s", section_id, book.id)

        text = story if story is not None else self.open_story(section).text
        return SectionView.from_section(section, text)

    async def delete(self, book_id: str, section_id: str) -> None:
        """Delete one section of an owned book.

        Raises:
            BookNotFoundError: Missing, or owned by another user
            SectionNotFoundError: No such section in this book
        """
        book = await self.books.get(book_id)
        section = await self._get_section(book, section_id)
        with store_errors("Failed to delete section"):
            await self.db.delete(section)
            await self.db.flush()
        logger.info("Section deleted: %s from book %s", section_id, book.id)
