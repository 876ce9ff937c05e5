"""Tests for the ownership-scoped book repository."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.core.encryption import Cipher
from inkwell.models.book import Book, Section
from inkwell.services.books import BookRepository, BookView
from inkwell.services.errors import BookNotFoundError
from inkwell.services.sections import SectionPipeline
from inkwell.services.users import UserPublic


class TestBookRepository:
    async def test_create(self, db: AsyncSession, owner: UserPublic) -> None:
        book = await BookRepository(db, owner.id).create("My Book", "A description")

        assert book.id
        assert book.title == "My Book"
        assert book.description == "A description"
        assert book.is_published is False
        assert book.user_id == owner.id

    async def test_list_is_newest_first_and_scoped(
        self, db: AsyncSession, owner: UserPublic, stranger: UserPublic
    ) -> None:
        mine = BookRepository(db, owner.id)
        first = await mine.create("First")
        second = await mine.create("Second")
        await BookRepository(db, stranger.id).create("Not mine")

        books = await mine.list()

        assert [b.id for b in books] == [second.id, first.id]

    async def test_get_missing_and_foreign_look_the_same(
        self, db: AsyncSession, owner: UserPublic, stranger: UserPublic
    ) -> None:
        book = await BookRepository(db, owner.id).create("Private")
        theirs = BookRepository(db, stranger.id)

        with pytest.raises(BookNotFoundError) as foreign:
            await theirs.get(book.id)
        with pytest.raises(BookNotFoundError) as missing:
            await theirs.get("no-such-book")

        assert foreign.value.message == missing.value.message == "Book not found"

    async def test_update(self, db: AsyncSession, owner: UserPublic) -> None:
        repo = BookRepository(db, owner.id)
        book = await repo.create("Draft")

        updated = await repo.update(book.id, title="Final", is_published=True)

        assert updated.title == "Final"
        assert updated.is_published is True

    async def test_update_rejects_unknown_fields(self, db: AsyncSession, owner: UserPublic) -> None:
        repo = BookRepository(db, owner.id)
        book = await repo.create("Draft")
        with pytest.raises(ValueError):
            await repo.update(book.id, user_id="someone-else")

    async def test_update_foreign_book(
        self, db: AsyncSession, owner: UserPublic, stranger: UserPublic
    ) -> None:
        book = await BookRepository(db, owner.id).create("Mine")
        with pytest.raises(BookNotFoundError):
            await BookRepository(db, stranger.id).update(book.id, title="Stolen")
        assert (await BookRepository(db, owner.id).get(book.id)).title == "Mine"

    async def test_delete_cascades_to_sections(
        self, db: AsyncSession, cipher: Cipher, owner: UserPublic
    ) -> None:
        repo = BookRepository(db, owner.id)
        doomed = await repo.create("Doomed")
        kept = await repo.create("Kept")
        pipeline = SectionPipeline(db, cipher, owner.id)
        for title in ("Ch1", "Ch2", "Ch3"):
            await pipeline.create(doomed.id, title, "some story")
        await pipeline.create(kept.id, "Ch1", "another story")

        await repo.delete(doomed.id)

        with pytest.raises(BookNotFoundError):
            await repo.get(doomed.id)
        orphans = await db.scalar(
            select(func.count()).select_from(Section).where(Section.book_id == doomed.id)
        )
        assert orphans == 0
        survivors = await db.scalar(
            select(func.count()).select_from(Section).where(Section.book_id == kept.id)
        )
        assert survivors == 1

    async def test_delete_foreign_book(
        self, db: AsyncSession, owner: UserPublic, stranger: UserPublic
    ) -> None:
        book = await BookRepository(db, owner.id).create("Mine")
        with pytest.raises(BookNotFoundError):
            await BookRepository(db, stranger.id).delete(book.id)
        assert await db.get(Book, book.id) is not None


class TestBookView:
    async def test_serializes_owner_as_user(self, db: AsyncSession, owner: UserPublic) -> None:
        book = await BookRepository(db, owner.id).create("My Book")

        dumped = BookView.model_validate(book).model_dump(by_alias=True)

        assert dumped["user"] == owner.id
        assert dumped["isPublished"] is False
        assert {"createdAt", "updatedAt"} <= set(dumped)
