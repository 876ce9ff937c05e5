"""Tests for SQLAlchemy models."""

from datetime import UTC, datetime, timedelta, timezone

from sqlalchemy.dialects import sqlite

from inkwell.models import Base, Book, Section, User
from inkwell.models.database import UTCDateTime


class TestModelImports:
    """Test that all models import correctly."""

    def test_base_metadata_tables(self) -> None:
        """Test that all tables are registered in Base.metadata."""
        assert set(Base.metadata.tables.keys()) == {"users", "books", "sections"}

    def test_user_model_attributes(self) -> None:
        """Test User model has expected attributes."""
        assert hasattr(User, "id")
        assert hasattr(User, "email")
        assert hasattr(User, "hashed_password")
        assert hasattr(User, "created_at")
        assert hasattr(User, "updated_at")
        # Relationships
        assert hasattr(User, "books")

    def test_book_model_attributes(self) -> None:
        """Test Book model has expected attributes."""
        assert hasattr(Book, "id")
        assert hasattr(Book, "user_id")
        assert hasattr(Book, "title")
        assert hasattr(Book, "description")
        assert hasattr(Book, "is_published")
        assert hasattr(Book, "created_at")
        assert hasattr(Book, "updated_at")
        # Relationships
        assert hasattr(Book, "user")
        assert hasattr(Book, "sections")

    def test_section_model_attributes(self) -> None:
        """Test Section model has expected attributes."""
        assert hasattr(Section, "id")
        assert hasattr(Section, "book_id")
        assert hasattr(Section, "title")
        assert hasattr(Section, "story")
        assert hasattr(Section, "order")
        assert hasattr(Section, "word_count")
        assert hasattr(Section, "created_at")
        assert hasattr(Section, "updated_at")
        # Relationships
        assert hasattr(Section, "book")


class TestColumns:
    def test_story_is_unbounded_text(self) -> None:
        assert Section.__table__.c.story.type.__class__.__name__ == "Text"

    def test_email_is_unique(self) -> None:
        assert User.__table__.c.email.unique

    def test_foreign_keys_cascade(self) -> None:
        (book_owner,) = Book.__table__.c.user_id.foreign_keys
        (section_book,) = Section.__table__.c.book_id.foreign_keys
        assert book_owner.ondelete == "CASCADE"
        assert section_book.ondelete == "CASCADE"

    def test_email_is_normalized(self) -> None:
        user = User(email="  Someone@Example.COM ", hashed_password="x")
        assert user.email == "someone@example.com"


class TestRelationships:
    """Test model relationships are correctly defined."""

    def test_user_books_relationship(self) -> None:
        """Test User -> Books relationship."""
        rel = User.books.property
        assert rel.mapper.class_ == Book
        assert rel.back_populates == "user"

    def test_book_sections_relationship(self) -> None:
        """Test Book -> Sections relationship."""
        rel = Book.sections.property
        assert rel.mapper.class_ == Section
        assert rel.back_populates == "book"

    def test_section_book_relationship(self) -> None:
        """Test Section -> Book relationship."""
        rel = Section.book.property
        assert rel.mapper.class_ == Book
        assert rel.back_populates == "sections"

    def test_relationships_never_load_implicitly(self) -> None:
        """Relationships raise on access instead of emitting lazy SQL."""
        for rel in (User.books, Book.user, Book.sections, Section.book):
            assert rel.property.lazy == "raise"


class TestUTCDateTime:
    """Timestamps come back timezone-aware in UTC on every backend."""

    def test_timestamp_columns_use_utc_type(self) -> None:
        for table in (User.__table__, Book.__table__, Section.__table__):
            assert isinstance(table.c.created_at.type, UTCDateTime)
            assert isinstance(table.c.updated_at.type, UTCDateTime)

    def test_naive_result_is_tagged_utc(self) -> None:
        value = UTCDateTime().process_result_value(datetime(2025, 1, 15, 10, 30), sqlite.dialect())
        assert value == datetime(2025, 1, 15, 10, 30, tzinfo=UTC)

    def test_aware_result_is_converted_to_utc(self) -> None:
        plus_two = timezone(timedelta(hours=2))
        value = UTCDateTime().process_result_value(
            datetime(2025, 1, 15, 12, 30, tzinfo=plus_two), sqlite.dialect()
        )
        assert value == datetime(2025, 1, 15, 10, 30, tzinfo=UTC)
        assert value.tzinfo is UTC

    def test_none_passes_through(self) -> None:
        assert UTCDateTime().process_result_value(None, sqlite.dialect()) is None
        assert UTCDateTime().process_bind_param(None, sqlite.dialect()) is None
