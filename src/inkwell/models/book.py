"""Book and section models.

A user owns books; a book owns its sections. ``Section.story`` holds hex
ciphertext, never plaintext. ``Section.word_count`` is derived from the
plaintext at write time by the section pipeline.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .database import Base, UTCDateTime
from .user import new_id, utcnow

if TYPE_CHECKING:
    from .user import User

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000


class Book(Base):
    """Book owned by exactly one user."""

    __tablename__ = "books"
    __table_args__ = (Index("ix_books_user_id_created_at", "user_id", "created_at"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH))
    description: Mapped[str | None] = mapped_column(
        String(DESCRIPTION_MAX_LENGTH),
        nullable=True,
    )
    is_published: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        default=utcnow,
        onupdate=utcnow,
    )

    # Relationships
    user: Mapped[User] = relationship("User", back_populates="books", lazy="raise")
    sections: Mapped[list[Section]] = relationship(
        "Section",
        back_populates="book",
        lazy="raise",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}')>"


class Section(Base):
    """Ordered section of a book's story text."""

    __tablename__ = "sections"
    __table_args__ = (
        Index("ix_sections_book_id_order", "book_id", "order"),
        CheckConstraint('"order" >= 0', name="ck_sections_order_non_negative"),
        CheckConstraint("word_count >= 0", name="ck_sections_word_count_non_negative"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    book_id: Mapped[str] = mapped_column(
        ForeignKey("books.id", ondelete="CASCADE"),
        index=True,
    )
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH))
    story: Mapped[str] = mapped_column(Text, default="")
    order: Mapped[int] = mapped_column(Integer, default=0)
    word_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        default=utcnow,
        onupdate=utcnow,
    )

    # Relationships
    book: Mapped[Book] = relationship("Book", back_populates="sections", lazy="raise")

    def __repr__(self) -> str:
        return f"<Section(id={self.id}, book_id={self.book_id}, order={self.order})>"
