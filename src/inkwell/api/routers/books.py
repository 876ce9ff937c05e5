"""Books router: books and their encrypted sections.

Every route requires a bearer token. A book that belongs to another user is
reported exactly like a book that does not exist (404 ``Book not found``).
"""

from typing import Annotated

from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

from inkwell.api.deps import Books, Sections
from inkwell.api.schemas import APIResponse
from inkwell.models.book import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH
from inkwell.services.books import BookView
from inkwell.services.sections import BookSections, SectionView

router = APIRouter()

Title = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=TITLE_MAX_LENGTH),
]
Description = Annotated[
    str,
    StringConstraints(strip_whitespace=True, max_length=DESCRIPTION_MAX_LENGTH),
]


# =============================================================================
# Schemas
# =============================================================================


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookCreateRequest(_CamelModel):
    """Request to create a book."""

    title: Title
    description: Description | None = None


class BookUpdateRequest(_CamelModel):
    """Partial book update; omitted fields are left unchanged."""

    title: Title | None = None
    description: Description | None = None
    is_published: bool | None = None


class SectionCreateRequest(_CamelModel):
    """Request to add a section."""

    title: Title
    story: str = Field(..., min_length=1)

    @field_validator("story")
    @classmethod
    def _story_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Story content cannot be empty")
        return value


class SectionUpdateRequest(_CamelModel):
    """Partial section update; omitted fields are left unchanged."""

    title: Title | None = None
    story: str | None = None
    order: int | None = Field(None, ge=0)


# =============================================================================
# Book endpoints
# =============================================================================


@router.get("", response_model=APIResponse[list[BookView]], response_model_exclude_none=True)
async def list_books(books: Books) -> APIResponse[list[BookView]]:
    """List the current user's books, newest first."""
    items = [BookView.model_validate(book) for book in await books.list()]
    return APIResponse(count=len(items), data=items)


@router.post(
    "",
    response_model=APIResponse[BookView],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_book(request: BookCreateRequest, books: Books) -> APIResponse[BookView]:
    """Create a new book owned by the current user."""
    book = await books.create(request.title, request.description or None)
    return APIResponse(message="Book created successfully", data=BookView.model_validate(book))


@router.get("/{book_id}", response_model=APIResponse[BookView], response_model_exclude_none=True)
async def get_book(book_id: str, books: Books) -> APIResponse[BookView]:
    """Get a single owned book."""
    return APIResponse(data=BookView.model_validate(await books.get(book_id)))


@router.put("/{book_id}", response_model=APIResponse[BookView], response_model_exclude_none=True)
async def update_book(
    book_id: str, request: BookUpdateRequest, books: Books
) -> APIResponse[BookView]:
    """Update the supplied fields of an owned book."""
    changes = request.model_dump(exclude_unset=True)
    if changes.get("title") is None:
        changes.pop("title", None)
    if changes.get("is_published") is None:
        changes.pop("is_published", None)
    book = await books.update(book_id, **changes)
    return APIResponse(message="Book updated successfully", data=BookView.model_validate(book))


@router.delete("/{book_id}", response_model=APIResponse[None], response_model_exclude_none=True)
async def delete_book(book_id: str, books: Books) -> APIResponse[None]:
    """Delete an owned book together with all of its sections."""
    await books.delete(book_id)
    return APIResponse(message="Book and all its sections deleted successfully")


# =============================================================================
# Section endpoints
# =============================================================================


@router.get(
    "/{book_id}/sections",
    response_model=APIResponse[BookSections],
    response_model_exclude_none=True,
)
async def list_sections(book_id: str, sections: Sections) -> APIResponse[BookSections]:
    """Book plus its sections with decrypted stories."""
    listing = await sections.list(book_id)
    return APIResponse(count=len(listing.sections), data=listing)


@router.get(
    "/{book_id}/sections/{section_id}",
    response_model=APIResponse[SectionView],
    response_model_exclude_none=True,
)
async def get_section(
    book_id: str, section_id: str, sections: Sections
) -> APIResponse[SectionView]:
    """Single section with decrypted story."""
    return APIResponse(data=await sections.get(book_id, section_id))


@router.post(
    "/{book_id}/sections",
    response_model=APIResponse[SectionView],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def add_section(
    book_id: str, request: SectionCreateRequest, sections: Sections
) -> APIResponse[SectionView]:
    """Append a section; its story is encrypted before it is stored."""
    section = await sections.create(book_id, request.title, request.story)
    return APIResponse(message="Section added successfully", data=section)


@router.put(
    "/{book_id}/sections/{section_id}",
    response_model=APIResponse[SectionView],
    response_model_exclude_none=True,
)
async def update_section(
    book_id: str,
    section_id: str,
    request: SectionUpdateRequest,
    sections: Sections,
) -> APIResponse[SectionView]:
    """Update the supplied fields of a section."""
    section = await sections.update(
        book_id,
        section_id,
        title=request.title,
        story=request.story,
        order=request.order,
    )
    return APIResponse(message="Section updated successfully", data=section)


@router.delete(
    "/{book_id}/sections/{section_id}",
    response_model=APIResponse[None],
    response_model_exclude_none=True,
)
async def delete_section(
    book_id: str, section_id: str, sections: Sections
) -> APIResponse[None]:
    """Delete one section."""
    await sections.delete(book_id, section_id)
    return APIResponse(message="Section deleted successfully")
