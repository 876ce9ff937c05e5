"""Backend services for Inkwell.

Services hold the business rules; routers only translate HTTP to calls on
them and back.

Services:
- users: registration, login, identity lookup
- auth_gate: bearer token -> authenticated user
- books: ownership-scoped book repository
- sections: encrypt-on-write / decrypt-on-read section pipeline

Usage:
    from inkwell.services import SectionPipeline

    pipeline = SectionPipeline(db, get_cipher(), owner_id=user.id)
    created = await pipeline.create(book_id, "Ch1", "Once upon a time")
    listing = await pipeline.list(book_id)
"""

from .auth_gate import AuthenticationError, AuthGate
from .books import BookRepository, BookView
from .errors import (
    BookNotFoundError,
    InvalidCredentialsError,
    NotFoundError,
    SectionNotFoundError,
    ServiceError,
    StoreError,
    UserExistsError,
)
from .sections import (
    DECRYPTION_PLACEHOLDER,
    BookSections,
    SectionPipeline,
    SectionView,
    count_words,
)
from .users import IdentityStore, UserPublic, UserService

__all__ = [
    # Auth
    "AuthGate",
    "AuthenticationError",
    # Users
    "IdentityStore",
    "UserPublic",
    "UserService",
    # Books
    "BookRepository",
    "BookView",
    # Sections
    "SectionPipeline",
    "SectionView",
    "BookSections",
    "DECRYPTION_PLACEHOLDER",
    "count_words",
    # Errors
    "ServiceError",
    "NotFoundError",
    "BookNotFoundError",
    "SectionNotFoundError",
    "UserExistsError",
    "InvalidCredentialsError",
    "StoreError",
]
