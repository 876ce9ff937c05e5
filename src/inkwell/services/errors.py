"""Service-level exceptions.

Routers translate these into HTTP responses in ``inkwell.api.exceptions``.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError


class ServiceError(Exception):
    """Base exception for service errors.

    ``message`` is the client-facing text the API renders.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(ServiceError):
    """Resource does not exist or is not owned by the caller.

    The two cases are deliberately indistinguishable.
    """

    resource = "Resource"

    def __init__(self, message: str | None = None):
        super().__init__(message or f"{self.resource} not found")


class BookNotFoundError(NotFoundError):
    resource = "Book"


class SectionNotFoundError(NotFoundError):
    resource = "Section"


class UserExistsError(ServiceError):
    """Email is already registered."""

    def __init__(self, message: str = "User already exists"):
        super().__init__(message)


class InvalidCredentialsError(ServiceError):
    """Unknown email or wrong password."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class StoreError(ServiceError):
    """Persistence fault (connection, constraint, driver error)."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.detail = detail


@contextmanager
def store_errors(message: str) -> Iterator[None]:
    """Re-raise any SQLAlchemy error inside the block as ``StoreError``."""
    try:
        yield
    except SQLAlchemyError as e:
        raise StoreError(message, str(e)) from e
