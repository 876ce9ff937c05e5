"""FastAPI dependencies for dependency injection.

Provides the database session, the authenticated user, and the services
built on top of them.
"""

from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.core.encryption import Cipher, get_cipher
from inkwell.core.security import TokenService, get_token_service
from inkwell.models.database import get_session
from inkwell.services.auth_gate import AuthGate
from inkwell.services.books import BookRepository
from inkwell.services.sections import SectionPipeline
from inkwell.services.users import UserPublic, UserService

# Database session dependency
DBSession = Annotated[AsyncSession, Depends(get_session)]

CipherDep = Annotated[Cipher, Depends(get_cipher)]
TokensDep = Annotated[TokenService, Depends(get_token_service)]


def get_user_service(db: DBSession) -> UserService:
    return UserService(db)


Users = Annotated[UserService, Depends(get_user_service)]


async def get_current_user(
    request: Request,
    tokens: TokensDep,
    users: Users,
    authorization: Annotated[str | None, Header()] = None,
) -> UserPublic:
    """Authenticate the request's bearer token.

    The resolved user is also attached to ``request.state.user`` for
    downstream use.

    Raises:
        AuthenticationError: Rendered as 401 (or 500 on store failure)
    """
    user = await AuthGate(tokens, users).authenticate(authorization)
    request.state.user = user
    return user


CurrentUser = Annotated[UserPublic, Depends(get_current_user)]


def get_book_repository(db: DBSession, user: CurrentUser) -> BookRepository:
    return BookRepository(db, owner_id=user.id)


def get_section_pipeline(
    db: DBSession, user: CurrentUser, cipher: CipherDep
) -> SectionPipeline:
    return SectionPipeline(db, cipher, owner_id=user.id)


Books = Annotated[BookRepository, Depends(get_book_repository)]
Sections = Annotated[SectionPipeline, Depends(get_section_pipeline)]
