"""Authentication router for registration, login and the current user.

Tokens are stateless JWTs returned in the response body; clients send them
back as ``Authorization: Bearer <token>``.
"""

import re

from fastapi import APIRouter, status
from pydantic import BaseModel, EmailStr, Field, field_validator

from inkwell.api.deps import CurrentUser, TokensDep, Users
from inkwell.api.schemas import APIResponse
from inkwell.services.users import UserPublic

router = APIRouter()

PASSWORD_MIN_LENGTH = 6
_PASSWORD_CLASSES = (
    re.compile(r"[a-z]"),
    re.compile(r"[A-Z]"),
    re.compile(r"\d"),
)


# =============================================================================
# Schemas
# =============================================================================


class RegisterRequest(BaseModel):
    """User registration request."""

    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=128)

    @field_validator("password")
    @classmethod
    def _password_strength(cls, value: str) -> str:
        if not all(pattern.search(value) for pattern in _PASSWORD_CLASSES):
            raise ValueError(
                "Password must contain at least one uppercase letter, "
                "one lowercase letter, and one number"
            )
        return value


class LoginRequest(BaseModel):
    """User login request."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthenticatedUser(UserPublic):
    """User plus a freshly issued access token."""

    token: str


# =============================================================================
# Endpoints
# =============================================================================


@router.post(
    "/register",
    response_model=APIResponse[AuthenticatedUser],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    request: RegisterRequest,
    users: Users,
    tokens: TokensDep,
) -> APIResponse[AuthenticatedUser]:
    """Register a new user.

    Raises:
        UserExistsError: If the email is already registered (400)
    """
    user = await users.register(request.email, request.password)
    return APIResponse(
        message="User registered successfully",
        data=AuthenticatedUser(**user.model_dump(), token=tokens.issue(user.id)),
    )


@router.post(
    "/login",
    response_model=APIResponse[AuthenticatedUser],
    response_model_exclude_none=True,
)
async def login(
    request: LoginRequest,
    users: Users,
    tokens: TokensDep,
) -> APIResponse[AuthenticatedUser]:
    """Login with email and password.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password (401)
    """
    user = await users.authenticate(request.email, request.password)
    return APIResponse(
        message="Login successful",
        data=AuthenticatedUser(**user.model_dump(), token=tokens.issue(user.id)),
    )


@router.get("/me", response_model=APIResponse[UserPublic], response_model_exclude_none=True)
async def get_current_user_info(user: CurrentUser) -> APIResponse[UserPublic]:
    """Get current authenticated user info."""
    return APIResponse(data=user)
