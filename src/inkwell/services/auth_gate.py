"""Bearer-token authentication gate.

A single fail-closed pass with no retries. The caller only ever learns one of
three fixed messages, never the reason a token was rejected.
"""

from __future__ import annotations

import logging

from inkwell.core.security import InvalidTokenError, MissingTokenError, TokenService

from .errors import StoreError
from .users import IdentityStore, UserPublic

logger = logging.getLogger(__name__)

TOKEN_REQUIRED = "Access token required"
TOKEN_INVALID = "Invalid or expired token"
AUTH_FAILED = "Authentication failed"


class AuthenticationError(Exception):
    """Request rejected by the gate."""

    def __init__(self, message: str, status_code: int = 401, detail: str | None = None):
        self.message = message
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class AuthGate:
    """Resolve an ``Authorization`` header value to a user."""

    def __init__(self, tokens: TokenService, identities: IdentityStore):
        self.tokens = tokens
        self.identities = identities

    async def authenticate(self, header_value: str | None) -> UserPublic:
        """Return the user the carrier header's token belongs to.

        Raises:
            AuthenticationError: 401 when the header is absent or malformed,
                or the token is invalid or expired, or its subject no longer
                exists. 500 when the identity store fails.
        """
        if not header_value:
            raise AuthenticationError(TOKEN_REQUIRED)
        try:
            token = self.tokens.extract_from_carrier(header_value)
        except MissingTokenError as e:
            raise AuthenticationError(TOKEN_REQUIRED) from e

        try:
            user_id = self.tokens.verify(token)
        except InvalidTokenError as e:
            raise AuthenticationError(TOKEN_INVALID) from e

        try:
            user = await self.identities.get_by_id(user_id)
        except StoreError as e:
            logger.exception("Identity lookup failed during authentication")
            raise AuthenticationError(AUTH_FAILED, status_code=500, detail=e.detail) from e

        if user is None:
            raise AuthenticationError(TOKEN_INVALID)
        return user
