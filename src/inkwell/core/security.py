"""Security utilities for authentication and authorization."""
import re
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import bcrypt
from jose import JWTError, jwt

from .config import get_settings

BEARER_PREFIX = "Bearer "

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}


class MissingTokenError(Exception):
    """Carrier header is absent or not of the form ``Bearer <token>``."""


class InvalidTokenError(Exception):
    """Token is malformed, has a bad signature, or has expired."""


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        Hashed password string
    """
    # Bcrypt requires bytes and has 72-byte limit
    password_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Previously hashed password

    Returns:
        True if password matches, False otherwise
    """
    try:
        password_bytes = plain_password.encode("utf-8")[:72]
        hashed_bytes = hashed_password.encode("utf-8")
        return bcrypt.checkpw(password_bytes, hashed_bytes)
    except (ValueError, TypeError):
        return False


def parse_duration(value: str | int) -> timedelta:
    """Parse an expiry such as ``7d``, ``12h``, ``30m``, ``45s`` or ``3600``.

    Raises:
        ValueError: If the value is not a recognised duration
    """
    if isinstance(value, int):
        return timedelta(seconds=value)
    match = _DURATION_RE.match(value)
    if match is None:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


class TokenService:
    """Issues and verifies signed, time-limited identity tokens."""

    def __init__(
        self,
        secret: str,
        expires_in: timedelta = timedelta(days=7),
        algorithm: str = "HS256",
    ):
        self.secret = secret
        self.expires_in = expires_in
        self.algorithm = algorithm

    def issue(self, subject_id: str) -> str:
        """Create a token binding ``subject_id``.

        The claims are exactly ``sub``, ``iat`` and ``exp``.

        Args:
            subject_id: Identity the token is issued for (the user id)

        Returns:
            Encoded JWT string
        """
        now = datetime.now(UTC)
        to_encode: dict[str, Any] = {
            "sub": str(subject_id),
            "iat": now,
            "exp": now + self.expires_in,
        }
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """Verify a token and return its subject id.

        Raises:
            InvalidTokenError: If the signature does not match, the token has
                expired, or it carries no subject
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            raise InvalidTokenError("Invalid or expired token") from e
        subject = payload.get("sub")
        if not subject or not isinstance(subject, str):
            raise InvalidTokenError("Invalid or expired token")
        return subject

    @staticmethod
    def extract_from_carrier(header_value: str | None) -> str:
        """Return the token from an ``Authorization: Bearer <token>`` value.

        Raises:
            MissingTokenError: If the value is absent, lacks the ``Bearer ``
                prefix, or has nothing after it
        """
        if not header_value or not header_value.startswith(BEARER_PREFIX):
            raise MissingTokenError("Authorization header must start with Bearer")
        token = header_value[len(BEARER_PREFIX):]
        if not token:
            raise MissingTokenError("Bearer token is empty")
        return token


@lru_cache
def get_token_service() -> TokenService:
    """Get the process-wide token service built from settings."""
    settings = get_settings()
    return TokenService(
        secret=settings.jwt_secret,
        expires_in=parse_duration(settings.jwt_expires_in),
        algorithm=settings.jwt_algorithm,
    )
