"""Core utilities and configuration for Inkwell.

This module contains:
- Configuration and settings management
- Security utilities (password hashing, JWT tokens)
- Story encryption at rest
"""
from .config import Settings, get_settings, settings
from .encryption import Cipher, ConfigurationError, DecryptionError, get_cipher
from .security import (
    InvalidTokenError,
    MissingTokenError,
    TokenService,
    get_token_service,
    hash_password,
    parse_duration,
    verify_password,
)

__all__ = [
    # Config
    "settings",
    "Settings",
    "get_settings",
    # Encryption
    "Cipher",
    "ConfigurationError",
    "DecryptionError",
    "get_cipher",
    # Security - Password
    "hash_password",
    "verify_password",
    # Security - JWT
    "TokenService",
    "get_token_service",
    "parse_duration",
    "MissingTokenError",
    "InvalidTokenError",
]
