"""OpenAPI configuration and customization for the Inkwell API."""

from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from inkwell.core.config import get_settings

API_TITLE = "Inkwell API"
API_DESCRIPTION = """
# Inkwell API

Backend for writing books section by section.

## Authentication

Register or log in via `/api/auth` to obtain a token, then send it on every
books request:

```
Authorization: Bearer <your-jwt-token>
```

Tokens expire after 7 days by default.

## Storage

Section stories are encrypted at rest with AES-256-CBC. Responses always
carry plaintext; a section whose stored story cannot be decrypted is returned
with the story `[Encryption Error]`.

## Responses

Every response has the form `{"success": bool, "message"?, "data"?, "count"?}`.

| Code | Description |
|------|-------------|
| 400 | Validation failed, or email already registered |
| 401 | Missing, invalid or expired token; bad credentials |
| 404 | Book or section not found (including other users' books) |
| 429 | Too many login/register attempts from this IP |
| 500 | Internal error |
"""

TAGS_METADATA = [
    {
        "name": "health",
        "description": "Health check",
    },
    {
        "name": "auth",
        "description": "Registration, login and the current user",
    },
    {
        "name": "books",
        "description": "Books and their encrypted sections",
    },
]


def custom_openapi(app: FastAPI) -> dict[str, Any]:
    """Generate custom OpenAPI schema with a bearer security scheme.

    Args:
        app: FastAPI application instance

    Returns:
        OpenAPI schema dictionary
    """
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=API_TITLE,
        version=get_settings().app_version,
        description=API_DESCRIPTION,
        routes=app.routes,
        tags=TAGS_METADATA,
    )

    components = openapi_schema.setdefault("components", {})
    components["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": "JWT from /api/auth/login or /api/auth/register",
        },
    }

    # Everything except health and login/register needs a token
    for path, operations in openapi_schema.get("paths", {}).items():
        if path.startswith("/api/books") or path == "/api/auth/me":
            for operation in operations.values():
                operation["security"] = [{"BearerAuth": []}]

    _add_schema_examples(openapi_schema)

    app.openapi_schema = openapi_schema
    return app.openapi_schema


def _add_schema_examples(schema: dict[str, Any]) -> None:
    """Add examples to schema definitions.

    Args:
        schema: OpenAPI schema dictionary to modify in place
    """
    schemas = schema.get("components", {}).get("schemas", {})

    if "SectionView" in schemas:
        schemas["SectionView"]["example"] = {
            "id": "5f0c8a4e-8d7e-4f0e-9a57-2b9f1d7c3a10",
            "title": "Ch1",
            "story": "Once upon a time there was a fox.",
            "book": "0b7e3c1a-2f44-4f5c-8a0e-61d3b5c2e9f7",
            "order": 1,
            "wordCount": 8,
            "createdAt": "2025-01-15T10:30:00Z",
            "updatedAt": "2025-01-15T10:30:00Z",
        }

    if "BookView" in schemas:
        schemas["BookView"]["example"] = {
            "id": "0b7e3c1a-2f44-4f5c-8a0e-61d3b5c2e9f7",
            "title": "My Book",
            "description": "A story about a fox",
            "isPublished": False,
            "user": "9d1e6f0b-3a2c-4b8d-9e7f-1c5a4b3d2e10",
            "createdAt": "2025-01-15T10:30:00Z",
            "updatedAt": "2025-01-15T10:30:00Z",
        }
