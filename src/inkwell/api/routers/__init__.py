"""API routers for different endpoint groups.

Routers:
- auth: Registration, login and the current user
- books: Books and their encrypted sections
- health: Health check
"""

from .auth import router as auth_router
from .books import router as books_router
from .health import router as health_router

__all__ = [
    "auth_router",
    "books_router",
    "health_router",
]
