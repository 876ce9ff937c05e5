"""Inkwell - write books section by section, with stories encrypted at rest.

Quick Start:
    uvicorn inkwell.api.main:app

    # or, from Python
    from inkwell.services import SectionPipeline
    from inkwell.core import get_cipher

    pipeline = SectionPipeline(db, get_cipher(), owner_id=user.id)
    section = await pipeline.create(book_id, "Ch1", "Once upon a time")

Architecture:
    request -> AuthGate (bearer token -> user)
            -> BookRepository (ownership-scoped book lookup)
            -> SectionPipeline (order, encrypt, word count) -> database
"""

__version__ = "0.1.0"
