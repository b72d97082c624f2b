"""Shared API dependencies."""
from __future__ import annotations

from fastapi import HTTPException, Request, status

from wordbook.config import settings
from wordbook.services.book_store import (
    BookRepository,
    JsonDatabaseRepository,
    JsonFileRepository,
    LegacyStateFile,
)

_repository_singleton: BookRepository | None = None


def get_repository() -> BookRepository:
    """Return the book repository selected by ``STORAGE_BACKEND``."""

    global _repository_singleton
    if _repository_singleton is None:
        if settings.STORAGE_BACKEND == "files":
            _repository_singleton = JsonFileRepository(
                settings.DATA_DIR / "books", spec_prefix=settings.SPEC_PREFIX
            )
        else:
            _repository_singleton = JsonDatabaseRepository(
                settings.DATA_DIR / settings.DATABASE_FILE, spec_prefix=settings.SPEC_PREFIX
            )
    return _repository_singleton


def get_state_file() -> LegacyStateFile:
    return LegacyStateFile(settings.DATA_DIR / settings.STATE_FILE, spec_prefix=settings.SPEC_PREFIX)


async def enforce_body_limit(request: Request) -> None:
    """Reject uploads larger than ``MAX_BODY_BYTES``.

    The declared ``Content-Length`` is checked first; chunked uploads carry
    none, so the received body is measured as well.
    """

    length = request.headers.get("content-length")
    too_large = bool(length and length.isdigit() and int(length) > settings.MAX_BODY_BYTES)
    if not too_large:
        too_large = len(await request.body()) > settings.MAX_BODY_BYTES
    if too_large:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="document too large",
        )
