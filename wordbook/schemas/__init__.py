"""Pydantic schemas package."""

from wordbook.schemas.book import (
    ApiResponse,
    BookCreateRequest,
    BookRef,
    WordBookDocument,
    WordBookOverviewRead,
)

__all__ = [
    "ApiResponse",
    "BookCreateRequest",
    "BookRef",
    "WordBookDocument",
    "WordBookOverviewRead",
]
