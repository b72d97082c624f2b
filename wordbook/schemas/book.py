"""Pydantic schemas for word-book endpoints."""
from __future__ import annotations

from typing import Any, Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    """Envelope wrapped around every API payload."""

    status: Literal["ok", "error"] = "ok"
    data: Optional[DataT] = None
    error: Optional[Any] = None


class WordBookDocument(BaseModel):
    """A whole word-book document as exchanged with clients.

    Unknown keys are preserved so legacy documents round-trip unchanged.
    """

    spec: Optional[str] = None
    id: Optional[str] = None
    name: Optional[str] = None
    version: int = 0

    model_config = ConfigDict(extra="allow")


class WordBookOverviewRead(BaseModel):
    """Entry of the book list."""

    id: str
    name: str
    wordCount: int
    version: int


class BookCreateRequest(BaseModel):
    """Payload for creating a book from a template."""

    template_id: Optional[str] = Field(None, alias="templateId")
    name: str = Field(..., min_length=1, max_length=120)
    words_ratio: float = Field(100, alias="wordsRatio", ge=0, le=100)

    model_config = ConfigDict(populate_by_name=True)


class BookRef(BaseModel):
    """Identifier (and optionally name) of a stored book."""

    id: str
    name: Optional[str] = None
