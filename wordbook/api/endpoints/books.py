"""Word-book endpoints."""
from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from wordbook.api import deps
from wordbook.schemas import (
    ApiResponse,
    BookCreateRequest,
    BookRef,
    WordBookDocument,
    WordBookOverviewRead,
)
from wordbook.services.book_store import BookRepository
from wordbook.utils.exceptions import WordBookError, to_http_exception

router = APIRouter(prefix="/books", tags=["books"])


@router.get("", response_model=ApiResponse[List[WordBookOverviewRead]])
def list_books(
    repository: BookRepository = Depends(deps.get_repository),
) -> ApiResponse[List[WordBookOverviewRead]]:
    """Return every book, most recently changed first."""

    try:
        overviews = repository.list_overviews()
    except WordBookError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=[WordBookOverviewRead(**item.to_dict()) for item in overviews])


@router.get("/{book_id}", response_model=ApiResponse[Dict[str, Any]])
def get_book(
    book_id: str, repository: BookRepository = Depends(deps.get_repository)
) -> ApiResponse[Dict[str, Any]]:
    """Return the stored document of a single book."""

    try:
        doc = repository.get(book_id)
    except WordBookError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=doc)


@router.post("", response_model=ApiResponse[BookRef])
def create_book(
    payload: BookCreateRequest,
    repository: BookRepository = Depends(deps.get_repository),
) -> ApiResponse[BookRef]:
    """Create a book from a random sample of a template book's words."""

    try:
        doc = repository.create_from_template(payload.template_id, payload.name, payload.words_ratio)
    except WordBookError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=BookRef(id=doc["id"], name=doc["name"]))


@router.post(
    "/{book_id}",
    response_model=ApiResponse[BookRef],
    dependencies=[Depends(deps.enforce_body_limit)],
)
def update_book(
    book_id: str,
    document: WordBookDocument = Body(...),
    repository: BookRepository = Depends(deps.get_repository),
) -> ApiResponse[BookRef]:
    """Replace a stored book with the full document sent by the client."""

    try:
        repository.update(book_id, document.model_dump(exclude_unset=True))
    except WordBookError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=BookRef(id=book_id))


@router.delete("/{book_id}", response_model=ApiResponse[None])
def delete_book(
    book_id: str, repository: BookRepository = Depends(deps.get_repository)
) -> ApiResponse[None]:
    try:
        repository.delete(book_id)
    except WordBookError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse()
