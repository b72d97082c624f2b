"""Single-document state endpoints kept for older clients."""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from wordbook.api import deps
from wordbook.schemas import ApiResponse, WordBookDocument
from wordbook.services.book_store import LegacyStateFile
from wordbook.utils.exceptions import WordBookError, to_http_exception

router = APIRouter(prefix="/state", tags=["state"])


@router.get("", response_model=Dict[str, Any])
def read_state(state_file: LegacyStateFile = Depends(deps.get_state_file)) -> Dict[str, Any]:
    """Return the raw ``state.json`` document."""

    try:
        return state_file.read()
    except WordBookError as exc:
        raise to_http_exception(exc) from exc


@router.post(
    "",
    response_model=ApiResponse[None],
    dependencies=[Depends(deps.enforce_body_limit)],
)
def write_state(
    document: WordBookDocument = Body(...),
    state_file: LegacyStateFile = Depends(deps.get_state_file),
) -> ApiResponse[None]:
    try:
        state_file.write(document.model_dump(exclude_unset=True))
    except WordBookError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse()
