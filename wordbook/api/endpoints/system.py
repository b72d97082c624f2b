"""Liveness endpoint."""
from __future__ import annotations

from fastapi import APIRouter

from wordbook.schemas import ApiResponse

router = APIRouter(tags=["system"])


@router.get("/ping", response_model=ApiResponse[str])
def ping() -> ApiResponse[str]:
    return ApiResponse(data="pong")
