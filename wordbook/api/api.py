"""API router."""
from fastapi import APIRouter

from wordbook.api.endpoints import books, state, system


api_router = APIRouter()
api_router.include_router(books.router)
api_router.include_router(state.router)
api_router.include_router(system.router)
