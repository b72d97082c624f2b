"""FastAPI application factory."""
from __future__ import annotations

from typing import List

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from wordbook.api.api import api_router
from wordbook.config import settings
from wordbook.utils.exceptions import WordBookError, to_http_exception


tags_metadata: List[dict[str, str]] = [
    {"name": "books", "description": "List, read, create, save and delete word books."},
    {"name": "state", "description": "Single-document storage used by older clients."},
    {"name": "system", "description": "Liveness probe."},
]


def error_envelope(status_code: int, error: object) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"status": "error", "data": None, "error": error}),
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Personal vocabulary word books.",
        version="0.1.0",
        openapi_tags=tags_metadata,
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=f"{settings.API_PREFIX}/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return error_envelope(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            {"detail": exc.errors(), "message": "Validation failed"},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return error_envelope(exc.status_code, exc.detail)

    @app.exception_handler(WordBookError)
    async def wordbook_exception_handler(request: Request, exc: WordBookError) -> JSONResponse:
        http_exc: HTTPException = to_http_exception(exc)
        return error_envelope(http_exc.status_code, http_exc.detail)

    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app


app = create_app()
