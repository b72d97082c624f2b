"""Custom exception classes and error handling utilities."""
from typing import Any, Dict, Optional
from fastapi import HTTPException, status
from loguru import logger


class WordBookError(Exception):
    """Base exception for the application."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class BookNotFoundError(WordBookError):
    """Raised when a word-book id is unknown."""

    status_code = status.HTTP_404_NOT_FOUND


class UnsupportedDocumentError(WordBookError):
    """Raised when a document carries a missing or unrecognised spec."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class StorageError(WordBookError):
    """Raised when the backing JSON files cannot be read or written."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class SyncError(WordBookError):
    """Raised by the sync client on transport or server failures."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, details)
        self.http_status = status_code


def handle_not_found_error(error: BookNotFoundError) -> HTTPException:
    """Handle unknown book ids."""
    logger.info(f"Book not found: {error.message}")
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.message)


def handle_unsupported_document_error(error: UnsupportedDocumentError) -> HTTPException:
    """Handle documents with a missing or unknown spec tag."""
    logger.warning(f"Unsupported document: {error.message}")
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={
            "message": error.message,
            "details": error.details
        }
    )


def handle_storage_error(error: StorageError) -> HTTPException:
    """Handle storage errors and return appropriate HTTP response."""
    logger.error(f"Storage error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Storage operation failed. Please try again later."
    )


def to_http_exception(error: WordBookError) -> HTTPException:
    """Map an application error onto the matching HTTP response."""
    if isinstance(error, BookNotFoundError):
        return handle_not_found_error(error)
    if isinstance(error, UnsupportedDocumentError):
        return handle_unsupported_document_error(error)
    if isinstance(error, StorageError):
        return handle_storage_error(error)
    logger.warning(f"Request failed: {error.message}")
    return HTTPException(status_code=error.status_code, detail=error.message)
