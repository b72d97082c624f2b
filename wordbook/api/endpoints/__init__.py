"""API endpoint modules."""

from wordbook.api.endpoints import books, state, system

__all__ = [
    "books",
    "state",
    "system",
]
