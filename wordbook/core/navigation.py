"""Pointer and star-filter helpers for paging through a word list."""
from __future__ import annotations

from typing import List, Sequence

from wordbook.core.model import Word

JUMP_TO_END = 100_000
JUMP_TO_START = -JUMP_TO_END


def filter_words(words: Sequence[Word], filter_starred: bool) -> List[Word]:
    """Return the visible words, keeping their original order."""

    if filter_starred:
        return [word for word in words if word.starred]
    return list(words)


def clamp_pointer(pointer: int, size: int) -> int:
    """Clamp ``pointer`` into ``[0, size - 1]``; ``0`` for an empty view."""

    if size <= 0:
        return 0
    return max(0, min(pointer, size - 1))
