"""Word and word-book records held in memory."""
from __future__ import annotations

import re
import secrets
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Set

SPEC_PREFIX = "wordbook/"
CURRENT_SPEC = "wordbook/2"
MAX_STARS = 3

_ID_ALPHABET = "1234567890abcdef"
_ID_LENGTH = 12
_ALPHA_NAME = re.compile(r"[a-z]+", re.IGNORECASE)


def now_ms() -> int:
    """Return the current time in epoch milliseconds."""

    return int(time.time() * 1000)


def new_id() -> str:
    """Return a short random identifier."""

    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))


def clamp_stars(value: Any) -> int:
    try:
        stars = int(value)
    except (TypeError, ValueError):
        return 0
    return max(0, min(MAX_STARS, stars))


@dataclass
class Word:
    """A single vocabulary entry."""

    id: str
    name: str
    remark: str = ""
    example: str = ""
    translation: str = ""
    stars: int = 0
    starred: bool = False
    bookmarked: bool = False
    type: Set[str] = field(default_factory=set)
    created_on: int = 0
    last_modified: int = 0

    def set_stars(self, value: int) -> None:
        """Set the rating and keep ``starred`` in step with it."""

        self.stars = clamp_stars(value)
        self.starred = self.stars > 0

    def touch(self) -> None:
        """Advance ``last_modified`` past its previous value."""

        self.last_modified = max(now_ms(), self.last_modified + 1)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "remark": self.remark,
            "example": self.example,
            "translation": self.translation,
            "stars": self.stars,
            "starred": self.starred,
            "bookmarked": self.bookmarked,
            "type": sorted(self.type),
            "createdOn": self.created_on,
            "lastModified": self.last_modified,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Word":
        """Build a word from an already normalised document entry."""

        return cls(
            id=str(data["id"]),
            name=data["name"],
            remark=data.get("remark", ""),
            example=data.get("example", ""),
            translation=data.get("translation", ""),
            stars=data.get("stars", 0),
            starred=data.get("starred", False),
            bookmarked=data.get("bookmarked", False),
            type=set(data.get("type") or ()),
            created_on=data.get("createdOn", 0),
            last_modified=data.get("lastModified", 0),
        )

    def copy(self) -> "Word":
        return Word.from_dict(self.to_dict())


@dataclass
class WordBookOverview:
    """Read-only projection shown in the book list."""

    id: str
    name: str
    word_count: int
    version: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "wordCount": self.word_count,
            "version": self.version,
        }


@dataclass
class WordBook:
    """A named, versioned collection of words."""

    id: str
    name: str
    spec: str = CURRENT_SPEC
    version: int = 0
    words: List[Word] = field(default_factory=list)

    def bump_version(self) -> int:
        """Move ``version`` strictly forward, preferring the current time."""

        self.version = max(now_ms(), self.version + 1)
        return self.version

    def find_index(self, word_id: str) -> int:
        for index, word in enumerate(self.words):
            if word.id == word_id:
                return index
        return -1

    def find_by_name(self, name: str) -> Word | None:
        for word in self.words:
            if word.name == name:
                return word
        return None

    def overview(self) -> WordBookOverview:
        return WordBookOverview(
            id=self.id, name=self.name, word_count=len(self.words), version=self.version
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "spec": self.spec,
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "words": [word.to_dict() for word in self.words],
        }


def derive_book_id(name: str | None, taken: Iterable[str] = ()) -> str:
    """Use a purely alphabetic name as the id, otherwise a random one."""

    taken = set(taken)
    if name and _ALPHA_NAME.fullmatch(name) and name not in taken:
        return name
    candidate = new_id()
    while candidate in taken:
        candidate = new_id()
    return candidate
