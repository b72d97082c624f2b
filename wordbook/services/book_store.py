"""JSON-file persistence for word-book documents.

Documents are stored exactly as clients send them, after a spec prefix check.
Every write replaces the whole file; concurrent writers to the same book lose
updates (last write wins).
"""
from __future__ import annotations

import copy
import json
import math
import os
import random
import re
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

from wordbook.core.migration import LEGACY_WORDS_KEY, has_supported_spec
from wordbook.core.model import CURRENT_SPEC, SPEC_PREFIX, WordBookOverview, derive_book_id, now_ms
from wordbook.utils.exceptions import BookNotFoundError, StorageError, UnsupportedDocumentError

Document = Dict[str, Any]

_SAFE_ID = re.compile(r"^[\w-]+$")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def document_words(doc: Document) -> List[Any]:
    words = doc.get("words")
    if words is None:
        words = doc.get(LEGACY_WORDS_KEY)
    return words if isinstance(words, list) else []


def overview_of(doc: Document) -> WordBookOverview:
    return WordBookOverview(
        id=str(doc.get("id", "")),
        name=str(doc.get("name") or doc.get("id", "")),
        word_count=len(document_words(doc)),
        version=int(doc.get("version") or 0),
    )


def read_json(path: Path, default: Any = None) -> Any:
    if not path.exists():
        return default
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise StorageError(f"Corrupt JSON file: {path}", {"error": str(exc)}) from exc
    except OSError as exc:
        raise StorageError(f"Cannot read {path}", {"error": str(exc)}) from exc


def write_json(path: Path, payload: Any) -> None:
    """Write ``payload`` through a temporary file so readers never see half a file."""

    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_name = f.name
            json.dump(payload, f, ensure_ascii=False, indent=2)
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise StorageError(f"Cannot write {path}", {"error": str(exc)}) from exc


class BookRepository:
    """Common book operations on top of a handful of storage primitives."""

    def __init__(self, *, spec_prefix: str = SPEC_PREFIX, rng: Optional[random.Random] = None):
        self.spec_prefix = spec_prefix
        self.rng = rng or random.Random()
        # held across each read-modify-write cycle
        self._lock = threading.RLock()

    # storage primitives

    def _documents(self) -> List[Document]:  # pragma: no cover - interface definition
        raise NotImplementedError

    def _find(self, book_id: str) -> Optional[Document]:  # pragma: no cover - interface definition
        raise NotImplementedError

    def _insert(self, doc: Document) -> None:  # pragma: no cover - interface definition
        raise NotImplementedError

    def _replace(self, book_id: str, doc: Document) -> None:  # pragma: no cover - interface definition
        raise NotImplementedError

    def _remove(self, book_id: str) -> None:  # pragma: no cover - interface definition
        raise NotImplementedError

    # operations

    def list_overviews(self) -> List[WordBookOverview]:
        """Return every book, newest version first."""

        overviews = [overview_of(doc) for doc in self._documents()]
        return sorted(overviews, key=lambda item: -item.version)

    def get(self, book_id: str) -> Document:
        doc = self._find(book_id)
        if doc is None:
            raise BookNotFoundError("no such book.", {"book_id": book_id})
        return doc

    def create_from_template(
        self, template_id: Optional[str], name: str, words_ratio: float = 100
    ) -> Document:
        """Create a book holding a random sample of another book's words.

        Without ``template_id`` an empty book is created.
        """

        with self._lock:
            if template_id:
                doc = copy.deepcopy(self.get(template_id))
            else:
                doc = {"spec": CURRENT_SPEC, "words": []}

            key = "words" if "words" in doc or LEGACY_WORDS_KEY not in doc else LEGACY_WORDS_KEY
            words = document_words(doc)
            size = min(len(words), round_half_up(len(words) * words_ratio / 100))
            doc[key] = self.rng.sample(words, size)

            taken = {str(item.get("id")) for item in self._documents()}
            doc["id"] = derive_book_id(name, taken)
            doc["name"] = name
            doc["version"] = now_ms()
            self._insert(doc)
        logger.info(
            "Created word book",
            book_id=doc["id"],
            template_id=template_id,
            word_count=size,
        )
        return doc

    def update(self, book_id: str, document: Document) -> Document:
        """Overwrite a stored book with ``document``; its id is kept."""

        with self._lock:
            existing = self._find(book_id)
            if existing is None:
                raise BookNotFoundError("doc not found", {"book_id": book_id})
            if not has_supported_spec(document, self.spec_prefix):
                raise UnsupportedDocumentError(
                    "unknown document", {"book_id": book_id, "spec": document.get("spec")}
                )
            merged = {**existing, **document, "id": book_id}
            self._replace(book_id, merged)
        logger.info("Saved word book", book_id=book_id, word_count=len(document_words(merged)))
        return merged

    def delete(self, book_id: str) -> None:
        with self._lock:
            self._remove(book_id)
        logger.info("Deleted word book", book_id=book_id)


class JsonDatabaseRepository(BookRepository):
    """All books as records of a single ``{"books": [...]}`` JSON file."""

    def __init__(self, path: Path, **kwargs: Any):
        super().__init__(**kwargs)
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        data = read_json(self.path, default={})
        if not isinstance(data, dict) or not isinstance(data.get("books", []), list):
            raise StorageError(f"Corrupt database file: {self.path}")
        data.setdefault("books", [])
        return data

    def _documents(self) -> List[Document]:
        return self._read()["books"]

    def _find(self, book_id: str) -> Optional[Document]:
        for doc in self._documents():
            if doc.get("id") == book_id:
                return doc
        return None

    def _insert(self, doc: Document) -> None:
        with self._lock:
            data = self._read()
            data["books"].append(doc)
            write_json(self.path, data)

    def _replace(self, book_id: str, doc: Document) -> None:
        with self._lock:
            data = self._read()
            data["books"] = [doc if item.get("id") == book_id else item for item in data["books"]]
            write_json(self.path, data)

    def _remove(self, book_id: str) -> None:
        with self._lock:
            data = self._read()
            data["books"] = [item for item in data["books"] if item.get("id") != book_id]
            write_json(self.path, data)


class JsonFileRepository(BookRepository):
    """One ``<id>.json`` file per book inside a directory."""

    def __init__(self, directory: Path, **kwargs: Any):
        super().__init__(**kwargs)
        self.directory = Path(directory)

    def _path(self, book_id: str) -> Optional[Path]:
        if not _SAFE_ID.match(book_id or ""):
            return None
        return self.directory / f"{book_id}.json"

    def _documents(self) -> List[Document]:
        if not self.directory.exists():
            return []
        docs = []
        for path in sorted(self.directory.glob("*.json")):
            doc = read_json(path)
            if isinstance(doc, dict):
                doc.setdefault("id", path.stem)
                docs.append(doc)
            else:
                logger.warning("Skipping non-object book file", path=str(path))
        return docs

    def _find(self, book_id: str) -> Optional[Document]:
        path = self._path(book_id)
        if path is None:
            return None
        doc = read_json(path)
        if not isinstance(doc, dict):
            return None
        doc.setdefault("id", book_id)
        return doc

    def _insert(self, doc: Document) -> None:
        write_json(self.directory / f"{doc['id']}.json", doc)

    def _replace(self, book_id: str, doc: Document) -> None:
        write_json(self.directory / f"{book_id}.json", doc)

    def _remove(self, book_id: str) -> None:
        path = self._path(book_id)
        if path is None or not path.exists():
            return
        try:
            path.unlink()
        except OSError as exc:
            raise StorageError(f"Cannot delete {path}", {"error": str(exc)}) from exc


class LegacyStateFile:
    """The single ``state.json`` document served before books had ids."""

    def __init__(self, path: Path, *, spec_prefix: str = SPEC_PREFIX):
        self.path = Path(path)
        self.spec_prefix = spec_prefix

    def read(self) -> Document:
        doc = read_json(self.path)
        if doc is None:
            raise BookNotFoundError("state not found", {"path": str(self.path)})
        return doc

    def write(self, document: Document) -> None:
        if not has_supported_spec(document, self.spec_prefix):
            raise UnsupportedDocumentError("unknown document", {"spec": document.get("spec")})
        write_json(self.path, document)
        logger.info(f"{self.path.name} saved.")
