"""Backup files: export a book to JSON and import it again."""
from __future__ import annotations

import json
import re
from pathlib import Path

from loguru import logger

from wordbook.core.migration import normalize
from wordbook.core.model import WordBook
from wordbook.core.store import WordBookStore
from wordbook.utils.exceptions import UnsupportedDocumentError

_UNSAFE_FILENAME = re.compile(r"[^\w.-]+")


def backup_filename(book: WordBook) -> str:
    stem = _UNSAFE_FILENAME.sub("_", book.name or book.id).strip("_") or "wordbook"
    return f"{stem}-backup.json"


def export_backup(store: WordBookStore, directory: Path) -> Path:
    """Write the store's book to ``<name>-backup.json`` inside ``directory``."""

    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / backup_filename(store.book)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(store.to_document(), f, ensure_ascii=False, indent=2)
    logger.info("Exported word book", book_id=store.book.id, path=str(path))
    return path


def read_backup(path: Path) -> WordBook:
    """Parse and normalise a backup file."""

    try:
        with open(path, "r", encoding="utf-8") as f:
            content = json.load(f)
    except json.JSONDecodeError as exc:
        raise UnsupportedDocumentError("backup is not valid JSON", {"path": str(path)}) from exc
    return normalize(content)


def import_backup(store: WordBookStore, path: Path, *, merge: bool = False) -> WordBook:
    """Load a backup into ``store``, or append its words when ``merge`` is set.

    A plain import keeps the current book's id so the next upload overwrites
    the book being edited. Either way the store is left dirty.
    """

    imported = read_backup(path)
    if merge:
        store.merge(imported.words)
        return store.book

    imported.id = store.book.id or imported.id
    imported.name = store.book.name or imported.name
    imported.version = max(imported.version, store.book.version)
    store.replace(imported, dirty=True)
    logger.info("Imported word book", book_id=imported.id, size=len(imported.words))
    return imported
