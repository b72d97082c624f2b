"""Upgrade loaded word-book documents to the current in-memory shape.

Documents carry a ``spec`` tag such as ``wordbook/1``. Each historical tag has
exactly one transform that rewrites the raw document into the next tag; the
transforms are applied in order until the document reaches
:data:`~wordbook.core.model.CURRENT_SPEC`. A tag without a transform is
rejected rather than half converted.

After migration every document goes through the same regularisation pass
(trimming, timestamp backfill, star/starred consistency), which is what makes
:func:`normalize` idempotent on current documents.
"""
from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any, Callable, Dict, Tuple

from loguru import logger

from wordbook.core.model import (
    CURRENT_SPEC,
    SPEC_PREFIX,
    Word,
    WordBook,
    clamp_stars,
    derive_book_id,
    new_id,
    now_ms,
)
from wordbook.utils.exceptions import UnsupportedDocumentError

LEGACY_WORDS_KEY = "_words"
MAX_MIGRATION_STEPS = 8

Document = Dict[str, Any]


def _upgrade_v1(doc: Document) -> Document:
    """wordbook/1 -> wordbook/2: star ratings, word ids and the extra fields."""

    words = doc.pop("words", None)
    legacy = doc.pop(LEGACY_WORDS_KEY, None)
    if words is None:
        words = legacy

    seen: set[str] = set()
    upgraded = []
    for entry in words:
        if not isinstance(entry, Mapping):
            raise UnsupportedDocumentError(
                "unknown document", {"reason": "word entries must be objects"}
            )
        entry = dict(entry)
        if "stars" not in entry:
            entry["stars"] = 1 if entry.get("starred") else 0
        if not entry.get("id"):
            candidate = str(entry.get("name") or "").strip()
            entry["id"] = candidate if candidate and candidate not in seen else new_id()
        seen.add(str(entry["id"]))
        entry.setdefault("example", "")
        entry.setdefault("translation", "")
        entry.setdefault("bookmarked", False)
        entry.setdefault("type", [])
        upgraded.append(entry)

    doc["words"] = upgraded
    return doc


MIGRATIONS: Dict[str, Tuple[str, Callable[[Document], Document]]] = {
    "wordbook/1": ("wordbook/2", _upgrade_v1),
}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _timestamp(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return max(0, int(value))


def _word_types(value: Any) -> set[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple, set)):
        return set()
    return {str(item).strip() for item in value if str(item).strip()}


def _regularize(doc: Document, book_id: str | None) -> WordBook:
    now = now_ms()
    seen_ids: set[str] = set()
    words = []
    for entry in doc["words"]:
        if not isinstance(entry, Mapping):
            raise UnsupportedDocumentError(
                "unknown document", {"reason": "word entries must be objects"}
            )
        name = _text(entry.get("name"))
        if not name:
            logger.warning("Dropping word without a name", word_id=entry.get("id"))
            continue

        word_id = _text(entry.get("id"))
        if not word_id or word_id in seen_ids:
            word_id = new_id()
        seen_ids.add(word_id)

        created_on = _timestamp(entry.get("createdOn")) or now
        last_modified = _timestamp(entry.get("lastModified")) or created_on
        stars = clamp_stars(entry.get("stars", 0))
        words.append(
            Word(
                id=word_id,
                name=name,
                remark=_text(entry.get("remark")),
                example=_text(entry.get("example")),
                translation=_text(entry.get("translation")),
                stars=stars,
                starred=stars > 0,
                bookmarked=bool(entry.get("bookmarked", False)),
                type=_word_types(entry.get("type")),
                created_on=created_on,
                last_modified=last_modified,
            )
        )

    name = _text(doc.get("name"))
    identifier = _text(doc.get("id")) or _text(book_id) or derive_book_id(name)
    return WordBook(
        id=identifier,
        name=name or identifier,
        spec=CURRENT_SPEC,
        version=_timestamp(doc.get("version")),
        words=words,
    )


def has_supported_spec(raw: Any, prefix: str = SPEC_PREFIX) -> bool:
    """Return whether ``raw`` looks like a word-book document at all."""

    if not isinstance(raw, Mapping):
        return False
    spec = raw.get("spec")
    return isinstance(spec, str) and spec.startswith(prefix)


def normalize(raw: Any, *, book_id: str | None = None) -> WordBook:
    """Upgrade and regularise a raw document into a :class:`WordBook`.

    ``book_id`` is only used when the document itself carries no id.
    Raises :class:`UnsupportedDocumentError` for anything that is not a
    word-book document of a known schema version; ``raw`` is never modified.
    """

    if not has_supported_spec(raw):
        spec = raw.get("spec") if isinstance(raw, Mapping) else None
        logger.error("Unknown document, cannot load", spec=spec)
        raise UnsupportedDocumentError("unknown document", {"spec": spec})

    words = raw.get("words", raw.get(LEGACY_WORDS_KEY))
    if not isinstance(words, list):
        logger.error("Document has no word list", spec=raw["spec"])
        raise UnsupportedDocumentError("unknown document", {"reason": "missing words"})

    doc: Document = copy.deepcopy(dict(raw))
    steps = 0
    while doc["spec"] != CURRENT_SPEC:
        if steps >= MAX_MIGRATION_STEPS:
            raise UnsupportedDocumentError(
                "corrupt document", {"reason": "migration did not converge", "spec": doc["spec"]}
            )
        transition = MIGRATIONS.get(doc["spec"])
        if transition is None:
            logger.error("Unrecognized schema version", spec=doc["spec"])
            raise UnsupportedDocumentError("unrecognized schema version", {"spec": doc["spec"]})
        target, transform = transition
        source = doc["spec"]
        doc = transform(doc)
        doc["spec"] = target
        steps += 1
        logger.info("Migrated word book document", source=source, target=target)

    if "words" not in doc:
        doc["words"] = doc.pop(LEGACY_WORDS_KEY)
    doc.pop(LEGACY_WORDS_KEY, None)

    book = _regularize(doc, book_id)
    logger.info("Loaded words", book_id=book.id, size=len(book.words))
    return book
