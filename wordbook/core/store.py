"""State container for the word book being edited.

:class:`WordBookStore` owns one :class:`~wordbook.core.model.WordBook`, the
navigation state over it (pointer and star filter) and the dirty flag. All
changes go through its methods, which keep the pointer inside the visible list
before any subscriber is notified.
"""
from __future__ import annotations

from typing import Any, Callable, Iterable, List, Optional, Tuple

from loguru import logger

from wordbook.config import settings
from wordbook.core.migration import normalize
from wordbook.core.model import Word, WordBook, new_id, now_ms
from wordbook.core.navigation import clamp_pointer, filter_words
from wordbook.core.search import WordSearchIndex

Listener = Callable[["WordBookStore"], None]

DEFAULT_WORDS: Tuple[Tuple[str, str], ...] = (
    ("fluster", "fluster detail example"),
    ("resolute", "resolute detail example"),
    ("cardigan", "cardigan detail example"),
)


class WordBookStore:
    """Single-writer container for a word book and its navigation state."""

    def __init__(self, book: Optional[WordBook] = None) -> None:
        self.book = book if book is not None else WordBook(id="", name="")
        self.pointer = 0
        self.filter_starred = False
        self.dirty = False
        self._listeners: List[Listener] = []

    # subscriptions

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that removes it again."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Store listener failed")

    # navigation

    def current_word_list(self) -> List[Word]:
        return filter_words(self.book.words, self.filter_starred)

    def current_word(self) -> Optional[Word]:
        words = self.current_word_list()
        if not words:
            return None
        return words[clamp_pointer(self.pointer, len(words))]

    def position(self) -> Tuple[int, int]:
        """Return ``(page, total)`` for a one-based pager label."""

        size = len(self.current_word_list())
        return (self.pointer + 1 if size else 0, size)

    def _reclamp(self, pointer: Optional[int] = None) -> None:
        target = self.pointer if pointer is None else pointer
        self.pointer = clamp_pointer(target, len(self.current_word_list()))

    def _point_at(self, word: Word) -> None:
        for index, candidate in enumerate(self.current_word_list()):
            if candidate.id == word.id:
                self.pointer = index
                return
        self._reclamp()

    def set_pointer(self, pointer: int) -> None:
        self._reclamp(pointer)
        self._notify()

    def offset_pointer(self, delta: int) -> None:
        """Move by ``delta``; use ``JUMP_TO_START``/``JUMP_TO_END`` for the ends."""

        self.set_pointer(self.pointer + delta)

    def toggle_filter_starred(self) -> None:
        self.filter_starred = not self.filter_starred
        self.pointer = 0
        self._notify()

    # mutations

    def _changed(self) -> None:
        self.book.bump_version()
        self.dirty = True

    def _fresh_id(self, taken: Optional[set] = None) -> str:
        taken = taken if taken is not None else {word.id for word in self.book.words}
        candidate = new_id()
        while candidate in taken:
            candidate = new_id()
        return candidate

    def save_word(
        self,
        name: Optional[str],
        remark: Optional[str] = None,
        example: Optional[str] = None,
        translation: Optional[str] = None,
    ) -> Optional[Word]:
        """Update the word called ``name`` or append a new one.

        An empty name is ignored. Afterwards the pointer sits on the saved word
        when it is part of the visible list.
        """

        name = (name or "").strip()
        if not name:
            return None

        word = self.book.find_by_name(name)
        if word is not None:
            for attr, value in (("remark", remark), ("example", example), ("translation", translation)):
                if value is not None:
                    setattr(word, attr, value.strip())
            word.touch()
            logger.debug("Updated word", word_id=word.id, name=name)
        else:
            timestamp = now_ms()
            word = Word(
                id=self._fresh_id(),
                name=name,
                remark=(remark or "").strip(),
                example=(example or "").strip(),
                translation=(translation or "").strip(),
                created_on=timestamp,
                last_modified=timestamp,
            )
            word.set_stars(1)
            self.book.words.append(word)
            logger.debug("Added word", word_id=word.id, name=name)

        self._point_at(word)
        self._changed()
        self._notify()
        return word

    def set_current_word_stars(self, stars: int) -> None:
        word = self.current_word()
        if word is None:
            return
        word.set_stars(stars)
        # the word may have left the starred view
        self._reclamp()
        self._changed()
        self._notify()

    def delete_current_word(self) -> None:
        word = self.current_word()
        if word is None:
            return
        del self.book.words[self.book.find_index(word.id)]
        self._reclamp()
        self._changed()
        self._notify()

    def toggle_current_word_bookmarked(self) -> None:
        word = self.current_word()
        if word is None:
            return
        word.bookmarked = not word.bookmarked
        self._changed()
        self._notify()

    def merge(self, words: Iterable[Word]) -> int:
        """Append copies of ``words`` to the end of the book; returns how many."""

        taken = {word.id for word in self.book.words}
        added = 0
        for word in words:
            copied = word.copy()
            if copied.id in taken:
                copied.id = self._fresh_id(taken)
            taken.add(copied.id)
            self.book.words.append(copied)
            added += 1
        self.pointer = 0
        self._reclamp()
        self._changed()
        self._notify()
        logger.info("Merged words", book_id=self.book.id, added=added)
        return added

    # whole-book operations

    def replace(self, book: WordBook, *, dirty: bool = False) -> None:
        """Swap in an already normalised book and start from its first word.

        With ``dirty`` the book counts as a local change still to be pushed.
        """

        self.book = book
        self.pointer = 0
        self.dirty = False
        if dirty:
            self._changed()
        self._reclamp()
        self._notify()

    def load(self, document: Any, *, book_id: Optional[str] = None) -> WordBook:
        """Normalise ``document`` and make it the current book.

        Raises :class:`~wordbook.utils.exceptions.UnsupportedDocumentError`
        without touching the store when the document is not usable.
        """

        book = normalize(document, book_id=book_id)
        self.replace(book)
        return book

    def seed_defaults(self) -> None:
        """Give an empty book a few sample words."""

        if self.book.words:
            return
        for name, remark in DEFAULT_WORDS:
            self.save_word(name, remark)

    def to_document(self) -> dict:
        return self.book.to_dict()

    def mark_clean(self, version: Optional[int] = None) -> bool:
        """Clear the dirty flag unless the book changed after ``version``."""

        if version is not None and version != self.book.version:
            return False
        self.dirty = False
        self._notify()
        return True

    def search(self, query: str, limit: Optional[int] = None) -> List[Word]:
        index = WordSearchIndex(self.book.words)
        return index.search(query, settings.SEARCH_RESULT_LIMIT if limit is None else limit)
