"""In-memory full-text search over a word list.

The index maps folded tokens of ``name`` and ``remark`` to the positions of the
words containing them. Query tokens match indexed tokens by prefix through a
sorted token list; hits in ``name`` outweigh hits in ``remark`` and exact
tokens outweigh prefixes. When nothing matches, close spellings of word names
are offered instead.
"""
from __future__ import annotations

import bisect
import difflib
import re
import unicodedata
from collections import defaultdict
from typing import Dict, List, Sequence

from wordbook.core.model import Word

NAME_WEIGHT = 3.0
REMARK_WEIGHT = 1.0
EXACT_BONUS = 2.0
FUZZY_CUTOFF = 0.75

_TOKEN_RE = re.compile(r"\w+")


def fold(text: str) -> str:
    """Strip combining diacritics and lowercase."""

    nfd = unicodedata.normalize("NFD", text)
    return "".join(c for c in nfd if unicodedata.category(c) != "Mn").lower()


def tokenize(text: str) -> List[str]:
    return _TOKEN_RE.findall(fold(text))


class WordSearchIndex:
    """Token index rebuilt from a word list on demand."""

    def __init__(self, words: Sequence[Word] = ()) -> None:
        self._words: List[Word] = []
        self._postings: Dict[str, Dict[int, float]] = {}
        self._tokens: List[str] = []
        self.build(words)

    def __len__(self) -> int:
        return len(self._words)

    def build(self, words: Sequence[Word]) -> "WordSearchIndex":
        """Replace the index contents with ``words``."""

        postings: Dict[str, Dict[int, float]] = defaultdict(dict)
        for position, word in enumerate(words):
            for text, weight in ((word.name, NAME_WEIGHT), (word.remark, REMARK_WEIGHT)):
                for token in set(tokenize(text)):
                    current = postings[token].get(position, 0.0)
                    postings[token][position] = max(current, weight)
        self._words = list(words)
        self._postings = dict(postings)
        self._tokens = sorted(self._postings)
        return self

    def _prefix_tokens(self, term: str) -> List[str]:
        lo = bisect.bisect_left(self._tokens, term)
        out = []
        for i in range(lo, len(self._tokens)):
            if not self._tokens[i].startswith(term):
                break
            out.append(self._tokens[i])
        return out

    def _fuzzy(self, query: str, limit: int) -> List[Word]:
        folded = {}
        for position, word in enumerate(self._words):
            folded.setdefault(fold(word.name), []).append(position)
        matches = difflib.get_close_matches(fold(query).strip(), list(folded), n=limit, cutoff=FUZZY_CUTOFF)
        positions = [position for name in matches for position in folded[name]]
        return [self._words[position] for position in positions[:limit]]

    def search(self, query: str, limit: int) -> List[Word]:
        """Return at most ``limit`` words ranked best match first."""

        if limit < 1:
            raise ValueError("limit must be at least 1")
        terms = list(dict.fromkeys(tokenize(query)))
        if not terms:
            return []

        scores: Dict[int, float] = defaultdict(float)
        for term in terms:
            for token in self._prefix_tokens(term):
                bonus = EXACT_BONUS if token == term else 1.0
                for position, weight in self._postings[token].items():
                    scores[position] += weight * bonus

        if not scores:
            return self._fuzzy(query, limit)

        ranked = sorted(scores, key=lambda position: (-scores[position], position))
        return [self._words[position] for position in ranked[:limit]]
