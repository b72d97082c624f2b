"""Tests for the in-memory word search."""
from __future__ import annotations

import pytest

from conftest import make_word
from wordbook.core.search import WordSearchIndex, tokenize


@pytest.fixture()
def words():
    return [
        make_word(0, name="apple", remark="a red fruit"),
        make_word(1, name="application", remark="software program"),
        make_word(2, name="pineapple", remark="tropical fruit"),
        make_word(3, name="fruitcake", remark="dense cake"),
    ]


def test_tokenize_folds_case_and_accents():
    assert tokenize("Café AU-lait") == ["cafe", "au", "lait"]


def test_prefix_matches_names(words):
    index = WordSearchIndex(words)

    assert [w.name for w in index.search("app", 10)] == ["apple", "application"]


def test_name_hits_rank_above_remark_hits(words):
    index = WordSearchIndex(words)

    result = index.search("fruit", 10)

    assert [w.name for w in result] == ["fruitcake", "apple", "pineapple"]


def test_limit_bounds_results(words):
    index = WordSearchIndex(words)

    assert [w.name for w in index.search("fruit", 1)] == ["fruitcake"]
    with pytest.raises(ValueError):
        index.search("fruit", 0)


def test_blank_query_returns_nothing(words):
    assert WordSearchIndex(words).search("   ", 10) == []


def test_fuzzy_fallback_on_misspelling(words):
    assert [w.name for w in WordSearchIndex(words).search("aple", 10)] == ["apple"]


def test_accented_words_match_plain_queries():
    index = WordSearchIndex([make_word(0, name="café", remark="")])

    assert [w.name for w in index.search("cafe", 5)] == ["café"]


def test_rebuild_replaces_contents(words):
    index = WordSearchIndex(words)
    index.build([make_word(9, name="zebra", remark="")])

    assert len(index) == 1
    assert index.search("app", 10) == []
    assert [w.name for w in index.search("zeb", 10)] == ["zebra"]
