"""Pytest fixtures for API and client tests."""

import random
from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient

from wordbook.api import deps
from wordbook.core.model import Word, WordBook
from wordbook.core.store import WordBookStore
from wordbook.main import create_app
from wordbook.services.book_store import JsonDatabaseRepository, LegacyStateFile, write_json
from wordbook.services.sync_client import WordBookClient


def make_word(index: int, stars: int = 1, **overrides) -> Word:
    fields = {
        "id": f"w{index}",
        "name": f"word{index}",
        "remark": f"remark {index}",
        "stars": stars,
        "starred": stars > 0,
        "created_on": 1,
        "last_modified": 1,
    }
    fields.update(overrides)
    return Word(**fields)


def make_store(*stars: int) -> WordBookStore:
    words = [make_word(index, star) for index, star in enumerate(stars)]
    return WordBookStore(WordBook(id="demo", name="demo", version=1, words=words))


def make_document(book_id: str, version: int, word_count: int = 3, **extra) -> dict:
    doc = {
        "spec": "wordbook/2",
        "id": book_id,
        "name": book_id,
        "version": version,
        "words": [make_word(i).to_dict() for i in range(word_count)],
    }
    doc.update(extra)
    return doc


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "db.json"


@pytest.fixture()
def repository(db_path: Path) -> JsonDatabaseRepository:
    return JsonDatabaseRepository(db_path, rng=random.Random(7))


@pytest.fixture()
def state_file(tmp_path: Path) -> LegacyStateFile:
    return LegacyStateFile(tmp_path / "state.json")


@pytest.fixture()
def seeded_books(db_path: Path) -> list[dict]:
    books = [
        make_document("alpha", 5),
        make_document("beta", 1),
        make_document("gamma", 9, word_count=10),
    ]
    write_json(db_path, {"books": books})
    return books


@pytest.fixture()
def app(repository: JsonDatabaseRepository, state_file: LegacyStateFile) -> FastAPI:
    app = create_app()
    app.dependency_overrides[deps.get_repository] = lambda: repository
    app.dependency_overrides[deps.get_state_file] = lambda: state_file
    return app


@pytest.fixture()
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture()
async def wordbook_client(app: FastAPI) -> AsyncGenerator[WordBookClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with WordBookClient("http://testserver", transport=transport) as client:
        yield client
