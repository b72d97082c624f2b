"""Tests for the word-book REST endpoints."""
from __future__ import annotations

import json

from fastapi.testclient import TestClient

from conftest import make_document
from wordbook.config import settings


def test_ping(client: TestClient) -> None:
    response = client.get("/api/ping")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["data"] == "pong"


def test_list_books_sorted_by_version(client: TestClient, seeded_books) -> None:
    response = client.get("/api/books")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert [item["version"] for item in payload["data"]] == [9, 5, 1]
    assert payload["data"][0] == {"id": "gamma", "name": "gamma", "wordCount": 10, "version": 9}


def test_get_book(client: TestClient, seeded_books) -> None:
    response = client.get("/api/books/alpha")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == "alpha"
    assert len(data["words"]) == 3


def test_get_unknown_book_returns_error_envelope(client: TestClient, seeded_books) -> None:
    response = client.get("/api/books/nope")

    assert response.status_code == 404
    payload = response.json()
    assert payload["status"] == "error"
    assert payload["error"] == "no such book."


def test_create_book_from_template(client: TestClient, seeded_books) -> None:
    response = client.post(
        "/api/books", json={"templateId": "gamma", "name": "sampled", "wordsRatio": 50}
    )

    assert response.status_code == 200
    assert response.json()["data"] == {"id": "sampled", "name": "sampled"}
    stored = client.get("/api/books/sampled").json()["data"]
    assert len(stored["words"]) == 5


def test_create_book_validates_ratio(client: TestClient, seeded_books) -> None:
    response = client.post(
        "/api/books", json={"templateId": "gamma", "name": "sampled", "wordsRatio": 150}
    )

    assert response.status_code == 422
    assert response.json()["status"] == "error"


def test_create_book_from_unknown_template(client: TestClient, seeded_books) -> None:
    response = client.post("/api/books", json={"templateId": "ghost", "name": "copy", "wordsRatio": 50})

    assert response.status_code == 404


def test_update_book(client: TestClient, seeded_books) -> None:
    document = make_document("alpha", 20, word_count=1)

    response = client.post("/api/books/alpha", json=document)

    assert response.status_code == 200
    assert response.json()["data"]["id"] == "alpha"
    stored = client.get("/api/books/alpha").json()["data"]
    assert stored["version"] == 20
    assert len(stored["words"]) == 1


def test_update_with_unknown_spec_is_rejected(client: TestClient, seeded_books) -> None:
    response = client.post("/api/books/alpha", json={"spec": "notes/1", "words": []})

    assert response.status_code == 422
    assert response.json()["status"] == "error"
    stored = client.get("/api/books/alpha").json()["data"]
    assert len(stored["words"]) == 3


def test_update_unknown_book(client: TestClient, seeded_books) -> None:
    response = client.post("/api/books/ghost", json=make_document("ghost", 1))

    assert response.status_code == 404
    assert response.json()["error"] == "doc not found"


def test_update_rejects_oversized_body(client: TestClient, seeded_books, monkeypatch) -> None:
    monkeypatch.setattr(settings, "MAX_BODY_BYTES", 10)

    response = client.post("/api/books/alpha", json=make_document("alpha", 30))

    assert response.status_code == 413
    assert client.get("/api/books/alpha").json()["data"]["version"] == 5


def test_update_rejects_oversized_chunked_body(client: TestClient, seeded_books, monkeypatch) -> None:
    monkeypatch.setattr(settings, "MAX_BODY_BYTES", 10)
    body = json.dumps(make_document("alpha", 30)).encode("utf-8")

    response = client.post(
        "/api/books/alpha",
        content=iter([body[:20], body[20:]]),
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 413
    assert client.get("/api/books/alpha").json()["data"]["version"] == 5


def test_delete_book(client: TestClient, seeded_books) -> None:
    response = client.delete("/api/books/beta")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert client.get("/api/books/beta").status_code == 404
    assert len(client.get("/api/books").json()["data"]) == 2


def test_legacy_state_round_trip(client: TestClient) -> None:
    assert client.get("/api/state").status_code == 404

    document = {"spec": "wordbook/1", "_words": [{"name": "fluster", "remark": "agitated"}]}
    assert client.post("/api/state", json=document).json()["status"] == "ok"
    assert client.post("/api/state", json={"spec": "bad"}).status_code == 422

    assert client.get("/api/state").json() == document
