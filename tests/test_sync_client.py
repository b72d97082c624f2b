"""Tests for the asynchronous sync client against the ASGI app."""
from __future__ import annotations

import httpx
import pytest

from conftest import make_store
from wordbook.core.store import WordBookStore
from wordbook.services.book_store import write_json
from wordbook.services.sync_client import WordBookClient
from wordbook.utils.exceptions import SyncError


@pytest.mark.asyncio
async def test_ping(wordbook_client):
    assert await wordbook_client.ping() == "pong"


@pytest.mark.asyncio
async def test_list_overviews_newest_first(wordbook_client, seeded_books):
    overviews = await wordbook_client.list_overviews()

    assert [item.id for item in overviews] == ["gamma", "alpha", "beta"]
    assert overviews[0].word_count == 10


@pytest.mark.asyncio
async def test_pull_normalizes_legacy_documents(wordbook_client, db_path):
    legacy = {
        "spec": "wordbook/1",
        "id": "old",
        "name": "old",
        "version": 3,
        "_words": [{"name": " fluster ", "remark": "agitated", "starred": True}],
    }
    write_json(db_path, {"books": [legacy]})

    book = await wordbook_client.pull("old")

    assert book.spec == "wordbook/2"
    assert book.words[0].name == "fluster"
    assert book.words[0].stars == 1


@pytest.mark.asyncio
async def test_pull_unknown_book_raises(wordbook_client, seeded_books):
    with pytest.raises(SyncError) as excinfo:
        await wordbook_client.pull("ghost")

    assert excinfo.value.http_status == 404


@pytest.mark.asyncio
async def test_download_edit_upload_round_trip(wordbook_client, seeded_books, repository):
    store = WordBookStore()
    await wordbook_client.download(store, "alpha")
    assert store.book.id == "alpha"
    assert store.dirty is False

    store.save_word("zephyr", remark="a gentle breeze")
    assert store.dirty is True

    await wordbook_client.upload(store)

    assert store.dirty is False
    stored = repository.get("alpha")
    assert stored["words"][-1]["name"] == "zephyr"
    assert stored["version"] == store.book.version


@pytest.mark.asyncio
async def test_failed_download_leaves_store_untouched(wordbook_client, seeded_books):
    store = make_store(1, 1)

    with pytest.raises(SyncError):
        await wordbook_client.download(store, "ghost")

    assert store.book.id == "demo"
    assert len(store.book.words) == 2


@pytest.mark.asyncio
async def test_failed_upload_keeps_store_dirty(wordbook_client, seeded_books):
    store = make_store(1, 1)
    store.book.id = "ghost"
    store.save_word("new")

    with pytest.raises(SyncError):
        await wordbook_client.upload(store)

    assert store.dirty is True


@pytest.mark.asyncio
async def test_create_and_remove(wordbook_client, seeded_books):
    overview = await wordbook_client.create("gamma", "half", 50)

    assert overview.id == "half"
    assert overview.word_count == 5

    await wordbook_client.remove("half")
    assert "half" not in [item.id for item in await wordbook_client.list_overviews()]


@pytest.mark.asyncio
async def test_transport_failure_raises_sync_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with WordBookClient("http://testserver", transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(SyncError):
            await client.list_overviews()


@pytest.mark.asyncio
async def test_invalid_json_raises_sync_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))

    async with WordBookClient("http://testserver", transport=transport) as client:
        with pytest.raises(SyncError) as excinfo:
            await client.ping()

    assert excinfo.value.http_status == 200


@pytest.mark.asyncio
async def test_upload_keeps_dirty_when_book_changes_in_flight():
    store = make_store(1)
    store.save_word("first")

    def handler(request: httpx.Request) -> httpx.Response:
        store.save_word("second")
        return httpx.Response(200, json={"status": "ok", "data": {"id": "demo"}})

    async with WordBookClient("http://testserver", transport=httpx.MockTransport(handler)) as client:
        await client.upload(store)

    assert store.dirty is True


@pytest.mark.asyncio
async def test_book_ids_are_escaped_in_urls():
    paths = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.raw_path)
        return httpx.Response(200, json={"status": "ok", "data": {"id": "a/b?c#d"}})

    store = make_store(1)
    store.book.id = "a/b?c#d"
    async with WordBookClient("http://testserver", transport=httpx.MockTransport(handler)) as client:
        assert await client.push(store.book) == "a/b?c#d"
        await client.remove("a/b?c#d")

    assert paths == [b"/api/books/a%2Fb%3Fc%23d", b"/api/books/a%2Fb%3Fc%23d"]
