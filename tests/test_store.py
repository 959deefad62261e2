import json

import httpx
import pytest

from fiszki.client.store import FlashcardStore


def _cards(*ids):
    return [{"id": i, "front": f"Q{i}", "back": "A", "source": "manual"} for i in ids]


def _store(handler):
    http_client = httpx.AsyncClient(base_url="http://testserver", transport=httpx.MockTransport(handler))
    return FlashcardStore(http_client)


async def test_fetch_flashcards_fills_page_state():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"data": _cards(11, 12), "pagination": {"page": 2, "limit": 10, "total": 25}})

    store = _store(handler)
    await store.fetch_flashcards(page=2, limit=10)

    assert seen[0].url.params["page"] == "2"
    assert [card["id"] for card in store.flashcards] == [11, 12]
    assert (store.current_page, store.limit, store.total, store.total_pages) == (2, 10, 25, 3)
    assert store.loading is False
    assert store.error is None


async def test_fetch_failure_records_error_and_clears_loading():
    store = _store(lambda request: httpx.Response(500, json={"error": "Internal server error", "details": "Failed"}))

    with pytest.raises(httpx.HTTPStatusError):
        await store.fetch_flashcards()

    assert store.error == "Internal server error"
    assert store.loading is False


async def test_update_replaces_cached_card():
    def handler(request):
        body = json.loads(request.content)
        return httpx.Response(200, json={"id": 2, "front": body["front"], "back": "A", "source": "manual"})

    store = _store(handler)
    store.flashcards = _cards(1, 2, 3)

    updated = await store.update_flashcard(2, {"front": "Changed"})

    assert updated["front"] == "Changed"
    assert [card["front"] for card in store.flashcards] == ["Q1", "Changed", "Q3"]


async def test_update_failure_keeps_cache():
    store = _store(lambda request: httpx.Response(404, json={"error": "Flashcard not found"}))
    store.flashcards = _cards(1)

    with pytest.raises(httpx.HTTPStatusError):
        await store.update_flashcard(1, {"front": "x"})

    assert store.error == "Flashcard not found"
    assert store.flashcards == _cards(1)


async def test_delete_removes_card_and_recomputes_pages():
    store = _store(lambda request: httpx.Response(200, json={"message": "Flashcard deleted successfully"}))
    store.flashcards = _cards(1, 2)
    store.total, store.limit = 11, 10

    await store.delete_flashcard(1)

    assert [card["id"] for card in store.flashcards] == [2]
    assert (store.total, store.total_pages) == (10, 1)


async def test_details_are_used_when_error_is_missing():
    store = _store(lambda request: httpx.Response(400, json={"details": "limit must be a positive integer"}))

    with pytest.raises(httpx.HTTPStatusError):
        await store.fetch_flashcards(limit=0)

    assert store.error == "limit must be a positive integer"
