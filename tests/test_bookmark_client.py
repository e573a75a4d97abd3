"""Tests for the bookmark HTTP client wrapper."""

from __future__ import annotations

import json

import httpx
import pytest

from app.client.api import BookmarkApiClient, BookmarkApiError, build_http_client
from app.config import Settings


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="https://media.example.com"
    )


@pytest.mark.anyio
async def test_list_bookmarks_sends_scope_and_coerces_ids() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=[{"id": 1, "videoId": 4}, {"id": 2, "videoId": "9"}])

    async with _client(handler) as http_client:
        records = await BookmarkApiClient(http_client).list_bookmarks("selected")

    assert [record.video_id for record in records] == ["4", "9"]
    assert requests[0].url.path == "/bookmarks"
    assert requests[0].url.params["type"] == "selected"


@pytest.mark.anyio
async def test_mutations_send_json_bodies() -> None:
    seen: list[tuple[str, dict[str, object]]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        seen.append((request.method, body))
        if request.method == "POST":
            return httpx.Response(200, json={"id": 5, "videoId": body["videoId"]})
        return httpx.Response(200, json={"success": True})

    async with _client(handler) as http_client:
        api = BookmarkApiClient(http_client)
        record = await api.create_bookmark("3")
        await api.delete_bookmark("3")

    assert record.id == 5
    assert seen == [("POST", {"videoId": "3"}), ("DELETE", {"videoId": "3"})]


@pytest.mark.anyio
async def test_error_status_carries_server_message() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"error": "Already bookmarked"})

    async with _client(handler) as http_client:
        with pytest.raises(BookmarkApiError) as excinfo:
            await BookmarkApiClient(http_client).create_bookmark("1")

    assert excinfo.value.status_code == 409
    assert excinfo.value.message == "Already bookmarked"


@pytest.mark.anyio
async def test_transport_errors_are_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    async with _client(handler) as http_client:
        with pytest.raises(BookmarkApiError) as excinfo:
            await BookmarkApiClient(http_client).list_bookmarks()

    assert excinfo.value.status_code is None
    assert "ConnectTimeout" in excinfo.value.message


@pytest.mark.anyio
async def test_malformed_bodies_are_rejected() -> None:
    responses = iter(
        [
            httpx.Response(200, content=b"<html>", headers={"content-type": "text/html"}),
            httpx.Response(200, json={"items": []}),
            httpx.Response(200, json=[{"id": 1}]),
        ]
    )

    def handler(_: httpx.Request) -> httpx.Response:
        return next(responses)

    async with _client(handler) as http_client:
        api = BookmarkApiClient(http_client)
        for _ in range(3):
            with pytest.raises(BookmarkApiError):
                await api.list_bookmarks()


def test_build_http_client_applies_deadline() -> None:
    settings = Settings(_env_file=None, API_BASE_URL="https://media.example.com", API_TIMEOUT=3)

    client = build_http_client(settings)

    assert client.timeout.read == 3
    assert client.timeout.connect == 3
    assert str(client.base_url) == "https://media.example.com/"


@pytest.mark.anyio
async def test_login_keeps_session_cookie_for_later_calls() -> None:
    seen_cookies: list[str | None] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/auth/login":
            assert json.loads(request.content) == {
                "email": "viewer@example.com",
                "password": "abc123",
            }
            return httpx.Response(
                200,
                json={"email": "viewer@example.com"},
                headers={"set-cookie": "reelmark_session=token-1; Path=/"},
            )
        seen_cookies.append(request.headers.get("cookie"))
        return httpx.Response(200, json=[])

    async with _client(handler) as http_client:
        api = BookmarkApiClient(http_client)
        await api.login("viewer@example.com", "abc123")
        assert await api.list_bookmarks() == []

    assert seen_cookies == ["reelmark_session=token-1"]
