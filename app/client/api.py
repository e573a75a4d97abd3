"""HTTP client for the bookmark endpoints."""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..models import BookmarkRecord, BookmarkScope


class BookmarkApiError(Exception):
    """Raised for transport failures, non-2xx answers and malformed bodies."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def build_http_client(settings: Settings, **kwargs: Any) -> httpx.AsyncClient:
    """Return an ``AsyncClient`` with the configured base URL and deadline."""

    timeout = settings.api_timeout_seconds
    kwargs.setdefault("base_url", str(settings.api_base_url))
    kwargs.setdefault("timeout", httpx.Timeout(timeout, connect=min(timeout, 5.0)))
    return httpx.AsyncClient(**kwargs)


class BookmarkApiClient:
    """Thin wrapper around ``/bookmarks`` for an already authenticated client.

    The session cookie lives in the ``httpx.AsyncClient`` cookie jar, so the
    same client must be used for login and for the bookmark calls.
    """

    def __init__(self, http_client: httpx.AsyncClient):
        self._client = http_client

    async def list_bookmarks(self, scope: BookmarkScope = "all") -> list[BookmarkRecord]:
        response = await self._request("GET", "/bookmarks", params={"type": scope})
        data = self._json(response)
        if not isinstance(data, list):
            raise BookmarkApiError(
                "Unexpected bookmark list structure", status_code=response.status_code
            )
        try:
            return [BookmarkRecord.model_validate(entry) for entry in data]
        except ValidationError as exc:
            raise BookmarkApiError(
                f"Malformed bookmark entry: {exc.errors()[0]['msg']}",
                status_code=response.status_code,
            ) from exc

    async def create_bookmark(self, video_id: str) -> BookmarkRecord:
        response = await self._request("POST", "/bookmarks", json={"videoId": video_id})
        try:
            return BookmarkRecord.model_validate(self._json(response))
        except ValidationError as exc:
            raise BookmarkApiError(
                "Malformed bookmark payload", status_code=response.status_code
            ) from exc

    async def delete_bookmark(self, video_id: str) -> None:
        await self._request("DELETE", "/bookmarks", json={"videoId": video_id})

    async def login(self, email: str, password: str) -> None:
        await self._request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise BookmarkApiError(
                f"{method} {url} failed: {exc.__class__.__name__}"
            ) from exc

        if response.status_code >= 400:
            raise BookmarkApiError(
                _error_message(response), status_code=response.status_code
            )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise BookmarkApiError(
                "Response body is not JSON", status_code=response.status_code
            ) from exc


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return f"HTTP {response.status_code}"
