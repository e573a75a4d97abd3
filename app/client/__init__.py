"""Client-side bookmark synchronisation and page state."""

from __future__ import annotations

from .api import BookmarkApiClient, BookmarkApiError, build_http_client
from .signup import SignUpForm
from .store import VideoStore
from .sync import BookmarkSyncController, MutationFailure, merge_bookmarks
from .view import BookmarkView, BookmarkViewState, build_bookmark_view

__all__ = [
    "BookmarkApiClient",
    "BookmarkApiError",
    "BookmarkSyncController",
    "BookmarkView",
    "BookmarkViewState",
    "MutationFailure",
    "SignUpForm",
    "VideoStore",
    "build_bookmark_view",
    "build_http_client",
    "merge_bookmarks",
]
