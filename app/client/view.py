"""Bookmark page state derived from the merged catalog view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal

from ..models import MergedVideo, Video, VideoCategory
from .sync import BookmarkSyncController, SyncStatus

ViewStatus = Literal["loading", "error", "ready"]

LOADING_MESSAGE = "Loading bookmarks..."
ERROR_MESSAGE = "Failed to fetch bookmarks"

_SECTION_LABELS: dict[VideoCategory, str] = {
    "Movie": "Movies",
    "TV Series": "TV Series",
}


def matches_filter(video: Video, query: str) -> bool:
    needle = query.strip().lower()
    return not needle or needle in video.title.lower()


@dataclass(slots=True, frozen=True)
class BookmarkSection:
    """One category block of the bookmark page."""

    category: VideoCategory
    query: str
    videos: tuple[MergedVideo, ...]
    total_bookmarked: int

    @property
    def count(self) -> int:
        return len(self.videos)

    @property
    def label(self) -> str:
        return f"Bookmarked {_SECTION_LABELS[self.category]}"

    @property
    def heading(self) -> str:
        query = self.query.strip()
        if not query:
            return self.label
        noun = "result" if self.count == 1 else "results"
        return f"Found {self.count} {noun} for '{query}' in {self.label}"

    @property
    def empty_message(self) -> str | None:
        """Message shown instead of the grid, or ``None`` when it has items."""

        if self.videos:
            return None
        if self.total_bookmarked == 0:
            return f"There are no bookmarked {_SECTION_LABELS[self.category]}."
        return f"No results for '{self.query.strip()}' in {self.label}."


@dataclass(slots=True, frozen=True)
class BookmarkViewState:
    status: ViewStatus
    movies: BookmarkSection
    series: BookmarkSection
    message: str | None = None

    @property
    def total_count(self) -> int:
        return self.movies.count + self.series.count


def build_section(
    videos: Iterable[MergedVideo], category: VideoCategory, query: str
) -> BookmarkSection:
    bookmarked = [
        video for video in videos if video.is_bookmarked and video.category == category
    ]
    return BookmarkSection(
        category=category,
        query=query,
        videos=tuple(video for video in bookmarked if matches_filter(video, query)),
        total_bookmarked=len(bookmarked),
    )


def build_bookmark_view(
    videos: Iterable[MergedVideo],
    query: str = "",
    *,
    status: SyncStatus = "ready",
    error: str | None = None,
) -> BookmarkViewState:
    """Partition bookmarked videos into movie and series sections.

    A pure function of its arguments. ``status`` is the sync status of the
    controller that produced ``videos``: ``idle``/``loading`` report a loading
    page and ``error`` reports a failed fetch, distinct from an empty result.
    """

    videos = tuple(videos)
    movies = build_section(videos, "Movie", query)
    series = build_section(videos, "TV Series", query)

    if status in ("idle", "loading"):
        return BookmarkViewState("loading", movies, series, LOADING_MESSAGE)
    if status == "error":
        return BookmarkViewState("error", movies, series, error or ERROR_MESSAGE)
    return BookmarkViewState("ready", movies, series)


class BookmarkView:
    """Holds the search filter and recomputes the page state on demand."""

    def __init__(self, controller: BookmarkSyncController, query: str = ""):
        self._controller = controller
        self.query = query

    def set_filter(self, query: str) -> BookmarkViewState:
        self.query = query
        return self.state

    @property
    def state(self) -> BookmarkViewState:
        return build_bookmark_view(
            self._controller.videos, self.query, status=self._controller.status
        )

    async def toggle(self, video_id: object) -> bool:
        return await self._controller.toggle(video_id)
