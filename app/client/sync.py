"""Reconcile the static catalog with the user's server-side bookmarks."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, Literal, Sequence

from ..catalog import default_view, find_video
from ..models import MergedVideo, Video
from ..utils import canonical_video_id
from .api import BookmarkApiClient, BookmarkApiError
from .store import VideoStore

logger = logging.getLogger(__name__)

SyncStatus = Literal["idle", "loading", "ready", "error"]
MutationAction = Literal["bookmark", "unbookmark"]


@dataclass(slots=True, frozen=True)
class MutationFailure:
    """A bookmark change the server rejected or never received."""

    video_id: str
    action: MutationAction
    message: str


def merge_bookmarks(
    catalog: Iterable[Video], bookmarked_ids: Iterable[object]
) -> tuple[MergedVideo, ...]:
    """Return the catalog with ``is_bookmarked`` set from ``bookmarked_ids``.

    Every entry is overwritten, so the result only reflects the given ids and
    never the catalog's static defaults.
    """

    wanted = {canonical_video_id(video_id) for video_id in bookmarked_ids}
    return tuple(
        MergedVideo.from_video(video, is_bookmarked=video.id in wanted)
        for video in catalog
    )


class BookmarkSyncController:
    """Owns the merged catalog view for one signed-in user.

    ``start`` performs the initial fetch. Afterwards, any replacement of the
    store's collection that this controller did not publish itself schedules
    a fresh fetch-and-merge, cancelling one still in flight.
    """

    def __init__(
        self,
        api: BookmarkApiClient,
        catalog: Sequence[Video],
        store: VideoStore | None = None,
    ):
        self._api = api
        self._catalog = tuple(catalog)
        self._defaults = default_view(self._catalog)
        self.store = store if store is not None else VideoStore(self._defaults)
        self.status: SyncStatus = "idle"
        self.last_error: str | None = None
        self.mutation_error: MutationFailure | None = None
        self._published: tuple[MergedVideo, ...] | None = None
        self._task: asyncio.Task[tuple[MergedVideo, ...]] | None = None
        self._resync_pending = False
        self._unsubscribe = self.store.subscribe(self._on_videos_replaced)

    @property
    def videos(self) -> tuple[MergedVideo, ...]:
        return self.store.videos

    async def start(self) -> tuple[MergedVideo, ...]:
        """Schedule the initial fetch and wait for the view to settle.

        The fetch runs as the controller's sync task, so a mutation made while
        it is in flight supersedes it instead of being overwritten by it.
        """

        self.request_sync()
        await self.wait_idle()
        return self.videos

    async def sync(self) -> tuple[MergedVideo, ...]:
        """Fetch the user's bookmarks and publish the merged view.

        Never raises for API failures: the catalog defaults are published
        instead and the failure is kept in ``status``/``last_error``.
        """

        if self.status == "idle":
            self.status = "loading"
        try:
            records = await self._api.list_bookmarks("all")
        except BookmarkApiError as exc:
            logger.warning(
                "Bookmark sync failed, falling back to catalog defaults: %s",
                exc.message,
            )
            self.status = "error"
            self.last_error = exc.message
            return self._publish(self._defaults)

        merged = merge_bookmarks(self._catalog, (record.video_id for record in records))
        self.status = "ready"
        self.last_error = None
        return self._publish(merged)

    def request_sync(self) -> asyncio.Task[tuple[MergedVideo, ...]]:
        """Schedule a sync on the running loop, superseding a pending one."""

        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._resync_pending = False
        self._task = asyncio.get_running_loop().create_task(self.sync())
        return self._task

    async def wait_idle(self) -> None:
        """Wait until no scheduled sync is pending.

        A re-sync deferred because the store was replaced outside the event
        loop is started here first.
        """

        if self._resync_pending:
            self.request_sync()
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

    async def close(self) -> None:
        self._unsubscribe()
        if self._task is not None and not self._task.done():
            self._task.cancel()
            await asyncio.wait({self._task})

    async def bookmark(self, video_id: object) -> bool:
        return await self._mutate(canonical_video_id(video_id), "bookmark")

    async def unbookmark(self, video_id: object) -> bool:
        return await self._mutate(canonical_video_id(video_id), "unbookmark")

    async def toggle(self, video_id: object) -> bool:
        resolved = canonical_video_id(video_id)
        video = find_video(self.store.videos, resolved)
        if video is None:
            raise KeyError(f"Unknown video {resolved!r}")
        return await self._mutate(
            resolved, "unbookmark" if video.is_bookmarked else "bookmark"
        )

    async def retry_failed_mutation(self) -> bool:
        """Replay the last failed mutation; ``True`` when nothing is pending."""

        failure = self.mutation_error
        if failure is None:
            return True
        return await self._mutate(failure.video_id, failure.action)

    async def _mutate(self, video_id: str, action: MutationAction) -> bool:
        try:
            if action == "bookmark":
                await self._api.create_bookmark(video_id)
            else:
                await self._api.delete_bookmark(video_id)
        except BookmarkApiError as exc:
            if not (action == "bookmark" and exc.status_code == 409):
                logger.warning(
                    "Failed to %s video %s: %s", action, video_id, exc.message
                )
                self.mutation_error = MutationFailure(video_id, action, exc.message)
                return False

        self.mutation_error = None
        flag = action == "bookmark"
        # Not published by the controller, so this also schedules a re-sync.
        self.store.replace(
            video.with_bookmark(flag) if video.id == video_id else video
            for video in self.store.videos
        )
        return True

    def _publish(self, videos: tuple[MergedVideo, ...]) -> tuple[MergedVideo, ...]:
        self._published = videos
        return self.store.replace(videos)

    def _on_videos_replaced(self, videos: tuple[MergedVideo, ...]) -> None:
        if videos is self._published:
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("Store replaced outside the event loop; deferring re-sync")
            self._resync_pending = True
            return
        self.request_sync()
