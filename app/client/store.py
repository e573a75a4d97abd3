"""Observable container holding the merged catalog view."""

from __future__ import annotations

from typing import Callable, Iterable

from ..models import MergedVideo

VideosListener = Callable[[tuple[MergedVideo, ...]], None]


class VideoStore:
    """Single source of truth for the catalog-with-bookmark-flags collection.

    ``replace`` swaps the whole collection and notifies every subscriber with
    the new tuple. Listeners are called synchronously in subscription order.
    """

    def __init__(self, videos: Iterable[MergedVideo] = ()):
        self._videos: tuple[MergedVideo, ...] = tuple(videos)
        self._listeners: list[VideosListener] = []

    @property
    def videos(self) -> tuple[MergedVideo, ...]:
        return self._videos

    def replace(self, videos: Iterable[MergedVideo]) -> tuple[MergedVideo, ...]:
        self._videos = videos if isinstance(videos, tuple) else tuple(videos)
        for listener in list(self._listeners):
            listener(self._videos)
        return self._videos

    def subscribe(self, listener: VideosListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
