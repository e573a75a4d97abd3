"""Static video catalog bundled with the application."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Sequence

from .models import MergedVideo, Video, VideoCategory

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / "data" / "catalog.json"


@lru_cache
def _load_catalog(path: Path) -> tuple[Video, ...]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"Catalog file {path} must contain a JSON array")

    videos: list[Video] = []
    seen: set[str] = set()
    for entry in raw:
        video = Video.model_validate(entry)
        if video.id in seen:
            raise ValueError(f"Duplicate video id {video.id!r} in catalog")
        seen.add(video.id)
        videos.append(video)
    return tuple(videos)


def load_catalog(path: Path | str | None = None) -> tuple[Video, ...]:
    """Return the catalog, parsing the backing file once per path."""

    resolved = Path(path) if path is not None else DEFAULT_CATALOG_PATH
    return _load_catalog(resolved.resolve())


def default_view(catalog: Iterable[Video]) -> tuple[MergedVideo, ...]:
    """Catalog with each entry's static bookmark flag, before any sync."""

    return tuple(MergedVideo.from_video(video) for video in catalog)


def find_video(catalog: Sequence[Video], video_id: str) -> Video | None:
    for video in catalog:
        if video.id == video_id:
            return video
    return None


def filter_videos(
    videos: Iterable[Video],
    *,
    category: VideoCategory | None = None,
    trending: bool | None = None,
    query: str | None = None,
) -> list[Video]:
    needle = (query or "").strip().lower()
    return [
        video
        for video in videos
        if (category is None or video.category == category)
        and (trending is None or video.is_trending == trending)
        and (not needle or needle in video.title.lower())
    ]
