"""Pydantic models describing catalog and bookmark payloads."""

from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .utils import canonical_video_id, is_valid_email, is_valid_password, normalize_email

VideoCategory = Literal["Movie", "TV Series"]
BookmarkScope = Literal["all", "selected"]

_CATEGORY_ALIASES: dict[str, VideoCategory] = {
    "movie": "Movie",
    "movies": "Movie",
    "tv series": "TV Series",
    "tvseries": "TV Series",
    "tv-series": "TV Series",
    "series": "TV Series",
}


def parse_category(value: str) -> VideoCategory:
    """Map loose category spellings (``tv-series``, ``movies``) to the canonical one."""

    category = _CATEGORY_ALIASES.get(value.strip().lower())
    if category is None:
        raise ValueError(f"Unsupported category {value!r}")
    return category


class ThumbnailSet(BaseModel):
    """Image references keyed by layout and then by size."""

    model_config = ConfigDict(frozen=True)

    trending: dict[str, str] | None = None
    regular: dict[str, str] = Field(default_factory=dict)


class Video(BaseModel):
    """A single immutable catalog entry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str
    category: VideoCategory
    year: int
    rating: str
    thumbnail: ThumbnailSet = Field(default_factory=ThumbnailSet)
    video: str | None = None
    is_trending: bool = Field(
        default=False,
        validation_alias=AliasChoices("isTrending", "is_trending"),
        serialization_alias="isTrending",
    )
    is_bookmarked: bool = Field(
        default=False,
        validation_alias=AliasChoices("isBookmarked", "is_bookmarked"),
        serialization_alias="isBookmarked",
    )

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> str:
        return canonical_video_id(value)

    @field_validator("category", mode="before")
    @classmethod
    def _normalise_category(cls, value: object) -> object:
        if isinstance(value, str):
            return _CATEGORY_ALIASES.get(value.strip().lower(), value)
        return value

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(by_alias=True, exclude_none=True)


class MergedVideo(Video):
    """Catalog entry annotated with the current user's bookmark status."""

    @classmethod
    def from_video(cls, video: Video, *, is_bookmarked: bool | None = None) -> "MergedVideo":
        data = video.model_dump()
        if is_bookmarked is not None:
            data["is_bookmarked"] = is_bookmarked
        return cls.model_validate(data)

    def with_bookmark(self, is_bookmarked: bool) -> "MergedVideo":
        if self.is_bookmarked == is_bookmarked:
            return self
        return self.model_copy(update={"is_bookmarked": is_bookmarked})


class BookmarkRecord(BaseModel):
    """Bookmark row as exchanged over HTTP: ``{"id": ..., "videoId": ...}``."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    video_id: str = Field(
        validation_alias=AliasChoices("videoId", "video_id"),
        serialization_alias="videoId",
    )

    @field_validator("video_id", mode="before")
    @classmethod
    def _coerce_video_id(cls, value: object) -> str:
        return canonical_video_id(value)

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)


class BookmarkRequest(BaseModel):
    """Body of ``POST``/``DELETE /bookmarks``."""

    video_id: str = Field(validation_alias=AliasChoices("videoId", "video_id"))

    @field_validator("video_id", mode="before")
    @classmethod
    def _coerce_video_id(cls, value: object) -> str:
        return canonical_video_id(value)


class Credentials(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, value: str) -> str:
        return normalize_email(value)


class SignUpRequest(Credentials):
    """Credentials checked with the same rules as the sign-up form."""

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        if not is_valid_email(value):
            raise ValueError("Invalid email format")
        return value

    @field_validator("password")
    @classmethod
    def _validate_password(cls, value: str) -> str:
        if not is_valid_password(value):
            raise ValueError(
                "Must be at least 6 characters, with at least one number and one letter"
            )
        return value
