"""Per-user bookmark persistence."""

from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..config import Settings
from ..db_models import Bookmark, User
from ..errors import Conflict, InternalError
from ..models import BookmarkRecord, BookmarkScope

logger = logging.getLogger(__name__)


class BookmarkService:
    """List, create and delete bookmarks scoped to a single user.

    Callers resolve the authenticated :class:`User` first (see
    :class:`~app.services.accounts.AccountService`); every query here filters on
    that user's id.
    """

    def __init__(
        self,
        settings: Settings,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        self._settings = settings
        self._session_factory = session_factory

    async def list_bookmarks(
        self, user: User, scope: BookmarkScope = "all"
    ) -> list[BookmarkRecord]:
        """Return the user's bookmarks.

        ``selected`` truncates to ``selected_bookmark_limit`` rows ordered by
        store id, which is stable across calls but carries no other meaning.
        """

        stmt = (
            select(Bookmark.id, Bookmark.video_id)
            .where(Bookmark.user_id == user.id)
            .order_by(Bookmark.id)
        )
        if scope == "selected":
            stmt = stmt.limit(self._settings.selected_bookmark_limit)

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                rows = result.all()
        except SQLAlchemyError as exc:
            logger.exception("Failed to list bookmarks for user %s", user.id)
            raise InternalError(details=str(exc)) from exc

        return [BookmarkRecord(id=row.id, video_id=row.video_id) for row in rows]

    async def create_bookmark(self, user: User, video_id: str) -> BookmarkRecord:
        """Insert a bookmark, raising :class:`Conflict` when it already exists.

        The existence check and insert are separate statements; concurrent
        inserts for the same pair are caught by the unique constraint instead.
        """

        try:
            async with self._session_factory() as session:
                existing = await self._find_existing(session, user.id, video_id)
                if existing is not None:
                    raise Conflict("Already bookmarked")

                bookmark = Bookmark(user_id=user.id, video_id=video_id)
                session.add(bookmark)
                try:
                    await session.commit()
                except IntegrityError as exc:
                    await session.rollback()
                    logger.info(
                        "Concurrent bookmark insert for user %s video %s",
                        user.id,
                        video_id,
                    )
                    raise Conflict("Already bookmarked") from exc
                await session.refresh(bookmark)
        except SQLAlchemyError as exc:
            logger.exception("Failed to create bookmark for user %s", user.id)
            raise InternalError(details=str(exc)) from exc

        logger.info("User %s bookmarked video %s", user.id, video_id)
        return BookmarkRecord(id=bookmark.id, video_id=bookmark.video_id)

    async def delete_bookmark(self, user: User, video_id: str) -> int:
        """Delete every bookmark for the pair and return the number removed."""

        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    delete(Bookmark).where(
                        Bookmark.user_id == user.id, Bookmark.video_id == video_id
                    )
                )
                await session.commit()
        except SQLAlchemyError as exc:
            logger.exception("Failed to delete bookmark for user %s", user.id)
            raise InternalError(details=str(exc)) from exc

        removed = result.rowcount or 0
        if removed:
            logger.info("User %s removed bookmark for video %s", user.id, video_id)
        return removed

    async def _find_existing(
        self, session: AsyncSession, user_id: int, video_id: str
    ) -> int | None:
        result = await session.execute(
            select(Bookmark.id)
            .where(Bookmark.user_id == user_id, Bookmark.video_id == video_id)
            .limit(1)
        )
        return result.scalar_one_or_none()
