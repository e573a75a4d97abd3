"""Database utilities for the Reelmark service."""

from __future__ import annotations

from sqlalchemy import MetaData, inspect, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


BOOKMARK_UNIQUE_INDEX = "uq_bookmark_user_video"


class Base(DeclarativeBase):
    """Declarative base with consistent naming conventions."""

    metadata = MetaData()


class Database:
    """Thin wrapper managing the SQLAlchemy async engine and sessions."""

    def __init__(self, database_url: str):
        self._engine: AsyncEngine = create_async_engine(database_url, future=True)
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self._engine, expire_on_commit=False
        )

    async def create_all(self) -> None:
        """Create database tables if they do not yet exist."""

        # Registers the mapped tables on Base.metadata.
        from . import db_models  # noqa: F401

        async with self._engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)
            await connection.run_sync(self._apply_schema_migrations)

    @staticmethod
    def _apply_schema_migrations(sync_connection) -> None:
        """Backfill the per-user uniqueness guarantee on older bookmark tables."""

        inspector = inspect(sync_connection)
        if "bookmarks" not in inspector.get_table_names():
            return

        unique_columns = [
            tuple(constraint["column_names"])
            for constraint in inspector.get_unique_constraints("bookmarks")
        ]
        unique_columns.extend(
            tuple(index["column_names"])
            for index in inspector.get_indexes("bookmarks")
            if index.get("unique")
        )
        if ("user_id", "video_id") in unique_columns:
            return

        sync_connection.execute(
            text(
                f"CREATE UNIQUE INDEX IF NOT EXISTS {BOOKMARK_UNIQUE_INDEX} "
                "ON bookmarks (user_id, video_id)"
            )
        )

    async def dispose(self) -> None:
        """Dispose of the underlying database engine."""

        await self._engine.dispose()
