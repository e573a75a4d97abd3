"""Account registration and cookie-session resolution."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..config import Settings
from ..db_models import SessionRecord, User
from ..errors import Conflict, InternalError, Unauthorized, UserNotFound
from ..utils import hash_password, normalize_email, verify_password

logger = logging.getLogger(__name__)


class AccountService:
    """Creates users, issues session tokens and maps tokens back to users."""

    def __init__(
        self,
        settings: Settings,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        self._settings = settings
        self._session_factory = session_factory

    async def sign_up(self, email: str, password: str) -> User:
        email = normalize_email(email)
        try:
            async with self._session_factory() as session:
                if await self._find_user(session, email) is not None:
                    raise Conflict("User already exists")
                user = User(email=email, password_hash=hash_password(password))
                session.add(user)
                try:
                    await session.commit()
                except IntegrityError as exc:
                    await session.rollback()
                    raise Conflict("User already exists") from exc
                await session.refresh(user)
        except SQLAlchemyError as exc:
            logger.exception("Failed to create user %s", email)
            raise InternalError(details=str(exc)) from exc

        logger.info("Created user %s", user.id)
        return user

    async def login(self, email: str, password: str) -> str:
        """Verify credentials and return a fresh session token."""

        email = normalize_email(email)
        now = datetime.utcnow()
        token = secrets.token_urlsafe(32)
        try:
            async with self._session_factory() as session:
                user = await self._find_user(session, email)
                if user is None or not verify_password(password, user.password_hash):
                    raise Unauthorized("Invalid credentials")
                session.add(
                    SessionRecord(
                        token=token,
                        email=user.email,
                        created_at=now,
                        expires_at=now
                        + timedelta(seconds=self._settings.session_ttl_seconds),
                    )
                )
                # Opportunistic cleanup of this user's stale sessions.
                await session.execute(
                    delete(SessionRecord).where(
                        SessionRecord.email == user.email,
                        SessionRecord.expires_at <= now,
                    )
                )
                await session.commit()
        except SQLAlchemyError as exc:
            logger.exception("Failed to open session for %s", email)
            raise InternalError(details=str(exc)) from exc
        return token

    async def logout(self, token: str | None) -> None:
        if not token:
            return
        try:
            async with self._session_factory() as session:
                await session.execute(
                    delete(SessionRecord).where(SessionRecord.token == token)
                )
                await session.commit()
        except SQLAlchemyError as exc:
            raise InternalError(details=str(exc)) from exc

    async def resolve_user(self, token: str | None) -> User:
        """Return the user behind ``token``.

        Raises :class:`Unauthorized` for a missing, unknown or expired token and
        :class:`UserNotFound` when the session's email has no user row.
        """

        if not token:
            raise Unauthorized()
        try:
            async with self._session_factory() as session:
                record = await session.get(SessionRecord, token)
                if record is None or record.expires_at <= datetime.utcnow():
                    raise Unauthorized()
                user = await self._find_user(session, record.email)
        except SQLAlchemyError as exc:
            logger.exception("Failed to resolve session")
            raise InternalError(details=str(exc)) from exc

        if user is None:
            logger.warning("Session references missing user %s", record.email)
            raise UserNotFound()
        return user

    @staticmethod
    async def _find_user(session: AsyncSession, email: str) -> User | None:
        result = await session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()
