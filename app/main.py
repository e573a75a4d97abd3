"""Entry point for the FastAPI-powered bookmark service."""

from __future__ import annotations
import json
import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .catalog import filter_videos, load_catalog
from .config import Settings, settings
from .database import Database
from .db_models import User
from .errors import InternalError, InvalidInput, ReelmarkError
from .models import (
    BookmarkRequest,
    BookmarkScope,
    Credentials,
    SignUpRequest,
    Video,
    parse_category,
)
from .services.accounts import AccountService
from .services.bookmarks import BookmarkService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app: FastAPI


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    app_settings = get_app_settings(fastapi_app)
    database = Database(app_settings.database_url)
    await database.create_all()

    fastapi_app.state.database = database
    fastapi_app.state.catalog = load_catalog(app_settings.catalog_path)
    fastapi_app.state.account_service = AccountService(
        app_settings, database.session_factory
    )
    fastapi_app.state.bookmark_service = BookmarkService(
        app_settings, database.session_factory
    )
    logger.info(
        "Loaded %d catalog entries", len(fastapi_app.state.catalog)
    )

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await database.dispose()


def create_app(app_settings: Settings | None = None) -> FastAPI:
    app_settings = app_settings or settings
    fastapi_app = FastAPI(
        title=app_settings.app_name,
        description="Browse the video catalog and keep per-user bookmarks",
        version="1.0.0",
        lifespan=lifespan,
    )
    fastapi_app.state.settings = app_settings

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_app_settings(fastapi_app: FastAPI) -> Settings:
    configured = getattr(fastapi_app.state, "settings", None)
    return configured if isinstance(configured, Settings) else settings


def get_account_service(fastapi_app: FastAPI) -> AccountService:
    service = getattr(fastapi_app.state, "account_service", None)
    if not isinstance(service, AccountService):
        raise RuntimeError("Account service not initialised")
    return service


def get_bookmark_service(fastapi_app: FastAPI) -> BookmarkService:
    service = getattr(fastapi_app.state, "bookmark_service", None)
    if not isinstance(service, BookmarkService):
        raise RuntimeError("Bookmark service not initialised")
    return service


def get_catalog(fastapi_app: FastAPI) -> tuple[Video, ...]:
    catalog = getattr(fastapi_app.state, "catalog", None)
    if catalog is None:
        raise RuntimeError("Catalog not loaded")
    return catalog


async def _domain_error_handler(_: Request, exc: ReelmarkError) -> JSONResponse:
    return JSONResponse(exc.to_payload(), status_code=exc.status_code)


def register_routes(fastapi_app: FastAPI) -> None:
    fastapi_app.add_exception_handler(ReelmarkError, _domain_error_handler)

    async def _current_user(request: Request) -> User:
        cookie_name = get_app_settings(fastapi_app).session_cookie_name
        token = request.cookies.get(cookie_name)
        return await get_account_service(fastapi_app).resolve_user(token)

    async def _bookmark_body(request: Request) -> BookmarkRequest:
        payload = await _read_json_object(request)
        try:
            return BookmarkRequest.model_validate(payload)
        except ValidationError as exc:
            raise InternalError(details=str(exc)) from exc

    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/videos")
    async def list_videos(
        category: str | None = None,
        trending: bool | None = None,
        search: str | None = None,
    ) -> list[dict[str, Any]]:
        try:
            resolved_category = parse_category(category) if category else None
        except ValueError as exc:
            raise InvalidInput(str(exc)) from exc
        videos = filter_videos(
            get_catalog(fastapi_app),
            category=resolved_category,
            trending=trending,
            query=search,
        )
        return [video.to_payload() for video in videos]

    @fastapi_app.post("/users", status_code=201)
    async def sign_up(request: Request) -> dict[str, Any]:
        payload = await _read_json_object(request)
        try:
            credentials = SignUpRequest.model_validate(payload)
        except ValidationError as exc:
            raise InvalidInput(
                "Invalid sign-up details",
                details="; ".join(error["msg"] for error in exc.errors()),
            ) from exc
        user = await get_account_service(fastapi_app).sign_up(
            credentials.email, credentials.password
        )
        return {"id": user.id, "email": user.email}

    @fastapi_app.post("/auth/login")
    async def login(request: Request) -> JSONResponse:
        payload = await _read_json_object(request)
        try:
            credentials = Credentials.model_validate(payload)
        except ValidationError as exc:
            raise InvalidInput("Email and password are required") from exc
        token = await get_account_service(fastapi_app).login(
            credentials.email, credentials.password
        )
        app_settings = get_app_settings(fastapi_app)
        response = JSONResponse({"email": credentials.email})
        response.set_cookie(
            app_settings.session_cookie_name,
            token,
            max_age=app_settings.session_ttl_seconds,
            httponly=True,
            samesite="lax",
            secure=app_settings.session_cookie_secure,
        )
        return response

    @fastapi_app.post("/auth/logout")
    async def logout(request: Request) -> JSONResponse:
        cookie_name = get_app_settings(fastapi_app).session_cookie_name
        await get_account_service(fastapi_app).logout(request.cookies.get(cookie_name))
        response = JSONResponse({"success": True})
        response.delete_cookie(cookie_name)
        return response

    @fastapi_app.get("/bookmarks")
    async def list_bookmarks(
        request: Request, scope: str | None = Query(default=None, alias="type")
    ) -> JSONResponse:
        user = await _current_user(request)
        resolved_scope: BookmarkScope = "selected" if scope == "selected" else "all"
        records = await get_bookmark_service(fastapi_app).list_bookmarks(
            user, resolved_scope
        )
        return JSONResponse([record.to_payload() for record in records])

    @fastapi_app.post("/bookmarks")
    async def create_bookmark(request: Request) -> JSONResponse:
        user = await _current_user(request)
        body = await _bookmark_body(request)
        record = await get_bookmark_service(fastapi_app).create_bookmark(
            user, body.video_id
        )
        return JSONResponse(record.to_payload())

    @fastapi_app.delete("/bookmarks")
    async def delete_bookmark(request: Request) -> JSONResponse:
        user = await _current_user(request)
        body = await _bookmark_body(request)
        await get_bookmark_service(fastapi_app).delete_bookmark(user, body.video_id)
        return JSONResponse({"success": True})


async def _read_json_object(request: Request) -> dict[str, Any]:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InternalError(details=f"Malformed JSON body: {exc}") from exc
    if not isinstance(payload, dict):
        raise InternalError(details="JSON body must be an object")
    return payload


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual execution
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.environment == "development",
    )
