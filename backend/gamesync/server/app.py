from __future__ import annotations

import contextlib
import sqlite3
from http import HTTPStatus
from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.middleware.authentication import AuthenticationMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route

from gamesync.auth.backend import BasicAuthBackend
from gamesync.auth.policy import protected_api, public_route, validate_route_auth_policy
from gamesync.server.middleware import SecurityHeadersMiddleware, SlashNormalizationMiddleware
from gamesync.server.settings import ApiServerSettings
from gamesync.views import (
    create_game,
    delete_account,
    delete_game,
    get_account,
    get_game,
    get_self,
    list_games,
    register,
    update_account,
    update_game,
)
from gamesync.views.errors import EXCEPTION_HANDLERS
from shared.auth import AccountService
from shared.auth.password import get_hasher
from shared.auth.settings import AuthSettings
from shared.db import Database, SqliteAccountRepository, SqliteGameRepository
from shared.games import GameService
from shared.logging import setup_logging

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from starlette.requests import Request


async def health(request: Request) -> JSONResponse:
    db: Database = request.app.state.db
    try:
        db.connection.execute("SELECT 1").fetchone()
    except (RuntimeError, sqlite3.Error):
        logger.warning("health check failed: database unavailable")
        return JSONResponse({"status": "unavailable"}, status_code=HTTPStatus.SERVICE_UNAVAILABLE)
    return JSONResponse({"status": "ok"})


def create_app(
    settings: ApiServerSettings | None = None,
    auth_settings: AuthSettings | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = ApiServerSettings()
    if auth_settings is None:  # pragma: no cover
        auth_settings = AuthSettings()

    routes = [
        # Accounts
        Route("/users/register", public_route(register), methods=["POST"], name="register"),
        Route("/users/me", protected_api(get_self), methods=["GET"], name="get_self"),
        Route("/users/{account_id}", protected_api(get_account), methods=["GET"], name="get_account"),
        Route("/users/{account_id}", protected_api(update_account), methods=["PUT"], name="update_account"),
        Route("/users/{account_id}", protected_api(delete_account), methods=["DELETE"], name="delete_account"),
        # Games (always scoped to the caller)
        Route("/games", protected_api(create_game), methods=["POST"], name="create_game"),
        Route("/games", protected_api(list_games), methods=["GET"], name="list_games"),
        Route("/games/{game_id}", protected_api(get_game), methods=["GET"], name="get_game"),
        Route("/games/{game_id}", protected_api(update_game), methods=["PUT"], name="update_game"),
        Route("/games/{game_id}", protected_api(delete_game), methods=["DELETE"], name="delete_game"),
        # Public
        Route("/health", public_route(health), methods=["GET"], name="health"),
    ]

    validate_route_auth_policy(routes)

    # Store first, then services: games know nothing about accounts, and
    # the account service reaches games only through the cleaner protocol.
    db = Database(auth_settings.database_path)
    db.connect()
    game_service = GameService(SqliteGameRepository(db))
    account_service = AccountService(
        SqliteAccountRepository(db),
        game_service,
        password_hasher=get_hasher(auth_settings.password_hasher),
    )

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:  # pragma: no cover
        yield
        db.close()

    app = Starlette(
        routes=routes,
        lifespan=lifespan,
        exception_handlers=EXCEPTION_HANDLERS,
    )
    app.add_middleware(SlashNormalizationMiddleware)  # type: ignore[arg-type]
    app.add_middleware(AuthenticationMiddleware, backend=BasicAuthBackend(account_service))  # type: ignore[arg-type]
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Authorization", "Content-Type"],
    )
    app.add_middleware(SecurityHeadersMiddleware)  # type: ignore[arg-type]

    app.state.db = db
    app.state.settings = settings
    app.state.auth_settings = auth_settings
    app.state.account_service = account_service
    app.state.game_service = game_service

    logger.info("gamesync api ready", database=auth_settings.database_path)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory gamesync.server.app:get_app."""
    s = ApiServerSettings()
    auth = AuthSettings()
    setup_logging(log_dir=s.log_dir)
    return create_app(settings=s, auth_settings=auth)
