"""Shared fixtures for GameSync API tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from starlette.testclient import TestClient

from gamesync.server.app import create_app
from gamesync.server.settings import ApiServerSettings
from shared.auth.settings import AuthSettings

if TYPE_CHECKING:
    from pathlib import Path

    from starlette.applications import Starlette


@pytest.fixture
def app(tmp_path: Path) -> Starlette:
    return create_app(
        settings=ApiServerSettings(cors_origins=["http://localhost:5173"]),
        auth_settings=AuthSettings(database_path=str(tmp_path / "storage.db"), password_hasher="simple"),
    )


@pytest.fixture
def client(app: Starlette):
    with TestClient(app) as test_client:
        yield test_client
