"""Test helpers for Basic-auth API calls."""

from __future__ import annotations

import base64
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from starlette.testclient import TestClient

DEFAULT_PASSWORD = "pw123456"  # noqa: S105


def basic_auth(username: str, password: str = DEFAULT_PASSWORD) -> dict[str, str]:
    """Build an Authorization header for HTTP Basic credentials."""
    token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return {"Authorization": f"Basic {token}"}


def register_account(
    client: TestClient,
    username: str,
    password: str = DEFAULT_PASSWORD,
    email: str | None = None,
    **fields: str,
) -> dict:
    """Register an account and return the response body."""
    response = client.post(
        "/users/register",
        json={"username": username, "password": password, "email": email or f"{username}@x.com", **fields},
    )
    assert response.status_code == 201, response.text
    return response.json()


def create_game(client: TestClient, username: str, name: str, **fields: object) -> dict:
    """Create a game for the given account and return the response body."""
    body = {"name": name, "developer": "Square", "status": "WISHLIST", **fields}
    response = client.post("/games", json=body, headers=basic_auth(username))
    assert response.status_code == 201, response.text
    return response.json()
