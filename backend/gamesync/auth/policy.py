"""Per-route auth policy for the GameSync API.

Every endpoint in the route table is wrapped by exactly one of
``protected_api`` or ``public_route``; ``create_app`` refuses to start when
an endpoint carries neither marker.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING

from starlette.authentication import requires
from starlette.routing import Route

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any

    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.routing import BaseRoute

AUTH_POLICY_ATTR = "__auth_policy__"


def protected_api(endpoint: Callable[..., Any]) -> Callable[..., Any]:
    """Require valid Basic credentials. Anonymous callers get a 401 challenge."""
    wrapped = requires("authenticated", status_code=401)(endpoint)
    setattr(wrapped, AUTH_POLICY_ATTR, "protected_api")
    return wrapped


def public_route(endpoint: Callable[..., Any]) -> Callable[..., Any]:
    """Mark an endpoint as reachable without credentials (registration, health)."""

    @functools.wraps(endpoint)
    async def wrapper(request: Request) -> Response:
        return await endpoint(request)

    setattr(wrapper, AUTH_POLICY_ATTR, "public")
    return wrapper


def validate_route_auth_policy(routes: list[BaseRoute]) -> None:
    """Raise RuntimeError naming every route whose endpoint has no policy marker."""
    unclassified = [
        f"{route.path} ({route.name})"
        for route in routes
        if isinstance(route, Route) and not hasattr(route.endpoint, AUTH_POLICY_ATTR)
    ]
    if unclassified:
        msg = f"Routes missing an auth policy: {', '.join(unclassified)}"
        raise RuntimeError(msg)
