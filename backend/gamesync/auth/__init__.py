"""GameSync authentication: Basic auth backend, user model, and route policy."""

from gamesync.auth.backend import BasicAuthBackend
from gamesync.auth.identity import caller_from_request
from gamesync.auth.models import AuthenticatedAccount
from gamesync.auth.policy import protected_api, public_route, validate_route_auth_policy

__all__ = [
    "AuthenticatedAccount",
    "BasicAuthBackend",
    "caller_from_request",
    "protected_api",
    "public_route",
    "validate_route_auth_policy",
]
