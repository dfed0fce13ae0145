"""Accounts, credentials, and caller identity shared across the service layers."""

from shared.auth.models import Account, CallerContext, Role
from shared.auth.password import BcryptHasher, PasswordHasher, SimpleHasher, get_hasher
from shared.auth.service import AccountService, OwnedResourceCleaner
from shared.auth.settings import AuthSettings

__all__ = [
    "Account",
    "AccountService",
    "AuthSettings",
    "BcryptHasher",
    "CallerContext",
    "OwnedResourceCleaner",
    "PasswordHasher",
    "Role",
    "SimpleHasher",
    "get_hasher",
]
