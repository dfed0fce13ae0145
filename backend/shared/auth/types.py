"""Request models for account registration and profile updates."""

from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, field_validator, validate_email

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6
# bcrypt only looks at the first 72 bytes of a password
PASSWORD_MAX_BYTES = 72
EMAIL_MAX_LENGTH = 100
STEAM_ID_MAX_LENGTH = 50


def _check_password(value: str) -> str:
    if len(value) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    return value


def _check_email_length(value: str) -> str:
    if len(value) > EMAIL_MAX_LENGTH:
        raise ValueError(f"Email must be at most {EMAIL_MAX_LENGTH} characters")
    return value


def _check_username(value: str) -> str:
    if not value.strip():
        raise ValueError("Username must not be blank")
    if not USERNAME_MIN_LENGTH <= len(value) <= USERNAME_MAX_LENGTH:
        raise ValueError(f"Username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters")
    return value


Password = Annotated[str, AfterValidator(_check_password)]
Username = Annotated[str, AfterValidator(_check_username)]
Email = Annotated[EmailStr, AfterValidator(_check_email_length)]


class RegisterRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    username: Username
    password: Password
    email: Email
    steam_id: str | None = Field(default=None, max_length=STEAM_ID_MAX_LENGTH)


class AccountUpdateRequest(BaseModel):
    """Self-service profile update.

    Every field is optional. A blank string is accepted here and means
    "leave unchanged", so length and syntax rules only apply to non-blank
    values.
    """

    model_config = ConfigDict(extra="forbid")

    username: str | None = None
    email: str | None = None
    new_password: str | None = None

    @field_validator("username")
    @classmethod
    def _validate_username(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return value
        return _check_username(value)

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return value
        _, normalized = validate_email(value)
        return _check_email_length(normalized)

    @field_validator("new_password")
    @classmethod
    def _validate_new_password(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return value
        return _check_password(value)
