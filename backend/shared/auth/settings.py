"""Auth and persistence settings."""

from typing import Literal

from pydantic_settings import BaseSettings


class AuthSettings(BaseSettings):
    model_config = {"env_prefix": "AUTH_"}

    # SQLite document store file path
    database_path: str = "backend/storage.db"

    # "simple" is only meant for tests; production runs bcrypt
    password_hasher: Literal["bcrypt", "simple"] = "bcrypt"
