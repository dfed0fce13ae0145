"""Request body parsing and outbound JSON representations."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, ValidationError

from shared.errors import ValidationFailedError

if TYPE_CHECKING:
    from starlette.requests import Request

    from shared.auth.models import Account
    from shared.dal.models import Game

ModelT = TypeVar("ModelT", bound=BaseModel)


def field_errors(exc: ValidationError) -> dict[str, str]:
    """Collapse pydantic errors into one message per field (first one wins)."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = [str(part) for part in error["loc"]]
        field = ".".join(loc) if loc else "body"
        errors.setdefault(field, error["msg"])
    return errors


async def parse_body(request: Request, model: type[ModelT]) -> ModelT:
    """Parse and validate a JSON object body, reporting every field error at once."""
    raw_body = await request.body()
    try:
        body = json.loads(raw_body) if raw_body.strip() else None
    except ValueError as e:
        raise ValidationFailedError("Malformed JSON request body", {"body": "Malformed JSON"}) from e
    if not isinstance(body, dict):
        raise ValidationFailedError("Request body must be a JSON object", {"body": "Expected a JSON object"})

    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise ValidationFailedError("Validation failed", field_errors(e)) from e


def account_payload(account: Account) -> dict[str, object]:
    """Outbound account representation. The password hash never leaves the service."""
    return {
        "id": account.account_id,
        "username": account.username,
        "email": account.email,
        "steam_id": account.steam_id,
        "roles": sorted(account.roles),
        "created_at": account.created_at.isoformat(),
    }


def game_payload(game: Game) -> dict[str, object]:
    data = game.model_dump(mode="json", exclude={"game_id"})
    return {"id": game.game_id, **data}
