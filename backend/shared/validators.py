"""Validation helpers for list-valued settings read from the environment."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic_settings import EnvSettingsSource

if TYPE_CHECKING:
    from pydantic.fields import FieldInfo

_EMPTY_MSG = "String list value must not be empty"


def _decode_json_list(raw: str) -> list[str]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON array: {e}") from e
    if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
        raise ValueError("JSON value must be an array of strings")
    return parsed


def parse_string_list(value: str | list[str], *, allow_empty: bool = False) -> list[str]:
    """Parse a string list from an environment variable or config value.

    Accepts a list of strings, a JSON array string such as
    '["https://a.example","https://b.example"]', or a comma-separated string.
    Entries are trimmed and repeated entries dropped.

    Raises ValueError for blank strings and malformed JSON, and for an
    empty result unless allow_empty is set.
    """
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValueError(_EMPTY_MSG)
        items = _decode_json_list(stripped) if stripped.startswith("[") else stripped.split(",")
    else:
        items = value

    result = list(dict.fromkeys(item.strip() for item in items if item.strip()))
    if not allow_empty and not result:
        raise ValueError(_EMPTY_MSG)
    return result


class StringListEnvSettingsSource(EnvSettingsSource):
    """Env settings source that hands string-list fields to their validators as raw strings.

    pydantic-settings JSON-decodes list-typed env values before validators
    run, which would reject the comma-separated form of GAMESYNC_CORS_ORIGINS.
    """

    _string_list_fields = frozenset({"cors_origins"})

    def prepare_field_value(
        self,
        field_name: str,
        field: FieldInfo,
        value: Any,  # noqa: ANN401
        value_is_complex: bool,  # noqa: FBT001
    ) -> Any:  # noqa: ANN401
        if field_name in self._string_list_fields and isinstance(value, str):
            return value
        return super().prepare_field_value(field_name, field, value, value_is_complex)
