"""Parsing of name lists supplied through settings and environment variables."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic_settings import EnvSettingsSource

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pydantic.fields import FieldInfo
    from pydantic_settings import BaseSettings


def _clean_names(names: Iterable[Any]) -> list[str]:
    cleaned = []
    for name in names:
        if not isinstance(name, str):
            raise ValueError(f"names must be strings, got {name!r}")
        if name.strip():
            cleaned.append(name.strip())
    if not cleaned:
        raise ValueError("name list must not be empty")
    return cleaned


def parse_name_list(value: str | list[str]) -> list[str]:
    """Turn a JSON array (``'["Asha","Ben"]'``) or CSV (``'Asha, Ben'``) into names.

    Surrounding whitespace is dropped and blank entries are skipped.
    Raises ValueError when no name is left or the JSON is malformed.
    """
    if isinstance(value, list):
        return _clean_names(value)

    stripped = value.strip()
    if stripped.startswith("["):
        try:
            parsed = json.loads(stripped)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON array: {e}") from e
        return _clean_names(parsed)

    return _clean_names(stripped.split(","))


class NameListEnvSettingsSource(EnvSettingsSource):
    """Env source that leaves name-list values as raw strings.

    pydantic-settings would JSON-decode list fields itself and reject the
    CSV form, so the named fields reach their validators undecoded.
    """

    def __init__(self, settings_cls: type[BaseSettings], name_list_fields: Iterable[str]) -> None:
        super().__init__(settings_cls)
        self._name_list_fields = frozenset(name_list_fields)

    def prepare_field_value(
        self,
        field_name: str,
        field: FieldInfo,
        value: Any,  # noqa: ANN401
        value_is_complex: bool,  # noqa: FBT001
    ) -> Any:  # noqa: ANN401
        if field_name in self._name_list_fields and isinstance(value, str):
            return value
        return super().prepare_field_value(field_name, field, value, value_is_complex)
