"""Parsing of the per-request import settings payload."""

from __future__ import annotations

import json
from typing import Any, Optional

from ....config_proxy import get_setting
from ..field_map import canonical_field_name
from ..types import ImportLimits, ImportSettings
from .errors import InvalidSettings

BOOLEAN_KEYS = {
    "skipDuplicates": "skip_duplicates",
    "skip_duplicates": "skip_duplicates",
    "updateExisting": "update_existing",
    "update_existing": "update_existing",
    "validateCategories": "validate_categories",
    "validate_categories": "validate_categories",
    "createMissingCategories": "create_missing_categories",
    "create_missing_categories": "create_missing_categories",
}
REQUIRED_FIELDS_KEYS = ("requiredFields", "required_fields")


def get_import_limits() -> ImportLimits:
    return ImportLimits(
        max_rows=int(get_setting("import_settings.max_rows", 50_000)),
        max_file_size_bytes=int(
            get_setting("import_settings.max_file_size_bytes", 10 * 1024 * 1024)
        ),
    )


def default_import_settings() -> ImportSettings:
    configured = get_setting("import_settings.default_settings", {}) or {}
    return _build_settings(configured, base=ImportSettings())


def _coerce_required_fields(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        raise InvalidSettings(
            "requiredFields must be a list of column names.",
            field_path="requiredFields",
        )
    fields: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise InvalidSettings(
                "requiredFields must contain only strings.",
                field_path="requiredFields",
            )
        name = canonical_field_name(item)
        if name and name not in fields:
            fields.append(name)
    return tuple(fields)


def _build_settings(payload: dict[str, Any], *, base: ImportSettings) -> ImportSettings:
    values = base.to_dict()
    values["required_fields"] = tuple(values["required_fields"])
    for key, value in payload.items():
        attribute = BOOLEAN_KEYS.get(key)
        if attribute is not None:
            if not isinstance(value, bool):
                raise InvalidSettings(
                    f"Setting '{key}' must be a boolean.", field_path=key
                )
            values[attribute] = value
        elif key in REQUIRED_FIELDS_KEYS:
            values["required_fields"] = _coerce_required_fields(value)
    return ImportSettings(**values)


def parse_import_settings(raw: Optional[Any]) -> ImportSettings:
    """
    Build ``ImportSettings`` from a JSON string or mapping.

    Keys may be camelCase or snake_case; unknown keys are ignored and missing
    keys fall back to ``import_settings.default_settings``.
    """
    defaults = default_import_settings()
    if raw is None or raw == "":
        return defaults
    if isinstance(raw, ImportSettings):
        return raw
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            raise InvalidSettings(f"Settings payload is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise InvalidSettings("Settings payload must be a JSON object.")
    return _build_settings(raw, base=defaults)
