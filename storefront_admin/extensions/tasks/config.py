"""
Configuration for background task execution.
"""

from dataclasses import dataclass
from typing import Any

from ...config_proxy import get_setting

SUPPORTED_BACKENDS = frozenset({"sync", "thread"})


@dataclass(frozen=True)
class TaskSettings:
    backend: str
    close_connections: bool


def _coerce_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    return bool(value)


def _coerce_str(value: Any, default: str) -> str:
    if value is None:
        return default
    value = str(value).strip()
    return value or default


def get_task_settings() -> TaskSettings:
    backend = _coerce_str(get_setting("task_settings.backend", "thread"), "thread").lower()
    close_connections = _coerce_bool(
        get_setting("task_settings.close_connections", True), True
    )
    return TaskSettings(backend=backend, close_connections=close_connections)
