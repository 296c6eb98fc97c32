"""
Configuration management for storefront-admin.

Settings are resolved in the following order:
1. Django settings (``STOREFRONT_ADMIN``)
2. Library defaults (``LIBRARY_DEFAULTS``)
3. The default passed by the caller
"""

from typing import Any

from django.conf import settings

from .defaults import LIBRARY_DEFAULTS

SETTINGS_NAME = "STOREFRONT_ADMIN"


def _lookup(data: Any, path: list[str]) -> Any:
    current = data
    for part in path:
        if not isinstance(current, dict) or part not in current:
            return None
        current = current[part]
    return current


class SettingsProxy:
    """
    Read storefront-admin settings by dotted key.

    Nothing is cached, so ``override_settings`` in tests takes effect
    immediately.
    """

    def sources(self) -> tuple[Any, ...]:
        return (getattr(settings, SETTINGS_NAME, {}), LIBRARY_DEFAULTS)

    def get(self, key: str, default: Any = None) -> Any:
        path = key.split(".")
        for source in self.sources():
            value = _lookup(source, path)
            if value is not None:
                return value
        return default


settings_proxy = SettingsProxy()


def get_setting(key: str, default: Any = None) -> Any:
    """Return ``key`` (e.g. ``import_settings.max_rows``) from the first source defining it."""
    return settings_proxy.get(key, default)
