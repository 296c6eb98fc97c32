"""
Default configuration for the storefront-admin back office.

Every setting the import pipeline and the task executor consume is declared
here. Projects override individual keys through the ``STOREFRONT_ADMIN``
Django setting, grouped by the same section names.
"""

from __future__ import annotations

from typing import Any

# --------------------------------------------------------------------------- #
# Defaults grouped by feature area
# --------------------------------------------------------------------------- #
LIBRARY_DEFAULTS: dict[str, Any] = {
    "import_settings": {
        "max_file_size_bytes": 10 * 1024 * 1024,
        "max_rows": 50_000,
        "preview_rows": 5,
        "section_preview_rows": 3,
        "default_settings": {
            "skip_duplicates": True,
            "update_existing": False,
            "validate_categories": True,
            "create_missing_categories": True,
            "required_fields": ["name", "price"],
        },
        "allowed_description_tags": [
            "a",
            "b",
            "br",
            "em",
            "i",
            "li",
            "ol",
            "p",
            "strong",
            "ul",
        ],
        "history_page_size": 20,
    },
    "task_settings": {
        "backend": "thread",
        "close_connections": True,
    },
}
