"""Helpers shared by catalog writers."""

from __future__ import annotations

from django.utils.text import slugify

MAX_SLUG_LENGTH = 50


def slugify_name(name: str, *, max_length: int = MAX_SLUG_LENGTH) -> str:
    """Build a URL slug from a display name, capped at ``max_length``.

    Non-Latin scripts are kept as-is; names with no usable characters fall
    back to ``"item"``.
    """
    slug = slugify(str(name or ""), allow_unicode=True)[:max_length].strip("-")
    return slug or "item"
