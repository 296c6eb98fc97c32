"""
Column-name to product-attribute mapping.

Headers are matched case-insensitively with surrounding whitespace ignored and
inner spaces or dashes treated as underscores, so ``Stock Quantity``,
``stock-quantity`` and ``stock_quantity`` all land on the same attribute.
"""

from __future__ import annotations

import re
from typing import Any

# Canonical product columns, in template order
PRODUCT_COLUMNS: tuple[str, ...] = (
    "name",
    "sku",
    "price",
    "description",
    "short_description",
    "category",
    "stock_quantity",
    "compare_at_price",
    "is_active",
    "is_featured",
)

# Alternative header spellings seen in supplier spreadsheets
FIELD_ALIASES: dict[str, str] = {
    "product_name": "name",
    "product": "name",
    "title": "name",
    "product_sku": "sku",
    "code": "sku",
    "unit_price": "price",
    "selling_price": "price",
    "category_name": "category",
    "stock": "stock_quantity",
    "quantity": "stock_quantity",
    "qty": "stock_quantity",
    "compare_price": "compare_at_price",
    "was_price": "compare_at_price",
    "active": "is_active",
    "featured": "is_featured",
}

DECIMAL_FIELDS: tuple[str, ...] = ("price", "compare_at_price")
INTEGER_FIELDS: tuple[str, ...] = ("stock_quantity",)
BOOLEAN_FIELDS: tuple[str, ...] = ("is_active", "is_featured")
TEXT_FIELDS: tuple[str, ...] = ("name", "description", "short_description")
HTML_FIELDS: tuple[str, ...] = ("description", "short_description")

_SEPARATOR_RE = re.compile(r"[\s\-]+")


def canonical_field_name(header: Any) -> str:
    key = _SEPARATOR_RE.sub("_", str(header or "").strip().lower())
    return FIELD_ALIASES.get(key, key)


def normalize_record(record: dict[str, Any]) -> dict[str, Any]:
    """
    Re-key a parsed record by canonical field name.

    When two headers collapse onto the same name, the first non-empty value wins.
    """
    normalized: dict[str, Any] = {}
    for header, value in record.items():
        key = canonical_field_name(header)
        if not key:
            continue
        if key in normalized and not is_blank(value):
            if is_blank(normalized[key]):
                normalized[key] = value
            continue
        normalized.setdefault(key, value)
    return normalized


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())
