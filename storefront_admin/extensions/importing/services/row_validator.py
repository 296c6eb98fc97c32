"""Row-level validation: advisory warnings for preview and typed values for commit."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from typing import Any, Optional

import bleach

from ....config_proxy import get_setting
from ..constants import ImportErrorCode
from ..field_map import (
    BOOLEAN_FIELDS,
    DECIMAL_FIELDS,
    HTML_FIELDS,
    INTEGER_FIELDS,
    TEXT_FIELDS,
    is_blank,
    normalize_record,
)
from ..types import ImportRecord, ImportSettings, ValidationWarning
from .errors import RowFailure

# Column limits: DecimalField(max_digits=12, decimal_places=2) and PositiveIntegerField
MAX_DECIMAL_VALUE = Decimal("9999999999.99")
MAX_INTEGER_VALUE = 2_147_483_647

TRUE_VALUES = {"1", "true", "yes", "y", "on"}
FALSE_VALUES = {"0", "false", "no", "n", "off"}


def parse_decimal(value: Any) -> Decimal:
    """Parse a non-negative decimal, raising ``ValueError`` otherwise."""
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    text = _as_text(value).replace(",", "")
    try:
        parsed = Decimal(text)
        if not parsed.is_finite() or parsed < 0:
            raise ValueError(f"'{value}' is not a non-negative number")
        if parsed > MAX_DECIMAL_VALUE:
            raise ValueError(f"'{value}' exceeds {MAX_DECIMAL_VALUE}")
        return parsed.quantize(Decimal("0.01"))
    except ArithmeticError as exc:
        raise ValueError(f"'{value}' is not a number") from exc


def parse_non_negative_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("boolean is not an integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"'{value}' is not a whole number")
        value = int(value)
    text = str(value).strip()
    try:
        parsed = Decimal(text)
        if not parsed.is_finite() or parsed != parsed.to_integral_value() or parsed < 0:
            raise ValueError(f"'{value}' is not a non-negative integer")
    except ArithmeticError as exc:
        raise ValueError(f"'{value}' is not an integer") from exc
    if parsed > MAX_INTEGER_VALUE:
        raise ValueError(f"'{value}' exceeds {MAX_INTEGER_VALUE}")
    return int(parsed)


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    normalized = str(value).strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise ValueError(f"'{value}' is not a boolean")


def sanitize_html(value: str) -> str:
    allowed_tags = get_setting("import_settings.allowed_description_tags", []) or []
    return bleach.clean(value, tags=set(allowed_tags), attributes={"a": ["href", "title"]}, strip=True)


def _field_value(data: dict[str, Any], field_name: str, section_label: Optional[str]) -> Any:
    # Sheet name takes precedence over a category column
    if field_name == "category" and section_label:
        return section_label
    return data.get(field_name)


def _as_text(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _record_warnings(
    row_number: int,
    data: dict[str, Any],
    section_label: Optional[str],
    settings: ImportSettings,
) -> list[ValidationWarning]:
    warnings: list[ValidationWarning] = []
    for field_name in settings.required_fields:
        if is_blank(_field_value(data, field_name, section_label)):
            warnings.append(
                {
                    "row": row_number,
                    "field": field_name,
                    "warning": f"Required field '{field_name}' is missing",
                }
            )
    for field_name in DECIMAL_FIELDS:
        value = data.get(field_name)
        if is_blank(value):
            continue
        try:
            parse_decimal(value)
        except ValueError:
            warnings.append(
                {
                    "row": row_number,
                    "field": field_name,
                    "warning": f"Field '{field_name}' must be a non-negative number",
                }
            )
    for field_name in INTEGER_FIELDS:
        value = data.get(field_name)
        if is_blank(value):
            continue
        try:
            parse_non_negative_int(value)
        except ValueError:
            warnings.append(
                {
                    "row": row_number,
                    "field": field_name,
                    "warning": f"Field '{field_name}' must be a non-negative integer",
                }
            )
    return warnings


def validate_records(
    records: Iterable[ImportRecord],
    settings: ImportSettings,
) -> list[ValidationWarning]:
    """
    Produce advisory warnings for a set of numbered records.

    Warnings are ordered by row, then required fields in the configured order,
    then numeric fields. Nothing is raised and nothing is written.
    """
    warnings: list[ValidationWarning] = []
    for record in records:
        data = normalize_record(record["data"])
        warnings.extend(
            _record_warnings(
                record["row_number"], data, record.get("section_label"), settings
            )
        )
    return warnings


def coerce_product_values(
    data: dict[str, Any],
    settings: ImportSettings,
    *,
    section_label: Optional[str] = None,
    row_number: Optional[int] = None,
) -> dict[str, Any]:
    """
    Convert a raw record into typed product attributes.

    Only columns present and non-blank in the record are returned, so an update
    leaves omitted attributes untouched. Every problem on the row is collected
    and raised together as one ``RowFailure``.
    """
    normalized = normalize_record(data)
    problems: list[tuple[str, str]] = []
    values: dict[str, Any] = {}

    required = list(settings.required_fields)
    if "name" not in required:
        required.insert(0, "name")
    for field_name in required:
        if is_blank(_field_value(normalized, field_name, section_label)):
            problems.append(
                (
                    ImportErrorCode.REQUIRED_FIELD_MISSING,
                    f"Required field '{field_name}' is missing",
                )
            )

    for field_name in DECIMAL_FIELDS:
        value = normalized.get(field_name)
        if is_blank(value):
            continue
        try:
            values[field_name] = parse_decimal(value)
        except ValueError:
            problems.append(
                (
                    ImportErrorCode.INVALID_NUMERIC_FIELD,
                    f"Field '{field_name}' must be a non-negative number (got '{value}')",
                )
            )
    for field_name in INTEGER_FIELDS:
        value = normalized.get(field_name)
        if is_blank(value):
            continue
        try:
            values[field_name] = parse_non_negative_int(value)
        except ValueError:
            problems.append(
                (
                    ImportErrorCode.INVALID_NUMERIC_FIELD,
                    f"Field '{field_name}' must be a non-negative integer (got '{value}')",
                )
            )
    for field_name in BOOLEAN_FIELDS:
        value = normalized.get(field_name)
        if is_blank(value):
            continue
        try:
            values[field_name] = parse_bool(value)
        except ValueError:
            problems.append(
                (
                    ImportErrorCode.INVALID_NUMERIC_FIELD,
                    f"Field '{field_name}' must be true or false (got '{value}')",
                )
            )

    if problems:
        raise RowFailure(problems, row_number=row_number)

    for field_name in TEXT_FIELDS:
        value = normalized.get(field_name)
        if is_blank(value):
            continue
        text = _as_text(value)
        if field_name in HTML_FIELDS:
            text = sanitize_html(text)
        values[field_name] = text

    sku = normalized.get("sku")
    if not is_blank(sku):
        values["sku"] = _as_text(sku)

    category = _field_value(normalized, "category", section_label)
    if not is_blank(category):
        values["category"] = _as_text(category)

    return values
