"""CSV/XLSX parser with import limits, producing records grouped by section."""

from __future__ import annotations

import csv
import io
import zipfile
from collections.abc import Iterable, Mapping
from pathlib import PurePath
from typing import Any, Optional

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ..models import ImportFileFormat
from ..types import ImportLimits, ParsedImportFile, ParsedSection
from .errors import FormatError, RowLimitExceeded, SizeLimitExceeded

EXTENSION_FORMATS = {
    ".csv": ImportFileFormat.CSV,
    ".xlsx": ImportFileFormat.XLSX,
    ".xlsm": ImportFileFormat.XLSX,
}


def _read_uploaded_file(uploaded_file: Any) -> bytes:
    if uploaded_file is None:
        raise FormatError("Missing uploaded file.")
    if isinstance(uploaded_file, str):
        return uploaded_file.encode("utf-8")
    if isinstance(uploaded_file, (bytes, bytearray)):
        return bytes(uploaded_file)
    if isinstance(uploaded_file, Mapping):
        for key in ("file", "raw", "value"):
            nested = uploaded_file.get(key)
            if hasattr(nested, "read"):
                uploaded_file = nested
                break
        else:
            raise FormatError(
                "Uploaded file payload is invalid. Expected a binary uploaded file."
            )
    if hasattr(uploaded_file, "seek"):
        uploaded_file.seek(0)
    if not hasattr(uploaded_file, "read"):
        raise FormatError(
            "Uploaded file payload is invalid. Expected a readable file object."
        )
    content = uploaded_file.read()
    if isinstance(content, str):
        return content.encode("utf-8")
    return bytes(content or b"")


def _validate_size(content: bytes, max_file_size_bytes: int) -> None:
    if len(content) > max_file_size_bytes:
        raise SizeLimitExceeded(
            f"Uploaded file exceeds {max_file_size_bytes} bytes."
        )


def _is_blank_row(values: Iterable[Any]) -> bool:
    return all(value in (None, "") or (isinstance(value, str) and not value.strip()) for value in values)


def _clean_cell(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    return value


def _decode_csv(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("latin-1")


def _parse_csv(content: bytes, *, max_rows: int) -> list[ParsedSection]:
    text = _decode_csv(content)
    if "\x00" in text:
        raise FormatError("File is not a readable CSV document.")

    try:
        reader = csv.reader(io.StringIO(text, newline=""))
        header_row = next(reader, None)
        indexed_headers = [
            (column_index, str(header).strip())
            for column_index, header in enumerate(header_row or [])
            if str(header).strip()
        ]
        if not indexed_headers:
            raise FormatError("CSV header row is missing.")
        headers = [header for _column_index, header in indexed_headers]

        records: list[dict[str, Any]] = []
        for values in reader:
            if _is_blank_row(values):
                continue
            if len(records) >= max_rows:
                raise RowLimitExceeded(f"File exceeds row limit of {max_rows}.")
            records.append(
                {
                    header: _clean_cell(values[column_index]) if column_index < len(values) else None
                    for column_index, header in indexed_headers
                }
            )
    except csv.Error as exc:
        raise FormatError(f"CSV parsing error: {exc}") from exc

    return [ParsedSection(section_label=None, headers=headers, records=records)]


def _parse_sheet(worksheet, *, remaining_rows: int, max_rows: int) -> Optional[ParsedSection]:
    rows = worksheet.iter_rows(values_only=True)
    header_row = next(rows, None)
    indexed_headers: list[tuple[int, str]] = []
    for column_index, header_value in enumerate(header_row or []):
        if header_value is None:
            continue
        header_name = str(header_value).strip()
        if not header_name:
            continue
        indexed_headers.append((column_index, header_name))
    if not indexed_headers:
        return None
    headers = [header_name for _column_index, header_name in indexed_headers]

    records: list[dict[str, Any]] = []
    for values in rows:
        row = {
            header_name: _clean_cell(values[column_index]) if column_index < len(values) else None
            for column_index, header_name in indexed_headers
        }
        if _is_blank_row(row.values()):
            continue
        if len(records) >= remaining_rows:
            raise RowLimitExceeded(f"File exceeds row limit of {max_rows}.")
        records.append(row)
    if not records:
        return None
    return ParsedSection(
        section_label=str(worksheet.title).strip(),
        headers=headers,
        records=records,
    )


def _parse_xlsx(content: bytes, *, max_rows: int) -> list[ParsedSection]:
    try:
        workbook = load_workbook(io.BytesIO(content), data_only=True, read_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as exc:
        raise FormatError(f"File is not a readable XLSX workbook: {exc}") from exc

    sections: list[ParsedSection] = []
    parsed_rows = 0
    try:
        for worksheet in workbook.worksheets:
            section = _parse_sheet(
                worksheet,
                remaining_rows=max_rows - parsed_rows,
                max_rows=max_rows,
            )
            if section is None:
                continue
            parsed_rows += len(section.records)
            sections.append(section)
    finally:
        workbook.close()
    return sections


def _merge_headers(sections: list[ParsedSection]) -> list[str]:
    headers: list[str] = []
    seen: set[str] = set()
    for section in sections:
        for header in section.headers:
            if header in seen:
                continue
            seen.add(header)
            headers.append(header)
    return headers


def detect_file_format(file_name: str, declared_format: Optional[str] = None) -> str:
    """Return the declared format, or infer it from the file extension."""
    if declared_format:
        normalized = str(declared_format).strip().upper()
        if normalized in ImportFileFormat.values:
            return normalized
        raise FormatError(f"Unsupported file format '{declared_format}'.")
    suffix = PurePath(str(file_name or "")).suffix.lower()
    detected = EXTENSION_FORMATS.get(suffix)
    if detected is None:
        raise FormatError(
            f"Cannot determine the format of '{file_name}'. Upload a .csv or .xlsx file."
        )
    return str(detected)


def parse_uploaded_file(
    uploaded_file: Any,
    *,
    limits: ImportLimits,
    file_format: Optional[str] = None,
    file_name: Optional[str] = None,
) -> ParsedImportFile:
    """
    Parse an uploaded CSV or XLSX file into sections of flat records.

    CSV input yields exactly one unlabeled section; XLSX input yields one
    section per non-empty worksheet, labeled with the sheet name.
    Raises ``FormatError``, ``SizeLimitExceeded`` or ``RowLimitExceeded``.
    """
    resolved_name = file_name or getattr(uploaded_file, "name", None) or "upload"
    normalized_format = detect_file_format(resolved_name, file_format)

    content = _read_uploaded_file(uploaded_file)
    _validate_size(content, max_file_size_bytes=limits.max_file_size_bytes)
    if not content.strip():
        raise FormatError("Uploaded file is empty.")

    if normalized_format == ImportFileFormat.CSV:
        sections = _parse_csv(content, max_rows=limits.max_rows)
    else:
        sections = _parse_xlsx(content, max_rows=limits.max_rows)

    if not sections or not any(section.records for section in sections):
        raise FormatError("File must contain a header row and at least one data row.")

    return ParsedImportFile(
        headers=_merge_headers(sections),
        sections=sections,
        file_format=normalized_format,
        file_name=str(PurePath(str(resolved_name)).name),
        file_size_bytes=len(content),
    )
