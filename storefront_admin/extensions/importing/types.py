"""Typed contracts shared across importing services."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, NotRequired, Optional, TypedDict


@dataclass(frozen=True)
class ParsedSection:
    section_label: Optional[str]
    headers: list[str]
    records: list[dict[str, Any]]


@dataclass(frozen=True)
class ParsedImportFile:
    headers: list[str]
    sections: list[ParsedSection]
    file_format: str
    file_name: str
    file_size_bytes: int

    @property
    def total_rows(self) -> int:
        return sum(len(section.records) for section in self.sections)

    def iter_numbered_records(
        self,
    ) -> Iterator[tuple[int, Optional[str], dict[str, Any]]]:
        """Yield ``(row_number, section_label, record)`` with 1-based numbering."""
        row_number = 0
        for section in self.sections:
            for record in section.records:
                row_number += 1
                yield row_number, section.section_label, record


@dataclass(frozen=True)
class ImportLimits:
    max_rows: int
    max_file_size_bytes: int


@dataclass(frozen=True)
class ImportSettings:
    skip_duplicates: bool = True
    update_existing: bool = False
    validate_categories: bool = True
    create_missing_categories: bool = True
    required_fields: tuple[str, ...] = field(default=("name", "price"))

    def to_dict(self) -> dict[str, Any]:
        return {
            "skip_duplicates": self.skip_duplicates,
            "update_existing": self.update_existing,
            "validate_categories": self.validate_categories,
            "create_missing_categories": self.create_missing_categories,
            "required_fields": list(self.required_fields),
        }


class ImportRecord(TypedDict):
    row_number: int
    section_label: Optional[str]
    data: dict[str, Any]


class ValidationWarning(TypedDict):
    row: int
    field: str
    warning: str


class PreviewSection(TypedDict):
    sectionLabel: Optional[str]
    rowCount: int
    headers: list[str]
    sampleRecords: list[dict[str, Any]]


class ImportPreview(TypedDict):
    headers: list[str]
    sampleRecords: list[dict[str, Any]]
    totalRows: int
    perSectionSummary: list[PreviewSection]
    validationWarnings: list[ValidationWarning]
    fileFormat: NotRequired[str]


class ImportCommitSummary(TypedDict):
    total_rows: int
    processed_rows: int
    successful_rows: int
    failed_rows: int
    created_rows: int
    updated_rows: int
    skipped_rows: int
    status: str
