"""Preview of a parsed upload: structure, samples and advisory warnings."""

from __future__ import annotations

from typing import Optional

from ....config_proxy import get_setting
from ..types import ImportPreview, ImportRecord, ImportSettings, ParsedImportFile, PreviewSection
from .row_validator import validate_records


def numbered_records(parsed: ParsedImportFile) -> list[ImportRecord]:
    return [
        {"row_number": row_number, "section_label": section_label, "data": data}
        for row_number, section_label, data in parsed.iter_numbered_records()
    ]


def build_preview(
    parsed: ParsedImportFile,
    settings: ImportSettings,
    sample_size: Optional[int] = None,
) -> ImportPreview:
    """Summarize a parsed file without creating a job or touching the catalog."""
    if sample_size is None:
        sample_size = int(get_setting("import_settings.preview_rows", 5))
    section_sample_size = int(get_setting("import_settings.section_preview_rows", 3))
    sample_size = max(0, sample_size)

    records = numbered_records(parsed)
    sections: list[PreviewSection] = [
        {
            "sectionLabel": section.section_label,
            "rowCount": len(section.records),
            "headers": list(section.headers),
            "sampleRecords": section.records[:section_sample_size],
        }
        for section in parsed.sections
    ]
    return {
        "headers": list(parsed.headers),
        "sampleRecords": [record["data"] for record in records[:sample_size]],
        "totalRows": parsed.total_rows,
        "perSectionSummary": sections,
        "validationWarnings": validate_records(records, settings),
        "fileFormat": parsed.file_format,
    }
