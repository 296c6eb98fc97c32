"""Import submission: parse, create the job and hand the records to a worker."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Optional

from ...tasks.executor import schedule_task
from ..models import ImportJob
from ..types import ImportRecord, ImportSettings, ParsedImportFile
from .audit_log import log_import_event
from .commit_service import json_safe
from .file_parser import parse_uploaded_file
from .import_settings import get_import_limits, parse_import_settings
from .job_service import create_job
from .preview_service import numbered_records

logger = logging.getLogger(__name__)

IMPORT_TASK_NAME = "storefront_admin.extensions.importing.services.commit_service.run_import_job"


def parse_selected_rows(raw: Any) -> Optional[set[int]]:
    """
    Normalize a selection list of 1-based row numbers.

    Accepts a list of ints/strings, a JSON list string or a comma separated
    string. ``None`` or an empty value means every row is selected.
    """
    if raw is None or raw == "":
        return None
    if isinstance(raw, str):
        text = raw.strip().strip("[]")
        items: Iterable[Any] = [part for part in text.split(",") if part.strip()]
    else:
        items = raw
    selected: set[int] = set()
    for item in items:
        try:
            selected.add(int(str(item).strip()))
        except ValueError:
            continue
    return selected


def select_records(
    parsed: ParsedImportFile,
    selected_rows: Optional[set[int]] = None,
) -> list[ImportRecord]:
    records = numbered_records(parsed)
    if selected_rows is None:
        return records
    return [record for record in records if record["row_number"] in selected_rows]


def _section_summary(records: list[ImportRecord]) -> list[dict[str, Any]]:
    counts: dict[Optional[str], int] = {}
    for record in records:
        label = record["section_label"]
        counts[label] = counts.get(label, 0) + 1
    return [{"section_label": label, "row_count": count} for label, count in counts.items()]


def submit_import(
    uploaded_file: Any,
    *,
    file_name: Optional[str] = None,
    file_format: Optional[str] = None,
    settings: Any = None,
    selected_rows: Any = None,
    user_id: str = "",
) -> ImportJob:
    """
    Start an asynchronous import.

    Ingress errors (format, size, row limit, settings) are raised before any
    job exists. Afterwards the caller only observes the job through polling.
    """
    import_settings: ImportSettings = parse_import_settings(settings)
    parsed = parse_uploaded_file(
        uploaded_file,
        limits=get_import_limits(),
        file_format=file_format,
        file_name=file_name,
    )
    records = select_records(parsed, parse_selected_rows(selected_rows))
    job = create_job(
        parsed.file_name,
        len(records),
        file_format=parsed.file_format,
        settings=import_settings,
        section_summary=_section_summary(records),
        user_id=user_id,
    )
    log_import_event(
        "submit",
        job,
        details={
            "filename": parsed.file_name,
            "file_format": parsed.file_format,
            "file_size_bytes": parsed.file_size_bytes,
            "settings": import_settings.to_dict(),
        },
    )
    payload = [
        {
            "row_number": record["row_number"],
            "section_label": record["section_label"],
            "data": json_safe(record["data"]),
        }
        for record in records
    ]
    schedule_task(IMPORT_TASK_NAME, str(job.pk), payload)
    return job
