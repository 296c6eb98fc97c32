"""Delimited error report for an import job's failed rows."""

from __future__ import annotations

import csv
import io
import json

from ..models import ImportJob

REPORT_HEADERS = ("rowNumber", "errorMessage", "rowData")


def error_report_filename(job: ImportJob) -> str:
    return f"import-errors-{job.pk}.csv"


def render_error_report(job: ImportJob) -> str:
    """Return CSV text with one line per failed row, ordered by row number."""
    buffer = io.StringIO(newline="")
    writer = csv.writer(buffer)
    writer.writerow(REPORT_HEADERS)
    for row_error in job.row_errors.all().order_by("row_number"):
        writer.writerow(
            [
                row_error.row_number,
                row_error.error_message,
                json.dumps(row_error.row_data or {}, sort_keys=True, separators=(",", ":")),
            ]
        )
    return buffer.getvalue()
