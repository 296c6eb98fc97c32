"""Read-only progress reporting for import jobs."""

from __future__ import annotations

from typing import Any

from ..models import ImportJob, ImportRowError
from .job_service import get_job


def get_status(job_id: Any) -> ImportJob:
    """Return a fresh read of the job; raises ``JobNotFound``."""
    return get_job(job_id)


def get_errors(job_id: Any) -> list[ImportRowError]:
    job = get_job(job_id)
    return list(ImportRowError.objects.filter(import_job=job).order_by("row_number"))


def _isoformat(value) -> str | None:
    return value.isoformat() if value is not None else None


def serialize_job(job: ImportJob) -> dict[str, Any]:
    return {
        "id": str(job.pk),
        "filename": job.filename,
        "fileFormat": job.file_format,
        "status": job.status,
        "totalRows": job.total_rows,
        "processedRows": job.processed_rows,
        "successfulRows": job.successful_rows,
        "failedRows": job.failed_rows,
        "createdRows": job.created_rows,
        "updatedRows": job.updated_rows,
        "skippedRows": job.skipped_rows,
        "errorMessage": job.error_message,
        "createdAt": _isoformat(job.created_at),
        "startedAt": _isoformat(job.started_at),
        "completedAt": _isoformat(job.completed_at),
        "progressPercent": job.progress_percent,
        "isTerminal": job.is_terminal,
    }


def serialize_row_error(row_error: ImportRowError) -> dict[str, Any]:
    return {
        "rowNumber": row_error.row_number,
        "code": row_error.code,
        "errorMessage": row_error.error_message,
        "rowData": row_error.row_data,
    }
