"""Import job lifecycle: creation, status transitions and progress counters."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Optional

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from ..constants import CANCELLED_MESSAGE_PREFIX
from ..models import (
    TERMINAL_STATUSES,
    ImportFileFormat,
    ImportJob,
    ImportJobStatus,
    ImportRowOutcome,
)
from ..types import ImportSettings
from .audit_log import log_import_event
from .errors import AlreadyTerminal, CounterOverflow, InvalidTransition, JobNotFound

logger = logging.getLogger(__name__)

OUTCOME_COUNTERS = {
    ImportRowOutcome.CREATED: "created_rows",
    ImportRowOutcome.UPDATED: "updated_rows",
    ImportRowOutcome.SKIPPED: "skipped_rows",
}


def _normalize_job_id(job_id: Any) -> uuid.UUID:
    if isinstance(job_id, uuid.UUID):
        return job_id
    try:
        return uuid.UUID(str(job_id))
    except (TypeError, ValueError) as exc:
        raise JobNotFound(f"Import job '{job_id}' does not exist.") from exc


def _load_job(job_id: uuid.UUID) -> ImportJob:
    job = ImportJob.objects.filter(pk=job_id).first()
    if job is None:
        raise JobNotFound(f"Import job '{job_id}' does not exist.")
    return job


def create_job(
    filename: str,
    total_rows: int,
    *,
    file_format: str = ImportFileFormat.CSV,
    settings: Optional[ImportSettings] = None,
    section_summary: Optional[list[dict[str, Any]]] = None,
    user_id: str = "",
) -> ImportJob:
    """Create a pending job; it is visible to pollers as soon as this returns."""
    if total_rows < 0:
        raise ValueError("total_rows must be >= 0")
    with transaction.atomic():
        job = ImportJob.objects.create(
            filename=filename,
            file_format=file_format,
            status=ImportJobStatus.PENDING,
            settings=(settings or ImportSettings()).to_dict(),
            section_summary=section_summary or [],
            uploaded_by_user_id=user_id or "",
            total_rows=total_rows,
        )
    logger.debug("Created import job %s for %s (%s rows)", job.pk, filename, total_rows)
    return job


def get_job(job_id: Any) -> ImportJob:
    return _load_job(_normalize_job_id(job_id))


def list_jobs(
    *,
    page: int = 1,
    per_page: int = 20,
    status: str | None = None,
    user_id: str | None = None,
) -> tuple[int, list[ImportJob]]:
    """Return ``(total, jobs)`` for one page of import history, newest first."""
    safe_page = max(1, page)
    safe_per_page = max(1, min(per_page, 200))

    queryset = ImportJob.objects.order_by("-created_at")
    if status:
        queryset = queryset.filter(status=status)
    if user_id:
        queryset = queryset.filter(uploaded_by_user_id=user_id)

    total = queryset.count()
    start = (safe_page - 1) * safe_per_page
    return total, list(queryset[start : start + safe_per_page])


def begin_processing(job_id: Any) -> ImportJob:
    job_uuid = _normalize_job_id(job_id)
    now = timezone.now()
    updated = ImportJob.objects.filter(
        pk=job_uuid, status=ImportJobStatus.PENDING
    ).update(status=ImportJobStatus.PROCESSING, started_at=now, updated_at=now)
    job = _load_job(job_uuid)
    if not updated:
        raise InvalidTransition(
            f"Import job {job_uuid} cannot start processing from '{job.status}'."
        )
    log_import_event("job_started", job)
    return job


def record_row_outcome(
    job_id: Any,
    success: bool,
    *,
    outcome: str | None = None,
) -> None:
    """
    Count one processed row with a single conditional UPDATE.

    The update only applies while the job is processing and below its row
    total, so concurrent callers can never push the counters past
    ``total_rows`` or touch a terminal job.
    """
    job_uuid = _normalize_job_id(job_id)
    updates: dict[str, Any] = {
        "processed_rows": F("processed_rows") + 1,
        "updated_at": timezone.now(),
    }
    if success:
        updates["successful_rows"] = F("successful_rows") + 1
        counter = OUTCOME_COUNTERS.get(outcome or ImportRowOutcome.CREATED)
        if counter is None:
            raise ValueError(f"Unknown row outcome '{outcome}'")
        updates[counter] = F(counter) + 1
    else:
        updates["failed_rows"] = F("failed_rows") + 1

    updated = ImportJob.objects.filter(
        pk=job_uuid,
        status=ImportJobStatus.PROCESSING,
        processed_rows__lt=F("total_rows"),
    ).update(**updates)
    if updated:
        return

    job = _load_job(job_uuid)
    if job.status != ImportJobStatus.PROCESSING:
        raise InvalidTransition(
            f"Import job {job_uuid} is '{job.status}' and cannot record row outcomes."
        )
    raise CounterOverflow(
        f"Import job {job_uuid} already processed {job.processed_rows} of {job.total_rows} rows."
    )


def complete_job(
    job_id: Any,
    outcome: str,
    error_message: str | None = None,
) -> ImportJob:
    """
    Move a processing job to a terminal status.

    Repeating the same terminal outcome is a no-op; a different terminal
    outcome raises ``AlreadyTerminal``.
    """
    if outcome not in TERMINAL_STATUSES:
        raise InvalidTransition(f"'{outcome}' is not a terminal status.")
    job_uuid = _normalize_job_id(job_id)
    now = timezone.now()
    updated = ImportJob.objects.filter(
        pk=job_uuid, status=ImportJobStatus.PROCESSING
    ).update(
        status=outcome,
        error_message=error_message,
        completed_at=now,
        updated_at=now,
    )
    job = _load_job(job_uuid)
    if not updated:
        if job.status == outcome:
            return job
        if job.status in TERMINAL_STATUSES:
            raise AlreadyTerminal(
                f"Import job {job_uuid} already finished as '{job.status}'."
            )
        raise InvalidTransition(
            f"Import job {job_uuid} cannot finish from '{job.status}'."
        )

    log_import_event(
        "job_completed" if outcome == ImportJobStatus.COMPLETED else "job_failed",
        job,
        details={"error_message": error_message} if error_message else None,
    )
    return job


def cancel_job(job_id: Any, reason: str = "", *, user_id: str = "") -> ImportJob:
    """Fail a processing job on operator request; the commit loop stops at its next row."""
    job = get_job(job_id)
    if job.status == ImportJobStatus.FAILED:
        return job
    if job.status == ImportJobStatus.COMPLETED:
        raise AlreadyTerminal(f"Import job {job.pk} already completed.")
    if job.status == ImportJobStatus.PENDING:
        raise InvalidTransition(f"Import job {job.pk} has not started yet.")

    reason = (reason or "").strip()
    message = f"{CANCELLED_MESSAGE_PREFIX}: {reason}" if reason else CANCELLED_MESSAGE_PREFIX
    job = complete_job(job.pk, ImportJobStatus.FAILED, error_message=message)
    log_import_event(
        "job_cancelled",
        job,
        user_id=user_id or None,
        details={"reason": reason},
    )
    return job
