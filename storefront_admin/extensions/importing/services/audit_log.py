"""Audit trail for import lifecycle events."""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..models import ImportJob

logger = logging.getLogger(__name__)

KPI_FIELDS = (
    "total_rows",
    "processed_rows",
    "successful_rows",
    "failed_rows",
    "created_rows",
    "updated_rows",
    "skipped_rows",
)


def job_kpis(job: ImportJob) -> dict[str, int]:
    return {name: getattr(job, name) for name in KPI_FIELDS}


def log_import_event(
    event_name: str,
    job: Optional[ImportJob] = None,
    *,
    user_id: str | None = None,
    details: dict[str, Any] | None = None,
    kpis: dict[str, Any] | None = None,
) -> None:
    """
    Emit one ``import_event`` record.

    With a job, its status and counters are included and ``user_id``
    defaults to the uploader. Events that happen before a job exists, such
    as a preview, pass their own ``kpis``.
    """
    payload: dict[str, Any] = {
        "event": event_name,
        "job_id": None,
        "status": None,
        "user_id": user_id or None,
        "details": details or {},
        "kpis": {},
    }
    if job is not None:
        payload["job_id"] = str(job.pk)
        payload["status"] = str(job.status)
        payload["user_id"] = user_id or job.uploaded_by_user_id or None
        payload["kpis"] = job_kpis(job)
    payload["kpis"].update(kpis or {})
    logger.info("import_event=%s", payload)
