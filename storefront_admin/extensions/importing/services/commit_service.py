"""Commit engine: applies an import job's records to the catalog row by row."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any, Optional

import sentry_sdk
from django.core.serializers.json import DjangoJSONEncoder
from django.db import DatabaseError, IntegrityError, OperationalError, transaction

from ....catalog.models import Product
from ....catalog.utils import slugify_name
from ..constants import ImportErrorCode
from ..field_map import normalize_record
from ..models import (
    TERMINAL_STATUSES,
    ImportJob,
    ImportJobStatus,
    ImportRowError,
    ImportRowOutcome,
)
from ..types import ImportCommitSummary, ImportRecord, ImportSettings
from .catalog_resolver import CategoryResolver, find_product_by_sku
from .errors import (
    AlreadyTerminal,
    ImportServiceError,
    InvalidTransition,
    JobNotFound,
    RowFailure,
)
from .import_settings import parse_import_settings
from .job_service import begin_processing, complete_job, get_job, record_row_outcome
from .row_validator import coerce_product_values

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "name",
    "price",
    "compare_at_price",
    "stock_quantity",
    "description",
    "short_description",
    "is_active",
    "is_featured",
)


def json_safe(data: dict[str, Any]) -> dict[str, Any]:
    """Return a JSON-storable copy of a raw record (dates, decimals and times become strings)."""
    return json.loads(json.dumps(data, cls=DjangoJSONEncoder))


def _current_status(job_id) -> Optional[str]:
    return ImportJob.objects.filter(pk=job_id).values_list("status", flat=True).first()


def _write_product(
    values: dict[str, Any],
    category_name: Optional[str],
    settings: ImportSettings,
    resolver: CategoryResolver,
    *,
    row_number: int,
) -> str:
    sku = values.get("sku")
    existing = find_product_by_sku(sku)
    if existing is not None and not settings.update_existing:
        # Duplicates that are not written never create their category
        resolver.resolve(category_name, row_number=row_number, create=False)
        if settings.skip_duplicates:
            return ImportRowOutcome.SKIPPED
        raise RowFailure.single(
            ImportErrorCode.DUPLICATE_SKU,
            f"Product with SKU '{sku}' already exists",
            row_number=row_number,
        )

    category = resolver.resolve(category_name, row_number=row_number)
    if existing is not None:
        update_fields = ["updated_at"]
        for field_name in UPDATABLE_FIELDS:
            if field_name in values:
                setattr(existing, field_name, values[field_name])
                update_fields.append(field_name)
        if category is not None:
            existing.category = category
            update_fields.append("category")
        existing.save(update_fields=update_fields)
        return ImportRowOutcome.UPDATED

    product = Product(slug=slugify_name(values["name"]), category=category)
    for field_name, value in values.items():
        setattr(product, field_name, value)
    product.save()
    return ImportRowOutcome.CREATED


def _apply_record(
    job_id,
    record: ImportRecord,
    settings: ImportSettings,
    resolver: CategoryResolver,
) -> None:
    row_number = record["row_number"]
    values = coerce_product_values(
        record["data"],
        settings,
        section_label=record.get("section_label"),
        row_number=row_number,
    )
    category_name = values.pop("category", None)

    # Category creation, product write and counter share one savepoint
    try:
        with transaction.atomic():
            outcome = _write_product(
                values, category_name, settings, resolver, row_number=row_number
            )
            record_row_outcome(job_id, True, outcome=outcome)
    except Exception:
        resolver.discard_pending()
        raise
    resolver.commit_pending()


def _record_failure(job_id, record: ImportRecord, failure: RowFailure) -> None:
    with transaction.atomic():
        ImportRowError.objects.update_or_create(
            import_job_id=job_id,
            row_number=record["row_number"],
            defaults={
                "code": failure.code,
                "error_message": failure.message,
                "row_data": json_safe(record["data"]),
            },
        )
        record_row_outcome(job_id, False)


def _process_record(
    job_id,
    record: ImportRecord,
    settings: ImportSettings,
    resolver: CategoryResolver,
) -> None:
    row_number = record["row_number"]
    try:
        _apply_record(job_id, record, settings, resolver)
        return
    except RowFailure as failure:
        row_failure = failure
    except OperationalError:
        raise
    except IntegrityError as exc:
        sku = str(normalize_record(record["data"]).get("sku") or "").strip()
        if "sku" in str(exc).lower():
            row_failure = RowFailure.single(
                ImportErrorCode.DUPLICATE_SKU,
                f"Product with SKU '{sku}' already exists",
                row_number=row_number,
            )
        else:
            row_failure = RowFailure.single(
                ImportErrorCode.STORE_WRITE_FAILED,
                f"Could not save row: {exc}",
                row_number=row_number,
            )
    except DatabaseError as exc:
        row_failure = RowFailure.single(
            ImportErrorCode.STORE_WRITE_FAILED,
            f"Could not save row: {exc}",
            row_number=row_number,
        )

    logger.debug("Row %s of job %s failed: %s", row_number, job_id, row_failure.message)
    _record_failure(job_id, record, row_failure)


def _fail_job(job_id, message: str) -> None:
    try:
        complete_job(job_id, ImportJobStatus.FAILED, error_message=message)
    except (AlreadyTerminal, InvalidTransition, JobNotFound) as exc:
        logger.warning("Could not mark import job %s as failed: %s", job_id, exc)


def summarize_job(job: ImportJob) -> ImportCommitSummary:
    return {
        "total_rows": job.total_rows,
        "processed_rows": job.processed_rows,
        "successful_rows": job.successful_rows,
        "failed_rows": job.failed_rows,
        "created_rows": job.created_rows,
        "updated_rows": job.updated_rows,
        "skipped_rows": job.skipped_rows,
        "status": job.status,
    }


def commit_job(job_id, records: Iterable[ImportRecord]) -> Optional[ImportJob]:
    """
    Commit the given records for a pending job and drive it to a terminal status.

    Row failures are stored as ``ImportRowError`` and never stop the run.
    Job-level failures mark the job failed and are reported, not raised.
    Returns the refreshed job, or ``None`` when the job does not exist.
    """
    try:
        job = begin_processing(job_id)
    except JobNotFound:
        logger.error("Import job %s vanished before processing started", job_id)
        return None
    except InvalidTransition as exc:
        logger.warning("Import job %s not started: %s", job_id, exc)
        return get_job(job_id)

    job_id = job.pk
    try:
        settings = parse_import_settings(job.settings)
        resolver = CategoryResolver(settings)
        for record in records:
            if _current_status(job_id) in TERMINAL_STATUSES:
                logger.info("Import job %s became terminal; stopping at row %s", job_id, record["row_number"])
                break
            _process_record(job_id, record, settings, resolver)
    except InvalidTransition:
        logger.info("Import job %s was finished by another actor; stopping", job_id)
    except Exception as exc:
        logger.exception("Import job %s failed", job_id)
        sentry_sdk.capture_exception(exc)
        if isinstance(exc, ImportServiceError):
            message = exc.message
        elif isinstance(exc, OperationalError):
            message = f"Catalog store unavailable: {exc}"
        else:
            message = f"Import failed: {exc}"
        _fail_job(job_id, message)
        return ImportJob.objects.filter(pk=job_id).first()

    if _current_status(job_id) == ImportJobStatus.PROCESSING:
        try:
            complete_job(job_id, ImportJobStatus.COMPLETED)
        except (AlreadyTerminal, InvalidTransition) as exc:
            logger.info("Import job %s finished concurrently: %s", job_id, exc)
    return ImportJob.objects.filter(pk=job_id).first()


def run_import_job(job_id: str, records: list[ImportRecord]) -> Optional[ImportCommitSummary]:
    """Task entry point scheduled by submission."""
    job = commit_job(job_id, records)
    if job is None:
        return None
    summary = summarize_job(job)
    logger.info("Import job %s finished: %s", job_id, summary)
    return summary
