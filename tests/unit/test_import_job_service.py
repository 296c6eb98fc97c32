import logging
import uuid
from datetime import timedelta

import pytest
from django.utils import timezone

from storefront_admin.extensions.importing.models import ImportJob, ImportJobStatus
from storefront_admin.extensions.importing.services import (
    begin_processing,
    cancel_job,
    complete_job,
    create_job,
    get_job,
    list_jobs,
    log_import_event,
    record_row_outcome,
)
from storefront_admin.extensions.importing.services.errors import (
    AlreadyTerminal,
    CounterOverflow,
    InvalidTransition,
    JobNotFound,
)
from storefront_admin.extensions.importing.types import ImportSettings

pytestmark = [pytest.mark.unit, pytest.mark.django_db]


def _processing_job(total_rows: int = 3) -> ImportJob:
    job = create_job("products.csv", total_rows)
    return begin_processing(job.pk)


def test_create_job_starts_pending_with_zero_counters():
    job = create_job(
        "products.csv",
        5,
        settings=ImportSettings(update_existing=True),
        user_id="42",
    )

    stored = get_job(job.pk)
    assert stored.status == ImportJobStatus.PENDING
    assert stored.total_rows == 5
    assert stored.processed_rows == stored.successful_rows == stored.failed_rows == 0
    assert stored.settings["update_existing"] is True
    assert stored.uploaded_by_user_id == "42"
    assert stored.completed_at is None


def test_get_job_raises_for_unknown_or_malformed_ids():
    with pytest.raises(JobNotFound):
        get_job(uuid.uuid4())
    with pytest.raises(JobNotFound):
        get_job("not-a-uuid")


def test_begin_processing_only_from_pending():
    job = _processing_job()
    assert job.status == ImportJobStatus.PROCESSING
    assert job.started_at is not None

    with pytest.raises(InvalidTransition):
        begin_processing(job.pk)


def test_record_row_outcome_keeps_counter_invariants():
    job = _processing_job(total_rows=4)
    record_row_outcome(job.pk, True, outcome="created")
    record_row_outcome(job.pk, True, outcome="updated")
    record_row_outcome(job.pk, True, outcome="skipped")
    record_row_outcome(job.pk, False)

    job.refresh_from_db()
    assert job.processed_rows == 4
    assert job.successful_rows == 3
    assert job.failed_rows == 1
    assert job.successful_rows + job.failed_rows == job.processed_rows
    assert job.created_rows + job.updated_rows + job.skipped_rows == job.successful_rows


def test_record_row_outcome_refuses_to_exceed_total():
    job = _processing_job(total_rows=1)
    record_row_outcome(job.pk, True)

    with pytest.raises(CounterOverflow):
        record_row_outcome(job.pk, False)

    job.refresh_from_db()
    assert job.processed_rows == 1
    assert job.failed_rows == 0


def test_record_row_outcome_requires_processing_status():
    pending = create_job("pending.csv", 2)
    with pytest.raises(InvalidTransition):
        record_row_outcome(pending.pk, True)

    finished = _processing_job(total_rows=2)
    complete_job(finished.pk, ImportJobStatus.COMPLETED)
    with pytest.raises(InvalidTransition):
        record_row_outcome(finished.pk, True)

    with pytest.raises(JobNotFound):
        record_row_outcome(uuid.uuid4(), True)


def test_complete_job_is_idempotent_for_same_outcome():
    job = _processing_job()
    first = complete_job(job.pk, ImportJobStatus.COMPLETED)
    second = complete_job(job.pk, ImportJobStatus.COMPLETED)

    assert first.status == second.status == ImportJobStatus.COMPLETED
    assert second.completed_at == first.completed_at


def test_complete_job_rejects_conflicting_terminal_outcome():
    job = _processing_job()
    complete_job(job.pk, ImportJobStatus.FAILED, error_message="boom")

    with pytest.raises(AlreadyTerminal):
        complete_job(job.pk, ImportJobStatus.COMPLETED)
    assert get_job(job.pk).error_message == "boom"


def test_complete_job_from_pending_is_invalid():
    job = create_job("products.csv", 1)
    with pytest.raises(InvalidTransition):
        complete_job(job.pk, ImportJobStatus.COMPLETED)
    with pytest.raises(InvalidTransition):
        complete_job(job.pk, ImportJobStatus.PROCESSING)


def test_cancel_job_marks_processing_job_failed():
    job = _processing_job()
    cancelled = cancel_job(job.pk, "wrong file")

    assert cancelled.status == ImportJobStatus.FAILED
    assert cancelled.error_message == "Cancelled by operator: wrong file"
    assert cancelled.completed_at is not None
    # a second cancel is a no-op
    assert cancel_job(job.pk, "again").error_message == "Cancelled by operator: wrong file"


def test_cancel_job_rejects_completed_and_pending_jobs():
    completed = _processing_job()
    complete_job(completed.pk, ImportJobStatus.COMPLETED)
    with pytest.raises(AlreadyTerminal):
        cancel_job(completed.pk)

    pending = create_job("pending.csv", 1)
    with pytest.raises(InvalidTransition):
        cancel_job(pending.pk)


def test_lifecycle_events_are_audited_with_job_counters(caplog):
    caplog.set_level(logging.INFO, logger="storefront_admin.extensions.importing.services.audit_log")
    job = create_job("products.csv", 2, user_id="7")
    begin_processing(job.pk)
    record_row_outcome(job.pk, True)
    cancel_job(job.pk, "stop", user_id="99")

    messages = [record.getMessage() for record in caplog.records]
    started = next(message for message in messages if "'job_started'" in message)
    cancelled = next(message for message in messages if "'job_cancelled'" in message)
    assert "'user_id': '7'" in started
    assert "'total_rows': 2" in started
    assert "'user_id': '99'" in cancelled
    assert "'processed_rows': 1" in cancelled


def test_audit_event_logs_plain_status_for_new_jobs(caplog):
    caplog.set_level(logging.INFO, logger="storefront_admin.extensions.importing.services.audit_log")
    job = create_job("products.csv", 1)

    log_import_event("submit", job, details={"filename": "products.csv"})
    log_import_event("preview", user_id="3", kpis={"total_rows": 4})

    submitted, previewed = [record.getMessage() for record in caplog.records][-2:]
    assert "'status': 'pending'" in submitted
    assert "ImportJobStatus" not in submitted
    assert "'job_id': None" in previewed
    assert "'kpis': {'total_rows': 4}" in previewed


def test_list_jobs_filters_and_paginates_newest_first():
    first = create_job("first.csv", 1)
    second = _processing_job()
    third = create_job("third.csv", 1)
    now = timezone.now()
    for offset, job in enumerate((third, second, first)):
        ImportJob.objects.filter(pk=job.pk).update(created_at=now - timedelta(minutes=offset))

    total, page = list_jobs(page=1, per_page=2)
    assert total == 3
    assert [job.pk for job in page] == [third.pk, second.pk]

    total, page = list_jobs(page=2, per_page=2)
    assert [job.pk for job in page] == [first.pk]

    total, page = list_jobs(status=ImportJobStatus.PROCESSING)
    assert total == 1
    assert page[0].pk == second.pk
