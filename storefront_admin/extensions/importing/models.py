"""Job and row-error models for the product import lifecycle."""

from __future__ import annotations

import uuid

from django.db import models


class ImportFileFormat(models.TextChoices):
    CSV = "CSV", "CSV"
    XLSX = "XLSX", "XLSX"


class ImportJobStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PROCESSING = "processing", "Processing"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"


TERMINAL_STATUSES = frozenset({ImportJobStatus.COMPLETED, ImportJobStatus.FAILED})


class ImportRowOutcome(models.TextChoices):
    CREATED = "created", "Created"
    UPDATED = "updated", "Updated"
    SKIPPED = "skipped", "Skipped"


class ImportJob(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    filename = models.CharField(max_length=255)
    file_format = models.CharField(
        max_length=10,
        choices=ImportFileFormat.choices,
        default=ImportFileFormat.CSV,
    )
    status = models.CharField(
        max_length=16,
        choices=ImportJobStatus.choices,
        default=ImportJobStatus.PENDING,
    )
    settings = models.JSONField(default=dict, blank=True)
    section_summary = models.JSONField(default=list, blank=True)
    uploaded_by_user_id = models.CharField(max_length=128, blank=True, default="")
    total_rows = models.PositiveIntegerField(default=0)
    processed_rows = models.PositiveIntegerField(default=0)
    successful_rows = models.PositiveIntegerField(default=0)
    failed_rows = models.PositiveIntegerField(default=0)
    created_rows = models.PositiveIntegerField(default=0)
    updated_rows = models.PositiveIntegerField(default=0)
    skipped_rows = models.PositiveIntegerField(default=0)
    error_message = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        app_label = "storefront_admin"
        db_table = "storefront_admin_import_job"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="sfa_import_job_status_idx"),
            models.Index(fields=["uploaded_by_user_id", "created_at"], name="sfa_import_job_user_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.filename} [{self.status}]"

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def progress_percent(self) -> int:
        if not self.total_rows:
            return 100 if self.is_terminal else 0
        return min(100, int(self.processed_rows * 100 / self.total_rows))


class ImportRowError(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    import_job = models.ForeignKey(
        ImportJob,
        on_delete=models.CASCADE,
        related_name="row_errors",
    )
    row_number = models.PositiveIntegerField()
    code = models.CharField(max_length=64)
    error_message = models.TextField()
    row_data = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = "storefront_admin"
        db_table = "storefront_admin_import_row_error"
        ordering = ["row_number"]
        constraints = [
            models.UniqueConstraint(
                fields=["import_job", "row_number"],
                name="storefront_admin_import_row_error_unique_job_row",
            )
        ]

    def __str__(self) -> str:
        return f"Job {self.import_job_id} Row {self.row_number}: {self.code}"
