"""GraphQL type definitions for the product import domain."""

from __future__ import annotations

import graphene
from graphene_django import DjangoObjectType

from ..models import ImportJob, ImportRowError


class ImportJobStatusEnum(graphene.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ProductImportJobType(DjangoObjectType):
    progress_percent = graphene.Int(required=True)
    is_terminal = graphene.Boolean(required=True)

    class Meta:
        model = ImportJob
        convert_choices_to_enum = False
        fields = (
            "id",
            "filename",
            "file_format",
            "status",
            "settings",
            "section_summary",
            "total_rows",
            "processed_rows",
            "successful_rows",
            "failed_rows",
            "created_rows",
            "updated_rows",
            "skipped_rows",
            "error_message",
            "created_at",
            "started_at",
            "completed_at",
        )

    def resolve_progress_percent(self, info):
        return self.progress_percent

    def resolve_is_terminal(self, info):
        return self.is_terminal


class ProductImportRowErrorType(DjangoObjectType):
    class Meta:
        model = ImportRowError
        fields = ("id", "row_number", "code", "error_message", "row_data", "created_at")


class ProductImportJobPageType(graphene.ObjectType):
    total = graphene.Int(required=True)
    page = graphene.Int(required=True)
    per_page = graphene.Int(required=True)
    results = graphene.List(graphene.NonNull(ProductImportJobType), required=True)


class CancelProductImportJobPayloadType(graphene.ObjectType):
    ok = graphene.Boolean(required=True)
    job = graphene.Field(ProductImportJobType)
    error = graphene.String()
    code = graphene.String()
