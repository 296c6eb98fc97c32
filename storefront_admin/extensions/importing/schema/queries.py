"""Import query root definitions."""

from __future__ import annotations

import graphene

from ..services import get_errors, get_status, list_jobs, require_import_access
from ..services.errors import JobNotFound
from .types import (
    ImportJobStatusEnum,
    ProductImportJobPageType,
    ProductImportJobType,
    ProductImportRowErrorType,
)


def _enum_value(value):
    return getattr(value, "value", value)


class ImportQuery(graphene.ObjectType):
    product_import_job = graphene.Field(
        ProductImportJobType,
        job_id=graphene.ID(required=True),
    )
    product_import_jobs = graphene.Field(
        ProductImportJobPageType,
        page=graphene.Int(default_value=1),
        per_page=graphene.Int(default_value=20),
        status=ImportJobStatusEnum(),
    )
    product_import_errors = graphene.List(
        graphene.NonNull(ProductImportRowErrorType),
        job_id=graphene.ID(required=True),
    )

    def resolve_product_import_job(self, info, job_id: str):
        require_import_access(getattr(info.context, "user", None))
        try:
            return get_status(job_id)
        except JobNotFound:
            return None

    def resolve_product_import_jobs(self, info, page=1, per_page=20, status=None):
        require_import_access(getattr(info.context, "user", None))
        safe_page = max(1, int(page))
        safe_per_page = max(1, min(int(per_page), 200))
        total, results = list_jobs(
            page=safe_page,
            per_page=safe_per_page,
            status=_enum_value(status),
        )
        return {
            "total": total,
            "page": safe_page,
            "per_page": safe_per_page,
            "results": results,
        }

    def resolve_product_import_errors(self, info, job_id: str):
        require_import_access(getattr(info.context, "user", None))
        try:
            return get_errors(job_id)
        except JobNotFound:
            return []
