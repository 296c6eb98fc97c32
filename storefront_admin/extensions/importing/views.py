"""HTTP views for product import preview, submission, polling and downloads."""

from __future__ import annotations

import logging
from typing import Any

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from ...config_proxy import get_setting
from .models import ImportJobStatus
from .services import (
    build_import_template,
    build_preview,
    cancel_job,
    error_report_filename,
    get_errors,
    get_import_limits,
    get_status,
    list_jobs,
    log_import_event,
    parse_import_settings,
    parse_uploaded_file,
    render_error_report,
    require_import_access,
    serialize_job,
    serialize_row_error,
    submit_import,
)
from .services.errors import (
    AlreadyTerminal,
    ImportServiceError,
    InvalidTransition,
    JobNotFound,
)

logger = logging.getLogger(__name__)


def _error_response(exc: ImportServiceError, status: int = 400) -> JsonResponse:
    return JsonResponse(exc.to_dict(), status=status)


def _missing_file_response() -> JsonResponse:
    return JsonResponse(
        {"error": "A 'file' upload is required.", "code": "INVALID_FILE_FORMAT"},
        status=400,
    )


def _int_param(request: HttpRequest, name: str, default: int) -> int:
    try:
        return int(request.GET.get(name, default))
    except (TypeError, ValueError):
        return default


@method_decorator(csrf_exempt, name="dispatch")
class ProductImportPreviewView(View):
    """Parse an upload and return its structure without creating a job."""

    http_method_names = ["post"]

    def post(self, request: HttpRequest, *args, **kwargs) -> HttpResponse:
        user_id = require_import_access(getattr(request, "user", None), write=True)
        uploaded_file = request.FILES.get("file")
        if uploaded_file is None:
            return _missing_file_response()
        try:
            settings = parse_import_settings(request.POST.get("settings"))
            parsed = parse_uploaded_file(
                uploaded_file,
                limits=get_import_limits(),
                file_format=request.POST.get("format") or None,
                file_name=uploaded_file.name,
            )
        except ImportServiceError as exc:
            return _error_response(exc)

        preview = build_preview(parsed, settings)
        log_import_event(
            "preview",
            user_id=user_id or None,
            details={"filename": parsed.file_name, "file_format": parsed.file_format},
            kpis={
                "total_rows": parsed.total_rows,
                "warnings": len(preview["validationWarnings"]),
            },
        )
        return JsonResponse(preview)


@method_decorator(csrf_exempt, name="dispatch")
class ProductImportSubmitView(View):
    """Start an asynchronous import and return its job id."""

    http_method_names = ["post"]

    def post(self, request: HttpRequest, *args, **kwargs) -> HttpResponse:
        user_id = require_import_access(getattr(request, "user", None), write=True)
        uploaded_file = request.FILES.get("file")
        if uploaded_file is None:
            return _missing_file_response()
        try:
            job = submit_import(
                uploaded_file,
                file_name=uploaded_file.name,
                file_format=request.POST.get("format") or None,
                settings=request.POST.get("settings"),
                selected_rows=request.POST.get("selectedRows"),
                user_id=user_id,
            )
        except ImportServiceError as exc:
            return _error_response(exc)
        return JsonResponse({"importId": str(job.pk)}, status=202)


class ImportJobListView(View):
    """Import history, newest first."""

    http_method_names = ["get"]

    def get(self, request: HttpRequest, *args, **kwargs) -> HttpResponse:
        require_import_access(getattr(request, "user", None))
        page = max(1, _int_param(request, "page", 1))
        per_page = max(
            1,
            min(
                _int_param(
                    request,
                    "perPage",
                    int(get_setting("import_settings.history_page_size", 20)),
                ),
                200,
            ),
        )
        status = request.GET.get("status") or None
        if status and status not in ImportJobStatus.values:
            return JsonResponse(
                {"error": f"Unknown status '{status}'.", "code": "INVALID_SETTINGS"},
                status=400,
            )
        total, jobs = list_jobs(page=page, per_page=per_page, status=status)
        return JsonResponse(
            {
                "total": total,
                "page": page,
                "perPage": per_page,
                "results": [serialize_job(job) for job in jobs],
            }
        )


class ImportJobStatusView(View):
    """Polling endpoint for a single job."""

    http_method_names = ["get"]

    def get(self, request: HttpRequest, job_id, *args, **kwargs) -> HttpResponse:
        require_import_access(getattr(request, "user", None))
        try:
            job = get_status(job_id)
        except JobNotFound as exc:
            return _error_response(exc, status=404)
        return JsonResponse(serialize_job(job))


class ImportJobErrorsView(View):
    http_method_names = ["get"]

    def get(self, request: HttpRequest, job_id, *args, **kwargs) -> HttpResponse:
        require_import_access(getattr(request, "user", None))
        try:
            errors = get_errors(job_id)
        except JobNotFound as exc:
            return _error_response(exc, status=404)
        return JsonResponse({"errors": [serialize_row_error(error) for error in errors]})


class ImportJobErrorReportView(View):
    """Download the job's failed rows as CSV."""

    http_method_names = ["get"]

    def get(self, request: HttpRequest, job_id, *args, **kwargs) -> HttpResponse:
        require_import_access(getattr(request, "user", None))
        try:
            job = get_status(job_id)
        except JobNotFound as exc:
            return _error_response(exc, status=404)
        response = HttpResponse(render_error_report(job), content_type="text/csv; charset=utf-8")
        response["Content-Disposition"] = f'attachment; filename="{error_report_filename(job)}"'
        return response


@method_decorator(csrf_exempt, name="dispatch")
class ImportJobCancelView(View):
    http_method_names = ["post"]

    def post(self, request: HttpRequest, job_id, *args, **kwargs) -> HttpResponse:
        user_id = require_import_access(getattr(request, "user", None), write=True)
        reason = request.POST.get("reason", "")
        try:
            job = cancel_job(job_id, reason, user_id=user_id)
        except JobNotFound as exc:
            return _error_response(exc, status=404)
        except (AlreadyTerminal, InvalidTransition) as exc:
            return _error_response(exc, status=409)
        return JsonResponse(serialize_job(job))


class ImportTemplateDownloadView(View):
    """Download a blank product import template."""

    http_method_names = ["get"]

    def get(self, request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
        require_import_access(getattr(request, "user", None))
        requested_format = str(request.GET.get("format", "csv")).strip().lower()
        try:
            content, content_type, file_name = build_import_template(requested_format)
        except ImportServiceError as exc:
            return _error_response(exc)
        response = HttpResponse(content, content_type=content_type)
        response["Content-Disposition"] = f'attachment; filename="{file_name}"'
        return response
