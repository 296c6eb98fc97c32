"""Service layer for the product import lifecycle."""

from .access_control import can_import_products, require_import_access
from .audit_log import log_import_event
from .catalog_resolver import CategoryResolver, find_product_by_sku
from .commit_service import commit_job, run_import_job, summarize_job
from .error_report import error_report_filename, render_error_report
from .errors import (
    AlreadyTerminal,
    CounterOverflow,
    FormatError,
    ImportServiceError,
    InvalidSettings,
    InvalidTransition,
    JobNotFound,
    RowFailure,
    RowLimitExceeded,
    SizeLimitExceeded,
)
from .file_parser import detect_file_format, parse_uploaded_file
from .import_settings import get_import_limits, parse_import_settings
from .job_service import (
    begin_processing,
    cancel_job,
    complete_job,
    create_job,
    get_job,
    list_jobs,
    record_row_outcome,
)
from .preview_service import build_preview, numbered_records
from .progress import get_errors, get_status, serialize_job, serialize_row_error
from .row_validator import coerce_product_values, validate_records
from .submission import parse_selected_rows, select_records, submit_import
from .template_service import build_import_template

__all__ = [
    "can_import_products",
    "require_import_access",
    "log_import_event",
    "CategoryResolver",
    "find_product_by_sku",
    "commit_job",
    "run_import_job",
    "summarize_job",
    "error_report_filename",
    "render_error_report",
    "ImportServiceError",
    "FormatError",
    "SizeLimitExceeded",
    "RowLimitExceeded",
    "InvalidSettings",
    "JobNotFound",
    "InvalidTransition",
    "AlreadyTerminal",
    "CounterOverflow",
    "RowFailure",
    "detect_file_format",
    "parse_uploaded_file",
    "get_import_limits",
    "parse_import_settings",
    "create_job",
    "get_job",
    "list_jobs",
    "begin_processing",
    "record_row_outcome",
    "complete_job",
    "cancel_job",
    "build_preview",
    "numbered_records",
    "get_status",
    "get_errors",
    "serialize_job",
    "serialize_row_error",
    "validate_records",
    "coerce_product_values",
    "parse_selected_rows",
    "select_records",
    "submit_import",
    "build_import_template",
]
