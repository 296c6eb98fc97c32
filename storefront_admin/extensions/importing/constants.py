"""Import error codes and message constants."""

from __future__ import annotations

CANCELLED_MESSAGE_PREFIX = "Cancelled by operator"


class ImportErrorCode:
    # Ingress
    INVALID_FILE_FORMAT = "INVALID_FILE_FORMAT"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    ROW_LIMIT_EXCEEDED = "ROW_LIMIT_EXCEEDED"
    INVALID_SETTINGS = "INVALID_SETTINGS"
    # Row level
    REQUIRED_FIELD_MISSING = "REQUIRED_FIELD_MISSING"
    INVALID_NUMERIC_FIELD = "INVALID_NUMERIC_FIELD"
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    DUPLICATE_SKU = "DUPLICATE_SKU"
    STORE_WRITE_FAILED = "STORE_WRITE_FAILED"
    # Job level
    JOB_NOT_FOUND = "JOB_NOT_FOUND"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    ALREADY_TERMINAL = "ALREADY_TERMINAL"
    COUNTER_OVERFLOW = "COUNTER_OVERFLOW"
    JOB_FAILED = "JOB_FAILED"
    CANCELLED = "CANCELLED"
