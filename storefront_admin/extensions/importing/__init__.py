"""Asynchronous bulk product import for the storefront back office."""

from .constants import ImportErrorCode
from .models import (
    ImportFileFormat,
    ImportJob,
    ImportJobStatus,
    ImportRowError,
    ImportRowOutcome,
)

__all__ = [
    "ImportErrorCode",
    "ImportFileFormat",
    "ImportJobStatus",
    "ImportRowOutcome",
    "ImportJob",
    "ImportRowError",
]
