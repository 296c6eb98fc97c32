"""Domain exceptions for import services."""

from __future__ import annotations

from ..constants import ImportErrorCode


class ImportServiceError(Exception):
    """Typed error used by import services to provide an error code and context."""

    default_code = ImportErrorCode.JOB_FAILED

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        row_number: int | None = None,
        field_path: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code or self.default_code
        self.message = message
        self.row_number = row_number
        self.field_path = field_path

    def to_dict(self) -> dict[str, object]:
        return {"error": self.message, "code": self.code}


# Ingress errors: raised before any job exists


class FormatError(ImportServiceError):
    default_code = ImportErrorCode.INVALID_FILE_FORMAT


class SizeLimitExceeded(ImportServiceError):
    default_code = ImportErrorCode.FILE_TOO_LARGE


class RowLimitExceeded(ImportServiceError):
    default_code = ImportErrorCode.ROW_LIMIT_EXCEEDED


class InvalidSettings(ImportServiceError):
    default_code = ImportErrorCode.INVALID_SETTINGS


# Job lifecycle errors


class JobNotFound(ImportServiceError):
    default_code = ImportErrorCode.JOB_NOT_FOUND


class InvalidTransition(ImportServiceError):
    default_code = ImportErrorCode.INVALID_TRANSITION


class AlreadyTerminal(ImportServiceError):
    default_code = ImportErrorCode.ALREADY_TERMINAL


class CounterOverflow(ImportServiceError):
    default_code = ImportErrorCode.COUNTER_OVERFLOW


class RowFailure(ImportServiceError):
    """
    Row-level commit failure.

    Carries every problem found on the row so they can be stored as a single
    error record; ``code`` is the code of the first problem.
    """

    def __init__(self, problems: list[tuple[str, str]], *, row_number: int | None = None):
        if not problems:
            raise ValueError("RowFailure requires at least one problem")
        message = "; ".join(problem_message for _code, problem_message in problems)
        super().__init__(message, code=problems[0][0], row_number=row_number)
        self.problems = list(problems)

    @classmethod
    def single(cls, code: str, message: str, *, row_number: int | None = None) -> "RowFailure":
        return cls([(code, message)], row_number=row_number)
