"""
Centralized exception hierarchy for nextexport.

Provides specific exception types for the failure modes of the export
command, so the command can decide which errors are reported as a single
message and which are surfaced in full.
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

UNKNOWN_OPTION_CODE = "ARG_UNKNOWN_OPTION"
EXPORT_ERROR_CODE = "NEXT_EXPORT_ERROR"


# =============================================================================
# Base Exception
# =============================================================================


class NextExportError(RuntimeError):
    """
    Base exception for all nextexport errors.

    Attributes:
        message: Human-readable error message.
        detail: Additional error details (optional).
        error_code: Machine-readable error code.
    """

    def __init__(
        self,
        message: str,
        *,
        detail: str | None = None,
        error_code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail
        self.error_code = error_code or self._default_error_code()

    def _default_error_code(self) -> str:
        """Generate default error code from class name."""
        return f"next_export_{self.__class__.__name__.lower()}"

    @property
    def code(self) -> str:
        return self.error_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a serializable mapping."""
        result = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.detail:
            result["detail"] = self.detail
        return result

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message

    def log(self, level: int = logging.ERROR) -> None:
        """Log the exception with structured data."""
        logger.log(
            level,
            self.message,
            extra={
                "error_code": self.error_code,
                "detail": self.detail,
                "exception_type": self.__class__.__name__,
            },
        )


# =============================================================================
# Argument Errors
# =============================================================================


class ArgumentError(NextExportError):
    """Raised when command-line arguments cannot be accepted."""


class UnknownOptionError(ArgumentError):
    """Raised when an option is not part of the declared option spec."""

    def __init__(self, option: str) -> None:
        self.option = option
        super().__init__(
            f"Unknown or unexpected option: {option}",
            error_code=UNKNOWN_OPTION_CODE,
        )


class ArgumentParseError(ArgumentError):
    """Raised for malformed arguments other than unknown options."""

    def __init__(self, message: str, *, option: str | None = None) -> None:
        self.option = option
        super().__init__(message, error_code="arg_parse_error")


class InvalidOptionError(ArgumentError):
    """Raised when a recognized option carries an unusable value."""

    def __init__(self, option: str, value: Any, *, reason: str) -> None:
        self.option = option
        self.value = value
        super().__init__(
            f"Invalid value for {option}: {value!r} ({reason})",
            error_code="invalid_option",
        )


# =============================================================================
# Project Errors
# =============================================================================


class ProjectDirectoryNotFoundError(NextExportError):
    """Raised when the project root does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            f"> No such directory exists as the project root: {path}",
            error_code="project_dir_not_found",
        )


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(NextExportError):
    """Raised when configuration is invalid or missing."""

    def __init__(
        self,
        message: str,
        *,
        setting_name: str | None = None,
    ) -> None:
        self.setting_name = setting_name
        detail = f"Missing or invalid setting: {setting_name}" if setting_name else None
        super().__init__(
            message,
            detail=detail,
            error_code="configuration_error",
        )


# =============================================================================
# Export Errors
# =============================================================================


class ExportError(NextExportError):
    """
    Raised by the export pipeline for expected export failures.

    These are reported to the user as a single error line without a
    traceback.
    """

    def __init__(
        self,
        message: str,
        *,
        output_path: str | None = None,
        page: str | None = None,
    ) -> None:
        self.output_path = output_path
        self.page = page
        detail_parts = []
        if page:
            detail_parts.append(f"Page: {page}")
        if output_path:
            detail_parts.append(f"Output: {output_path}")
        detail = "; ".join(detail_parts) if detail_parts else None
        super().__init__(
            message,
            detail=detail,
            error_code=EXPORT_ERROR_CODE,
        )

    def __str__(self) -> str:
        return self.message


def is_export_error(exc: BaseException) -> bool:
    """Return True if ``exc`` is a recognized export failure.

    An ``ExportError`` instance and any exception tagged with the export
    error code (as ``error_code`` or ``code``) are treated the same.
    """
    if isinstance(exc, ExportError):
        return True
    for attr in ("error_code", "code"):
        if getattr(exc, attr, None) == EXPORT_ERROR_CODE:
            return True
    return False
