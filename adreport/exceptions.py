"""Exceptions raised by the ad report pipeline."""

from __future__ import annotations

from typing import Any, Dict, Optional


class AdReportError(Exception):
    """Base exception for the ad report pipeline."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class InputValidationError(AdReportError, ValueError):
    """Pasted text has no usable data (empty, too short, or nothing survived filtering)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message=message, code="INPUT_INVALID", details=details)


class ExportError(AdReportError, RuntimeError):
    """Workbook could not be built."""

    def __init__(self, message: str = "리포트 생성에 실패했습니다.", details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message=message, code="EXPORT_FAILED", details=details)
