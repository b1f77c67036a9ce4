"""Error taxonomy and uniform error payloads for diagram generation."""

from __future__ import annotations

from enum import Enum
from typing import Any

from loguru import logger

from dbwatcher_diagrams.utils import utc_now_iso


class ErrorCode(str, Enum):
    """Stable codes reported to API consumers."""
    SESSION_NOT_FOUND = "DIAGRAM_001"
    INVALID_DIAGRAM_TYPE = "DIAGRAM_002"
    SYNTAX_VALIDATION_FAILED = "DIAGRAM_003"
    GENERATION_TIMEOUT = "DIAGRAM_004"
    INSUFFICIENT_DATA = "DIAGRAM_005"
    ANALYZER_ERROR = "DIAGRAM_006"
    CACHE_ERROR = "DIAGRAM_007"
    SYSTEM_ERROR = "DIAGRAM_099"


RECOVERABLE_CODES = frozenset({
    ErrorCode.INSUFFICIENT_DATA,
    ErrorCode.GENERATION_TIMEOUT,
    ErrorCode.CACHE_ERROR,
})


class DiagramGenerationError(Exception):
    """Base error for the diagram pipeline."""

    code: ErrorCode = ErrorCode.SYSTEM_ERROR

    def __init__(
        self,
        message: str,
        error_code: ErrorCode | None = None,
        context: dict[str, Any] | None = None,
        original_error: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.code
        self.context = context or {}
        self.original_error = original_error


class SessionNotFoundError(DiagramGenerationError):
    code = ErrorCode.SESSION_NOT_FOUND


class InvalidDiagramTypeError(DiagramGenerationError):
    code = ErrorCode.INVALID_DIAGRAM_TYPE


class AnalyzerError(DiagramGenerationError):
    code = ErrorCode.ANALYZER_ERROR


class DatasetValidationError(DiagramGenerationError):
    code = ErrorCode.SYNTAX_VALIDATION_FAILED


class RegistrationError(DiagramGenerationError):
    code = ErrorCode.SYSTEM_ERROR


class DiagramErrorHandler:
    """Classify exceptions and turn them into JSON-serializable error responses."""

    def categorize(self, error: BaseException) -> ErrorCode:
        if isinstance(error, DiagramGenerationError):
            return error.error_code

        message = str(error).lower()
        if "session" in message and "not found" in message:
            return ErrorCode.SESSION_NOT_FOUND
        if "timeout" in message or isinstance(error, TimeoutError):
            return ErrorCode.GENERATION_TIMEOUT
        if "cache" in message:
            return ErrorCode.CACHE_ERROR
        if "syntax" in message:
            return ErrorCode.SYNTAX_VALIDATION_FAILED
        if "analy" in message:
            return ErrorCode.ANALYZER_ERROR
        return ErrorCode.SYSTEM_ERROR

    @staticmethod
    def is_recoverable(code: ErrorCode) -> bool:
        return code in RECOVERABLE_CODES

    def handle(self, error: BaseException, context: dict[str, Any] | None = None) -> dict[str, Any]:
        """Log an error and build the standard failure payload.

        Args:
            error: The exception raised during generation
            context: Request details (session id, diagram type) echoed back

        Returns:
            Error response dict with ``success`` false and no content
        """
        code = self.categorize(error)
        recoverable = self.is_recoverable(code)
        message = getattr(error, "message", None) or str(error) or error.__class__.__name__

        if recoverable:
            logger.warning(f"Recoverable diagram error [{code.value}]: {message}")
        else:
            logger.error(f"Diagram generation failed [{code.value}]: {message}")

        return {
            "success": False,
            "error": message,
            "error_code": code.value,
            "error_type": code.name.lower(),
            "message": message,
            "recoverable": recoverable,
            "timestamp": utc_now_iso(),
            "content": None,
            "type": None,
            "context": dict(context or {}),
        }
