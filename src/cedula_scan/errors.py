"""
Error types for cedula decoding.

Only structural problems are raised. Checksum, country and gazetteer mismatches
are soft findings that lower the confidence score instead.
"""

from __future__ import annotations

from enum import Enum


class FormatErrorCode(str, Enum):
    """Standardized codes for structural decoding failures."""

    TOO_SHORT = "TOO_SHORT"
    NOT_COLOMBIAN_CEDULA = "NOT_COLOMBIAN_CEDULA"
    INSUFFICIENT_SEGMENTS = "INSUFFICIENT_SEGMENTS"
    INSUFFICIENT_MRZ_LINES = "INSUFFICIENT_MRZ_LINES"
    WRONG_LINE_COUNT = "WRONG_LINE_COUNT"
    LINE_TOO_SHORT = "LINE_TOO_SHORT"


class CedulaError(Exception):
    """Base exception for all cedula-scan errors."""

    def __init__(self, message: str, error_code: str | None = None) -> None:
        """Initialize cedula error."""
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class FormatError(CedulaError):
    """Raised when a payload is not a readable cedula of the requested type."""

    def __init__(self, message: str, error_code: FormatErrorCode) -> None:
        super().__init__(message, error_code)
        self.error_code: FormatErrorCode = error_code

    def __repr__(self) -> str:
        return f"FormatError({self.error_code.value}: {self.message!r})"


class ConfigurationError(CedulaError):
    """Raised for settings or gazetteer catalog problems."""
