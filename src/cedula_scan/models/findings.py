"""
Soft-validation findings collected while decoding.

Findings never abort a decode; each one carries the penalty it applied to the
confidence score.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FindingCode(str, Enum):
    """Codes for non-fatal mismatches."""

    DOCUMENT_TYPE_MISMATCH = "DOCUMENT_TYPE_MISMATCH"
    COUNTRY_CODE_MISMATCH = "COUNTRY_CODE_MISMATCH"
    DOCUMENT_NUMBER_CHECKSUM = "DOCUMENT_NUMBER_CHECKSUM"
    BIRTH_DATE_CHECKSUM = "BIRTH_DATE_CHECKSUM"
    EXPIRY_DATE_CHECKSUM = "EXPIRY_DATE_CHECKSUM"
    LOCATION_NOT_FOUND = "LOCATION_NOT_FOUND"


class Finding(BaseModel):
    """A single soft-validation mismatch."""

    model_config = ConfigDict(frozen=True)

    code: FindingCode = Field(..., description="Standardized finding code")
    message: str = Field(..., description="Human-readable description")
    penalty: int = Field(default=10, ge=0, description="Points deducted from confidence")
    expected_value: str | None = Field(default=None, description="Expected value")
    actual_value: str | None = Field(default=None, description="Value found")

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message} (-{self.penalty})"
