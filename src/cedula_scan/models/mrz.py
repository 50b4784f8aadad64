"""Models for MRZ lines recovered from OCR text."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RecoveredLines(BaseModel):
    """Three MRZ-shaped lines pulled out of an OCR block.

    ``ordered`` is False when the lines could not each be matched to a TD1 slot
    and are returned in score order instead; callers should treat the decoded
    record with suspicion in that case.
    """

    model_config = ConfigDict(frozen=True)

    lines: tuple[str, str, str]
    ordered: bool = Field(..., description="Whether every line matched its slot signature")

    @field_validator("lines")
    @classmethod
    def validate_lines(cls, v):
        if any(not line for line in v):
            msg = "Recovered lines cannot be empty"
            raise ValueError(msg)
        return v
