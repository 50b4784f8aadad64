"""
Scan entry points returning a tagged result instead of raising.

``decode_barcode`` handles legacy PDF417 payloads and ``decode_ocr_text`` the
OCR text of a current card. Structural failures come back as a failed
:class:`DecodeResult` carrying the :class:`FormatErrorCode`, so a caller can
try the other path or ask for a re-scan.

Only :class:`FormatError` is turned into a result. When no gazetteer is passed
the configured catalog is loaded on first use, and a broken
``CEDULA_GAZETTEER_PATH`` raises :class:`~cedula_scan.errors.ConfigurationError`
from any entry point.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from cedula_scan.config import get_settings
from cedula_scan.errors import FormatError, FormatErrorCode
from cedula_scan.gazetteer import Gazetteer
from cedula_scan.models.identity import IdentityRecord
from cedula_scan.parsers.mrz_td1 import decode_mrz
from cedula_scan.parsers.ocr_lines import recover_mrz_lines
from cedula_scan.parsers.pdf417 import Payload, decode_pdf417

logger = logging.getLogger(__name__)


class DecodeResult(BaseModel):
    """Either a decoded record or the structural error that prevented it."""

    model_config = ConfigDict(frozen=True)

    record: Optional[IdentityRecord] = None
    error_code: Optional[FormatErrorCode] = None
    error_message: Optional[str] = None
    ordered: bool = Field(
        default=True, description="False when OCR lines were decoded in score order"
    )

    @classmethod
    def success(cls, record: IdentityRecord, *, ordered: bool = True) -> DecodeResult:
        return cls(record=record, ordered=ordered)

    @classmethod
    def failure(cls, error: FormatError) -> DecodeResult:
        return cls(error_code=error.error_code, error_message=error.message)

    @property
    def ok(self) -> bool:
        return self.record is not None

    def unwrap(self) -> IdentityRecord:
        """Return the record, or raise the failure as a FormatError."""
        if self.record is None:
            raise FormatError(self.error_message or "decode failed", self.error_code)
        return self.record


def decode_barcode(
    payload: Payload,
    *,
    gazetteer: Gazetteer | None = None,
    strict: bool | None = None,
) -> DecodeResult:
    """
    Decode a legacy PDF417 payload; ``strict`` defaults to CEDULA_STRICT_PDF417.

    Raises:
        ConfigurationError: If no gazetteer is given and the configured catalog
            cannot be loaded
    """
    if strict is None:
        strict = get_settings().STRICT_PDF417
    try:
        record = decode_pdf417(payload, gazetteer=gazetteer, strict=strict)
    except FormatError as e:
        logger.warning("PDF417 decode failed: %r", e)
        return DecodeResult.failure(e)
    return DecodeResult.success(record)


def decode_mrz_lines(
    lines: Sequence[str],
    *,
    gazetteer: Gazetteer | None = None,
    today: date | None = None,
    reorder: bool = False,
) -> DecodeResult:
    """Decode three MRZ lines, in line 1, 2, 3 order unless ``reorder`` is set."""
    try:
        record = decode_mrz(lines, gazetteer=gazetteer, today=today, reorder=reorder)
    except FormatError as e:
        logger.warning("MRZ decode failed: %r", e)
        return DecodeResult.failure(e)
    return DecodeResult.success(record)


def decode_ocr_text(
    ocr_text: str,
    *,
    gazetteer: Gazetteer | None = None,
    today: date | None = None,
) -> DecodeResult:
    """
    Recover the MRZ lines from OCR text and decode them.

    Raises:
        ConfigurationError: If no gazetteer is given and the configured catalog
            cannot be loaded
    """
    try:
        recovered = recover_mrz_lines(ocr_text)
        record = decode_mrz(recovered, gazetteer=gazetteer, today=today)
    except FormatError as e:
        logger.warning("OCR decode failed: %r", e)
        return DecodeResult.failure(e)
    return DecodeResult.success(record, ordered=recovered.ordered)
