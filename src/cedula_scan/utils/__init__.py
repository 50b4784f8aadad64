"""Shared utilities: checksums, text normalization and field layouts."""

from .checksum import check_digit, validate_check_digit
from .fields import FieldSpec, slice_fields

__all__ = ["FieldSpec", "check_digit", "slice_fields", "validate_check_digit"]
