"""Decoders for the two cedula generations."""

from .mrz_td1 import decode_mrz
from .ocr_lines import recover_mrz_lines
from .pdf417 import decode_pdf417

__all__ = ["decode_mrz", "decode_pdf417", "recover_mrz_lines"]
