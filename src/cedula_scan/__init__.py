"""
cedula-scan: decoders for Colombian national ID cards.

Legacy cards are read from their PDF417 barcode, current cards from the TD1
machine readable zone (directly or from OCR text). Both produce an
:class:`IdentityRecord` with a confidence score.
"""

import logging

from .errors import CedulaError, ConfigurationError, FormatError, FormatErrorCode
from .gazetteer import Gazetteer, StaticGazetteer, default_gazetteer, load_gazetteer
from .models import (
    DocumentoInfo,
    Finding,
    FindingCode,
    Genero,
    GrupoRH,
    IdentityRecord,
    RecoveredLines,
    TipoDocumento,
    Ubicacion,
)
from .parsers import decode_mrz, decode_pdf417, recover_mrz_lines
from .pipeline import DecodeResult, decode_barcode, decode_mrz_lines, decode_ocr_text
from .utils import check_digit, validate_check_digit

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "CedulaError",
    "ConfigurationError",
    "DecodeResult",
    "DocumentoInfo",
    "Finding",
    "FindingCode",
    "FormatError",
    "FormatErrorCode",
    "Gazetteer",
    "Genero",
    "GrupoRH",
    "IdentityRecord",
    "RecoveredLines",
    "StaticGazetteer",
    "TipoDocumento",
    "Ubicacion",
    "check_digit",
    "decode_barcode",
    "decode_mrz",
    "decode_mrz_lines",
    "decode_ocr_text",
    "decode_pdf417",
    "default_gazetteer",
    "load_gazetteer",
    "recover_mrz_lines",
    "validate_check_digit",
]
