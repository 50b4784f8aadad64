"""
Decoder for the PDF417 barcode on legacy Colombian cedulas.

The payload is a NUL-delimited sequence of segments::

    0  header, AFIS code from offset 2
    1  issuer marker
    2  fingerprint card number + document number + first surname (fixed width)
    3  second surname
    4  first given name
    5  second given name
    6  demographic block: gender, birth date, location codes, blood group

Strict decoding follows that layout exactly. Lenient decoding additionally
accepts payloads without the ``PubDSK_`` marker that still look like a cedula,
alternate delimiters, and as a last resort pulls fields out of the raw text.
It also reads tarjeta de identidad payloads, where segment 2 holds only the
fingerprint card and a 10-digit number, the names start at segment 3 and the
demographic block is located by its birth date.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Optional, Union

from cedula_scan.errors import FormatError, FormatErrorCode
from cedula_scan.gazetteer import Gazetteer, default_gazetteer
from cedula_scan.models.identity import (
    DocumentoInfo,
    Genero,
    GrupoRH,
    IdentityRecord,
    TipoDocumento,
)
from cedula_scan.utils.fields import FieldSpec, slice_fields
from cedula_scan.utils.text import (
    normalize_name,
    parse_gender,
    parse_rh,
    strip_leading_zeros,
)

logger = logging.getLogger(__name__)

PDF417_MARKER = "PubDSK_"
MIN_PAYLOAD_LENGTH = 100
MIN_SEGMENTS = 6
MIN_LENIENT_SEGMENTS = 4
MIN_DEMOGRAPHIC_LENGTH = 10

LEGACY_CONFIDENCE = 85
RAW_EXTRACTION_CONFIDENCE = 60

Payload = Union[bytes, bytearray, memoryview, str]

_NUL_RUN = re.compile(r"\x00+")
_DOCUMENT_NUMBER = re.compile(r"\b\d{6,10}\b", re.ASCII)
_BIRTH_DATE = re.compile(r"(19|20)\d{2}(0[1-9]|1[0-2])(0[1-9]|[12]\d|3[01])", re.ASCII)
_GENDER = re.compile(r"[MF]")
_RH = re.compile(r"[ABO]{1,2}[+-]")
_RH_TEXT = re.compile(r"[ABO]{1,2}\s*(?:POSITIVO|NEGATIVO|POS|NEG)")
_LOCATION = re.compile(r"(\d{2})(\d{3})", re.ASCII)

# Lenient mode
_ALTERNATE_DELIMITERS = ("\x1e", "\x1d", "\n", "\r")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")
_LETTER_RUN = re.compile(r"[A-ZÁÉÍÓÚÑ]{3,}")
_RAW_BIRTH_DATE = re.compile(
    r"(19[2-9]\d|200\d|201[0-5])(0[1-9]|1[0-2])(0[1-9]|[12]\d|3[01])", re.ASCII
)
_RAW_DOCUMENT_NUMBER = re.compile(r"\d{8,10}", re.ASCII)
_STANDALONE_GENDER = re.compile(r"\b([MF])\b")
_MARKER_TOKEN = re.compile(r"PubDSK_\d+", re.ASCII)
_NAME_STOPWORDS = frozenset({"COL", "PUB", "DSK"})
_DEMOGRAPHIC_DATE = re.compile(r"(19|20)\d{6}", re.ASCII)
_NAME_WORD = re.compile(r"[A-Za-zÁÉÍÓÚÑáéíóúñ]+")
_DEMOGRAPHIC_SEARCH_END = 10


def _stripped(value: str) -> str:
    return value.strip()


# Layout of segment 2, chosen by its length
_SEGMENT_FULL = (
    FieldSpec("tarjeta_dactilar", 0, 8, _stripped),
    FieldSpec("numero_documento", 10, 8, strip_leading_zeros),
    FieldSpec("primer_apellido", 18, None, _stripped),
)
_SEGMENT_NO_CARD = (
    FieldSpec("numero_documento", 0, 10, strip_leading_zeros),
    FieldSpec("primer_apellido", 10, None, _stripped),
)
_SEGMENT_SURNAME_ONLY = (FieldSpec("primer_apellido", 0, None, _stripped),)
# Lenient: fingerprint card followed by the full 10-digit number
_SEGMENT_CARD_TEN_DIGITS = (
    FieldSpec("tarjeta_dactilar", 0, 8, _stripped),
    FieldSpec("numero_documento", 8, 10, strip_leading_zeros),
    FieldSpec("primer_apellido", 18, None, _stripped),
)


def _layout_for(segment: str, *, lenient: bool = False) -> tuple[FieldSpec, ...]:
    if lenient and len(segment) >= 18:
        return _SEGMENT_CARD_TEN_DIGITS
    if len(segment) > 18:
        return _SEGMENT_FULL
    if len(segment) > 10:
        return _SEGMENT_NO_CARD
    return _SEGMENT_SURNAME_ONLY


def _to_text(payload: Payload) -> str:
    if isinstance(payload, str):
        return payload
    # Every byte maps to one code point, so offsets survive decoding
    return bytes(payload).decode("latin-1")


def split_segments(data: str, delimiter: str = "\x00") -> list[str]:
    """Collapse delimiter runs and return the non-empty segments."""
    if delimiter == "\x00":
        data = _NUL_RUN.sub("\x00", data)
    return [segment for segment in data.split(delimiter) if segment]


def find_document_number(segments: Sequence[str]) -> str:
    """First standalone 6-10 digit run across ``segments``, leading zeros removed."""
    for segment in segments:
        match = _DOCUMENT_NUMBER.search(segment)
        if match:
            return strip_leading_zeros(match.group())
    return ""


def _segment(segments: Sequence[str], index: int) -> str:
    return segments[index] if index < len(segments) else ""


def extract_demographics(data: str) -> tuple[Genero, str, str, str, GrupoRH]:
    """
    Scan the demographic block.

    Each field is optional and found independently: gender is the first M or F,
    the birth date the first plausible YYYYMMDD, the location codes are the two
    and three digits immediately after it, and the blood group is the first
    ``[ABO]{1,2}[+-]`` or spelled-out equivalent.

    Returns:
        (genero, fecha_nacimiento, codigo_municipio, codigo_departamento, rh)
    """
    genero = Genero.DESCONOCIDO
    fecha_nacimiento = codigo_municipio = codigo_departamento = ""
    rh = GrupoRH.DESCONOCIDO

    if len(data) < MIN_DEMOGRAPHIC_LENGTH:
        return genero, fecha_nacimiento, codigo_municipio, codigo_departamento, rh

    gender_match = _GENDER.search(data)
    if gender_match:
        genero = parse_gender(gender_match.group())

    date_match = _BIRTH_DATE.search(data)
    if date_match:
        digits = date_match.group()
        fecha_nacimiento = f"{digits[0:4]}-{digits[4:6]}-{digits[6:8]}"

        location_match = _LOCATION.match(data, date_match.end())
        if location_match:
            codigo_municipio, codigo_departamento = location_match.groups()

    rh_match = _RH.search(data) or _RH_TEXT.search(data)
    if rh_match:
        rh = parse_rh(rh_match.group())

    return genero, fecha_nacimiento, codigo_municipio, codigo_departamento, rh


def _find_demographic(segments: Sequence[str], start: int) -> tuple[int | None, str]:
    """First segment from ``start`` on that carries a YYYYMMDD birth date."""
    for index in range(start, min(len(segments), _DEMOGRAPHIC_SEARCH_END)):
        segment = segments[index].strip()
        if _DEMOGRAPHIC_DATE.search(segment):
            return index, segment
    return None, ""


def _identity_card_tail(segments: Sequence[str]) -> tuple[str, str, str, str, str]:
    """Names from segment 3 on and the demographic block of a tarjeta de identidad."""
    segundo_nombre = demographic = ""
    for index in range(6, min(len(segments), _DEMOGRAPHIC_SEARCH_END)):
        segment = segments[index].strip()
        if _DEMOGRAPHIC_DATE.search(segment):
            demographic = segment
            break
        if _NAME_WORD.fullmatch(segment):
            segundo_nombre = segment
    return (
        _segment(segments, 3).strip(),
        _segment(segments, 4).strip(),
        _segment(segments, 5).strip(),
        segundo_nombre,
        demographic,
    )


def _build_record(
    segments: Sequence[str], gazetteer: Gazetteer, *, lenient: bool = False
) -> IdentityRecord:
    header = _segment(segments, 0)
    names_segment = _segment(segments, 2)

    fields = slice_fields(names_segment, _layout_for(names_segment, lenient=lenient))
    numero_documento = fields.get("numero_documento") or find_document_number(segments)
    primer_apellido = fields["primer_apellido"]

    if lenient and not primer_apellido:
        primer_apellido, segundo_apellido, primer_nombre, segundo_nombre, demographic = (
            _identity_card_tail(segments)
        )
    else:
        segundo_apellido = _segment(segments, 3).strip()
        primer_nombre = _segment(segments, 4).strip()
        segundo_nombre = _segment(segments, 5).strip()
        if lenient:
            index, demographic = _find_demographic(segments, 5)
            if index == 5:
                segundo_nombre = ""
        else:
            demographic = _segment(segments, 6) or _segment(segments, 5)

    if segundo_nombre.endswith(("+", "-")):
        # A trailing blood group means the demographic block shifted into this slot
        segundo_nombre = ""

    primer_nombre = normalize_name(primer_nombre)
    segundo_nombre = normalize_name(segundo_nombre)

    genero, fecha_nacimiento, codigo_municipio, codigo_departamento, rh = extract_demographics(
        demographic
    )

    return IdentityRecord(
        numero_documento=numero_documento,
        primer_apellido=normalize_name(primer_apellido),
        segundo_apellido=normalize_name(segundo_apellido),
        primer_nombre=primer_nombre,
        segundo_nombre=segundo_nombre,
        nombres=normalize_name(f"{primer_nombre} {segundo_nombre}".strip()),
        fecha_nacimiento=fecha_nacimiento,
        genero=genero,
        rh=rh,
        tipo_documento=TipoDocumento.ANTIGUA,
        ubicacion=gazetteer.lookup_location(codigo_municipio, codigo_departamento),
        documento_info=DocumentoInfo(
            codigo_afis=header[2:].strip(),
            tarjeta_dactilar=fields.get("tarjeta_dactilar", ""),
        ),
        confianza=LEGACY_CONFIDENCE,
    )


def looks_like_cedula(segments: Sequence[str]) -> bool:
    """Heuristic for unmarked payloads: a document number, a surname and a birth date."""
    head = segments[:8]
    has_document_number = any(_RAW_DOCUMENT_NUMBER.search(segment) for segment in head)
    has_name = any(_LETTER_RUN.search(segment) for segment in head)
    has_birth_date = any(_BIRTH_DATE.search(segment) for segment in segments)
    return has_document_number and has_name and has_birth_date


def _try_alternate_delimiters(data: str, gazetteer: Gazetteer) -> Optional[IdentityRecord]:
    for delimiter in _ALTERNATE_DELIMITERS:
        segments = split_segments(data, delimiter)
        if len(segments) >= MIN_LENIENT_SEGMENTS and looks_like_cedula(segments):
            logger.info("PDF417 payload split on alternate delimiter %r", delimiter)
            return _build_record(segments, gazetteer, lenient=True)
    return None


def extract_raw(data: str, gazetteer: Gazetteer) -> Optional[IdentityRecord]:
    """
    Pull fields out of an unstructured payload.

    Anchored on the first plausible birth date: the document number is the
    last 8-10 digit run before it and names are the uppercase words of the
    payload in order.

    Returns:
        A low-confidence record, or None when no birth date or document number exists
    """
    clean = _CONTROL_CHARS.sub(" ", data)

    date_match = _RAW_BIRTH_DATE.search(clean)
    if not date_match:
        return None
    position = date_match.start()
    digits = date_match.group()

    near_date = clean[max(0, position - 30) : position + 38]
    gender_match = _STANDALONE_GENDER.search(near_date) or _GENDER.search(near_date)
    genero = parse_gender(gender_match.group()) if gender_match else Genero.DESCONOCIDO

    candidates = _RAW_DOCUMENT_NUMBER.findall(clean[:position])
    numero_documento = strip_leading_zeros(candidates[-1]) if candidates else ""
    if not numero_documento:
        any_number = _RAW_DOCUMENT_NUMBER.search(clean)
        numero_documento = strip_leading_zeros(any_number.group()) if any_number else ""
    if not numero_documento:
        return None

    name_region = _MARKER_TOKEN.sub(" ", clean)
    words = [
        word
        for word in _LETTER_RUN.findall(name_region)
        if len(word) <= 25 and word not in _NAME_STOPWORDS
    ]
    words += [""] * (4 - len(words))
    primer_apellido, segundo_apellido, primer_nombre, segundo_nombre = (
        normalize_name(word) for word in words[:4]
    )

    rh_match = _RH.search(clean)
    codigo_municipio = codigo_departamento = ""
    location_match = _LOCATION.match(clean, date_match.end())
    if location_match:
        codigo_municipio, codigo_departamento = location_match.groups()

    return IdentityRecord(
        numero_documento=numero_documento,
        primer_apellido=primer_apellido,
        segundo_apellido=segundo_apellido,
        primer_nombre=primer_nombre,
        segundo_nombre=segundo_nombre,
        nombres=normalize_name(f"{primer_nombre} {segundo_nombre}".strip()),
        fecha_nacimiento=f"{digits[0:4]}-{digits[4:6]}-{digits[6:8]}",
        genero=genero,
        rh=parse_rh(rh_match.group()) if rh_match else GrupoRH.DESCONOCIDO,
        tipo_documento=TipoDocumento.ANTIGUA,
        ubicacion=gazetteer.lookup_location(codigo_municipio, codigo_departamento),
        documento_info=DocumentoInfo(),
        confianza=RAW_EXTRACTION_CONFIDENCE,
    )


def decode_pdf417(
    payload: Payload,
    *,
    gazetteer: Gazetteer | None = None,
    strict: bool = True,
) -> IdentityRecord:
    """
    Decode a legacy cedula PDF417 payload.

    Args:
        payload: Raw barcode bytes (Latin-1) or already decoded text
        gazetteer: Location resolver; the configured default when None
        strict: When False, fall back to alternate delimiters and raw extraction

    Returns:
        IdentityRecord of type ANTIGUA

    Raises:
        FormatError: If the payload is too short, lacks the cedula marker or has
            too few segments (in lenient mode, if no fallback finds a record)
    """
    data = _to_text(payload or b"")
    if len(data) < MIN_PAYLOAD_LENGTH:
        raise FormatError(
            f"too short: {len(data)} characters, need {MIN_PAYLOAD_LENGTH}",
            FormatErrorCode.TOO_SHORT,
        )

    if gazetteer is None:
        gazetteer = default_gazetteer()
    has_marker = PDF417_MARKER in data

    if strict:
        if not has_marker:
            raise FormatError("not colombian cedula", FormatErrorCode.NOT_COLOMBIAN_CEDULA)
        segments = split_segments(data)
        if len(segments) < MIN_SEGMENTS:
            raise FormatError(
                f"insufficient segments: {len(segments)}, need {MIN_SEGMENTS}",
                FormatErrorCode.INSUFFICIENT_SEGMENTS,
            )
        return _build_record(segments, gazetteer)

    segments = split_segments(data)
    if len(segments) >= MIN_LENIENT_SEGMENTS and (has_marker or looks_like_cedula(segments)):
        return _build_record(segments, gazetteer, lenient=True)

    record = _try_alternate_delimiters(data, gazetteer)
    if record is None:
        record = extract_raw(data, gazetteer)
        if record is not None:
            logger.warning(
                "PDF417 payload decoded by raw extraction, confidence %d", record.confianza
            )
    if record is None:
        raise FormatError(
            f"insufficient segments: {len(segments)}, no fallback matched",
            FormatErrorCode.INSUFFICIENT_SEGMENTS,
        )
    return record
