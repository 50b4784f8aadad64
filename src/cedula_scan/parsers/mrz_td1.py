"""
Decoder for the ICAO TD1 machine readable zone on current Colombian cedulas.

Line layout (30 characters each)::

    1  I<COL  document number(9)  check  municipio(2)  departamento(3)  fillers
    2  birth(6) check  sex  expiry(6) check  nationality(3)  NUIP(10)  checks
    3  SURNAMES<<GIVEN<NAMES

Structural problems raise :class:`FormatError`. Field mismatches only lower
the confidence score; the record is always returned with best-effort values.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from functools import partial
from typing import Union

from cedula_scan.confidence import ConfidenceScore
from cedula_scan.errors import FormatError, FormatErrorCode
from cedula_scan.gazetteer import Gazetteer, default_gazetteer
from cedula_scan.models.findings import FindingCode
from cedula_scan.models.identity import GrupoRH, IdentityRecord, TipoDocumento
from cedula_scan.models.mrz import RecoveredLines
from cedula_scan.parsers.ocr_lines import reorder_td1_lines
from cedula_scan.utils.checksum import check_digit
from cedula_scan.utils.fields import FieldSpec, slice_fields
from cedula_scan.utils.text import (
    MRZ_FILLER,
    clean_mrz_line,
    normalize_country_code,
    normalize_doc_type,
    normalize_name,
    parse_gender,
    parse_mrz_date,
    strip_filler_and_zeros,
)

logger = logging.getLogger(__name__)

TD1_LINE_LENGTH = 30
TD1_LINE_COUNT = 3
MIN_LINE_LENGTH = TD1_LINE_LENGTH - 2
EXPECTED_DOC_TYPE = "I"
EXPECTED_COUNTRY = "COL"
MIN_NUIP_DIGITS = 6

LINE1_FIELDS = (
    FieldSpec("doc_type", 0, 1, normalize_doc_type),
    FieldSpec("country", 2, 3, normalize_country_code),
    FieldSpec("document_number_field", 5, 9),
    FieldSpec("document_number", 5, 9, strip_filler_and_zeros),
    FieldSpec("document_number_check", 14, 1),
    FieldSpec("codigo_municipio", 15, 2),
    FieldSpec("codigo_departamento", 17, 3),
)


def line2_fields(today: date | None = None) -> tuple[FieldSpec, ...]:
    """Line 2 layout; birth dates resolve their century against ``today``."""
    birth_date = partial(parse_mrz_date, is_birth_date=True, today=today)
    expiry_date = partial(parse_mrz_date, is_birth_date=False)
    return (
        FieldSpec("birth_date_field", 0, 6),
        FieldSpec("fecha_nacimiento", 0, 6, birth_date),
        FieldSpec("birth_date_check", 6, 1),
        FieldSpec("genero", 7, 1, parse_gender),
        FieldSpec("expiry_date_field", 8, 6),
        FieldSpec("fecha_expiracion", 8, 6, expiry_date),
        FieldSpec("expiry_date_check", 14, 1),
        FieldSpec("nationality", 15, 3, normalize_country_code),
        FieldSpec("nuip", 18, 10, strip_filler_and_zeros),
    )


def parse_names(line: str) -> tuple[str, str, str, str, bool]:
    """
    Split line 3 into surnames and given names.

    Returns:
        (primer_apellido, segundo_apellido, primer_nombre, segundo_nombre, truncated)
        where segundo_nombre joins every given name after the first
    """
    parts = line.rstrip(MRZ_FILLER).split("<<", 1)
    surnames = [word for word in parts[0].split(MRZ_FILLER) if word]
    names = [word for word in parts[1].split(MRZ_FILLER) if word] if len(parts) > 1 else []

    truncated = len(parts) < 2 or not names
    surnames += [""] * (2 - len(surnames))
    return (
        surnames[0],
        surnames[1],
        names[0] if names else "",
        " ".join(names[1:]),
        truncated,
    )


def _check_field(
    score: ConfidenceScore,
    code: FindingCode,
    label: str,
    field: str,
    digit: str,
) -> None:
    expected = check_digit(field)
    score.require(
        expected == digit,
        code,
        f"{label} check digit mismatch",
        expected=expected,
        actual=digit,
    )


def decode_mrz(
    lines: Union[Sequence[str], RecoveredLines],
    *,
    gazetteer: Gazetteer | None = None,
    today: date | None = None,
    reorder: bool = False,
) -> IdentityRecord:
    """
    Decode the three lines of a TD1 MRZ.

    Args:
        lines: The MRZ lines in line 1, 2, 3 order
        gazetteer: Location resolver; the configured default when None
        today: Reference date for the birth-date century (defaults to today)
        reorder: Sort the lines into TD1 order by their signatures first, for
            callers holding raw lines in unknown order

    Returns:
        IdentityRecord of type NUEVA

    Raises:
        FormatError: If there are not exactly three lines or a cleaned line is
            shorter than 28 characters
    """
    if isinstance(lines, RecoveredLines):
        lines = lines.lines
    if isinstance(lines, str) or len(lines) != TD1_LINE_COUNT:
        count = 1 if isinstance(lines, str) else len(lines)
        raise FormatError(
            f"wrong line count: {count}, need {TD1_LINE_COUNT}",
            FormatErrorCode.WRONG_LINE_COUNT,
        )

    cleaned = [clean_mrz_line(line or "") for line in lines]
    if reorder:
        reordered = reorder_td1_lines(cleaned)
        if reordered != cleaned:
            logger.info("MRZ lines reordered to TD1 line order")
        cleaned = reordered
    for number, line in enumerate(cleaned, start=1):
        if len(line) < MIN_LINE_LENGTH:
            raise FormatError(
                f"line {number} too short: {len(line)} characters",
                FormatErrorCode.LINE_TOO_SHORT,
            )

    line1, line2, line3 = (
        line[:TD1_LINE_LENGTH].ljust(TD1_LINE_LENGTH, MRZ_FILLER) for line in cleaned
    )
    first = slice_fields(line1, LINE1_FIELDS)
    second = slice_fields(line2, line2_fields(today))
    if gazetteer is None:
        gazetteer = default_gazetteer()
    score = ConfidenceScore()

    score.require(
        first["doc_type"] == EXPECTED_DOC_TYPE,
        FindingCode.DOCUMENT_TYPE_MISMATCH,
        "Document type is not ID",
        expected=EXPECTED_DOC_TYPE,
        actual=first["doc_type"],
    )
    score.require(
        first["country"] == EXPECTED_COUNTRY,
        FindingCode.COUNTRY_CODE_MISMATCH,
        "Unexpected issuing country",
        expected=EXPECTED_COUNTRY,
        actual=first["country"],
    )
    _check_field(
        score,
        FindingCode.DOCUMENT_NUMBER_CHECKSUM,
        "Document number",
        first["document_number_field"],
        first["document_number_check"],
    )
    _check_field(
        score,
        FindingCode.BIRTH_DATE_CHECKSUM,
        "Birth date",
        second["birth_date_field"],
        second["birth_date_check"],
    )
    _check_field(
        score,
        FindingCode.EXPIRY_DATE_CHECKSUM,
        "Expiry date",
        second["expiry_date_field"],
        second["expiry_date_check"],
    )

    ubicacion = gazetteer.lookup_location(first["codigo_municipio"], first["codigo_departamento"])
    score.require(
        ubicacion.found,
        FindingCode.LOCATION_NOT_FOUND,
        "Location not found in DIVIPOLA catalog",
        actual=f"{first['codigo_municipio']}/{first['codigo_departamento']}",
    )

    # The citizen number is the NUIP; line 1 holds the card serial
    nuip = second["nuip"]
    numero_documento = nuip
    if len(nuip) < MIN_NUIP_DIGITS or not nuip.isdigit():
        numero_documento = first["document_number"]

    primer_apellido, segundo_apellido, primer_nombre, segundo_nombre, truncated = parse_names(line3)

    if score.findings:
        logger.info("MRZ decoded with confidence %d: %s", score.value, score)

    return IdentityRecord(
        numero_documento=numero_documento,
        primer_apellido=normalize_name(primer_apellido),
        segundo_apellido=normalize_name(segundo_apellido),
        primer_nombre=normalize_name(primer_nombre),
        segundo_nombre=normalize_name(segundo_nombre),
        nombres=normalize_name(f"{primer_nombre} {segundo_nombre}".strip()),
        fecha_nacimiento=second["fecha_nacimiento"],
        genero=second["genero"],
        rh=GrupoRH.DESCONOCIDO,
        tipo_documento=TipoDocumento.NUEVA,
        ubicacion=ubicacion,
        fecha_expiracion=second["fecha_expiracion"],
        nuip=nuip,
        nombres_truncados=truncated,
        confianza=score.value,
    )
