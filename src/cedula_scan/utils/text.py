"""
Text normalization shared by the PDF417 and MRZ decoders.
"""

from __future__ import annotations

import re
from datetime import date

from cedula_scan.models.identity import Genero, GrupoRH

MRZ_FILLER = "<"

_WHITESPACE = re.compile(r"\s+")
_FILLER_VARIANTS = re.compile("[«‹＜]")
_NON_MRZ = re.compile(r"[^A-Z0-9<]")
_SIX_DIGITS = re.compile(r"\d{6}", re.ASCII)
_RH_CANONICAL = re.compile(r"^(O|A|B|AB)([+-])$")

# OCR confusions for the leading "I" of a TD1 document code
_DOC_TYPE_CONFUSIONS = frozenset({"L", "1", "|", "l"})


def clean_mrz_line(line: str) -> str:
    """
    Normalize a raw OCR line to the MRZ alphabet.

    Uppercases, removes all whitespace, maps guillemet and full-width angle
    bracket variants to ``<`` and replaces every other character outside
    ``[A-Z0-9<]`` with ``<``.
    """
    cleaned = _WHITESPACE.sub("", line.upper())
    cleaned = _FILLER_VARIANTS.sub(MRZ_FILLER, cleaned)
    return _NON_MRZ.sub(MRZ_FILLER, cleaned)


def normalize_name(name: str) -> str:
    """Lowercase a name and capitalize each whitespace-delimited word."""
    if not name:
        return ""
    words = _WHITESPACE.split(name.lower())
    return " ".join(word[:1].upper() + word[1:] for word in words).strip()


def strip_leading_zeros(value: str) -> str:
    return value.lstrip("0")


def strip_filler_and_zeros(value: str) -> str:
    """Drop ``<`` fillers and leading zeros from a numeric MRZ field."""
    return value.replace(MRZ_FILLER, "").lstrip("0")


def normalize_doc_type(char: str) -> str:
    """Correct OCR misreads of the document code ``I``."""
    if char in _DOC_TYPE_CONFUSIONS or char.upper() in _DOC_TYPE_CONFUSIONS:
        return "I"
    return char.upper()


def normalize_country_code(code: str) -> str:
    """Correct the digit zero misread for the letter O in country codes."""
    return code.replace("0", "O")


def parse_gender(value: str) -> Genero:
    upper = (value or "").upper()
    if upper == "M":
        return Genero.MASCULINO
    if upper == "F":
        return Genero.FEMENINO
    return Genero.DESCONOCIDO


def parse_rh(value: str) -> GrupoRH:
    """
    Parse a blood group such as ``O+``, ``AB-`` or ``A POSITIVO``.

    Returns:
        The matching GrupoRH, or DESCONOCIDO when the value is not one of the
        eight valid groups
    """
    if not value:
        return GrupoRH.DESCONOCIDO

    normalized = _WHITESPACE.sub("", value.upper())
    normalized = (
        normalized.replace("POSITIVO", "+", 1)
        .replace("NEGATIVO", "-", 1)
        .replace("POS", "+", 1)
        .replace("NEG", "-", 1)
    )

    match = _RH_CANONICAL.match(normalized)
    if not match:
        return GrupoRH.DESCONOCIDO
    return GrupoRH(match.group(1) + match.group(2))


def parse_mrz_date(raw: str, *, is_birth_date: bool, today: date | None = None) -> str:
    """
    Convert an MRZ ``YYMMDD`` date to ISO ``YYYY-MM-DD``.

    Birth dates whose two-digit year is greater than the current two-digit year
    belong to the 1900s, all others to the 2000s. Expiry dates always belong to
    the 2000s. Month and day are only range checked (1-12, 1-31).

    Returns:
        ISO date string, or "" when the field is not a usable date
    """
    if not raw or not _SIX_DIGITS.fullmatch(raw[:6]):
        return ""

    yy = int(raw[0:2])
    month = int(raw[2:4])
    day = int(raw[4:6])

    if is_birth_date:
        current_yy = (today or date.today()).year % 100
        year = 1900 + yy if yy > current_yy else 2000 + yy
    else:
        year = 2000 + yy

    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return ""

    return f"{year}-{month:02d}-{day:02d}"
