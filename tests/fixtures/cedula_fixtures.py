"""
Builders for synthetic cedula inputs.

MRZ lines are assembled field by field with real check digits, and PDF417
payloads follow the NUL-delimited legacy layout, so tests can vary one field
at a time.
"""

from __future__ import annotations

from cedula_scan.utils.checksum import check_digit

MRZ_LINE_LENGTH = 30
PDF417_PAYLOAD_LENGTH = 530


def build_td1_lines(
    document_number: str = "100234567",
    codigo_municipio: str = "16",
    codigo_departamento: str = "001",
    birth_date: str = "900501",
    sex: str = "F",
    expiry_date: str = "300501",
    nuip: str = "1002345678",
    surnames: tuple[str, ...] = ("PEREZ", "GOMEZ"),
    names: tuple[str, ...] = ("MARIA", "JOSE"),
    doc_code: str = "I<",
    country: str = "COL",
) -> list[str]:
    """Build a checksummed TD1 triple for a Colombian cedula."""
    document_field = document_number.rjust(9, "0")
    line1 = (
        doc_code
        + country
        + document_field
        + check_digit(document_field)
        + codigo_municipio
        + codigo_departamento
    ).ljust(MRZ_LINE_LENGTH, "<")

    nuip_field = nuip.rjust(10, "0")
    upper = birth_date + check_digit(birth_date) + sex + expiry_date + check_digit(expiry_date)
    upper += "COL" + nuip_field + check_digit(nuip_field)
    line2 = upper + check_digit(upper)

    line3 = "<".join(surnames)
    if names:
        line3 += "<<" + "<".join(names)
    line3 = line3[:MRZ_LINE_LENGTH].ljust(MRZ_LINE_LENGTH, "<")

    return [line1, line2, line3]


def build_demographic_block(
    gender: str = "M",
    birth_date: str = "19850312",
    codigo_municipio: str = "01",
    codigo_departamento: str = "001",
    rh: str = "O+",
) -> str:
    """Compact demographic segment: flag, gender, birth date, location, flag, RH."""
    return f"0{gender}{birth_date}{codigo_municipio}{codigo_departamento}1{rh}"


def build_pdf417_segments(
    codigo_afis: str = "12345678",
    tarjeta_dactilar: str = "40123456",
    numero_documento: str = "52345678",
    primer_apellido: str = "RODRIGUEZ",
    segundo_apellido: str = "PEÑA",
    primer_nombre: str = "CARLOS",
    segundo_nombre: str = "ANDRES",
    demographic: str | None = None,
) -> list[str]:
    """Segments of a legacy payload in barcode order."""
    if demographic is None:
        demographic = build_demographic_block()
    return [
        "03" + codigo_afis,
        "PubDSK_1",
        tarjeta_dactilar + numero_documento.rjust(10, "0") + primer_apellido,
        segundo_apellido,
        primer_nombre,
        segundo_nombre,
        demographic,
    ]


def build_pdf417_payload(
    segments: list[str] | None = None,
    length: int = PDF417_PAYLOAD_LENGTH,
    **fields: str,
) -> bytes:
    """
    Join segments with NUL runs and pad the payload with NULs.

    Keyword arguments are forwarded to build_pdf417_segments when no explicit
    segments are given.
    """
    if segments is None:
        segments = build_pdf417_segments(**fields)
    data = "\x00\x00".join(segments)
    return data.ljust(length, "\x00").encode("latin-1")
