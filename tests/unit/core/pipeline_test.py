import pytest

from cedula_scan import decode_barcode, decode_mrz_lines, decode_ocr_text
from cedula_scan.errors import ConfigurationError, FormatError, FormatErrorCode
from cedula_scan.pipeline import DecodeResult
from tests.fixtures.cedula_fixtures import build_pdf417_payload, build_td1_lines


def test_decode_barcode_success(gazetteer):
    result = decode_barcode(build_pdf417_payload(), gazetteer=gazetteer)

    assert result.ok
    assert result.ordered is True
    assert result.error_code is None
    assert result.unwrap().confianza == 85


def test_decode_barcode_failure():
    result = decode_barcode(b"PubDSK_1")

    assert not result.ok
    assert result.record is None
    assert result.error_code is FormatErrorCode.TOO_SHORT
    with pytest.raises(FormatError) as exc_info:
        result.unwrap()
    assert exc_info.value.error_code is FormatErrorCode.TOO_SHORT


def test_decode_barcode_uses_packaged_gazetteer():
    record = decode_barcode(build_pdf417_payload()).unwrap()
    assert record.ubicacion.municipio == "Medellín"


def test_decode_barcode_strictness_from_settings(monkeypatch):
    data = "PubDSK_1 0052345678 RODRIGUEZ PEÑA CARLOS 0M1985031201001 O+".ljust(120, "\x00")

    assert decode_barcode(data).error_code is FormatErrorCode.INSUFFICIENT_SEGMENTS

    monkeypatch.setenv("CEDULA_STRICT_PDF417", "false")
    from cedula_scan.config import get_settings

    get_settings.cache_clear()
    assert decode_barcode(data).unwrap().confianza == 60
    assert decode_barcode(data, strict=True).error_code is FormatErrorCode.INSUFFICIENT_SEGMENTS


def test_decode_mrz_lines(gazetteer, today):
    result = decode_mrz_lines(build_td1_lines(), gazetteer=gazetteer, today=today)
    assert result.unwrap().confianza == 100

    failed = decode_mrz_lines(build_td1_lines()[:2], gazetteer=gazetteer)
    assert failed.error_code is FormatErrorCode.WRONG_LINE_COUNT


def test_decode_ocr_text_end_to_end(gazetteer, today):
    line1, line2, line3 = build_td1_lines()
    text = "\n".join(["REPUBLICA DE COLOMBIA", line3, line2, line1])

    result = decode_ocr_text(text, gazetteer=gazetteer, today=today)

    assert result.ok
    assert result.ordered is True
    record = result.record
    assert record.numero_documento == "1002345678"
    assert record.fecha_nacimiento == "1990-05-01"
    assert record.fecha_expiracion == "2030-05-01"
    assert record.confianza == 100


def test_decode_ocr_text_reports_unordered_lines(gazetteer, today):
    line1, line2, line3 = build_td1_lines()
    text = "\n".join(["X<VEN" + line1[5:], line2, line3])

    result = decode_ocr_text(text, gazetteer=gazetteer, today=today)

    assert result.ok
    assert result.ordered is False


def test_decode_ocr_text_failure(gazetteer):
    result = decode_ocr_text("nothing to see here", gazetteer=gazetteer)
    assert result.error_code is FormatErrorCode.INSUFFICIENT_MRZ_LINES
    assert "insufficient mrz lines" in result.error_message


def test_failure_from_error():
    result = DecodeResult.failure(FormatError("too short", FormatErrorCode.TOO_SHORT))
    assert result.error_message == "too short"
    assert not result.ok


def test_broken_catalog_path_raises_configuration_error(monkeypatch, tmp_path):
    monkeypatch.setenv("CEDULA_GAZETTEER_PATH", str(tmp_path / "missing.yaml"))

    with pytest.raises(ConfigurationError):
        decode_barcode(build_pdf417_payload())
    with pytest.raises(ConfigurationError):
        decode_mrz_lines(build_td1_lines())


def test_decode_mrz_lines_reorder(gazetteer, today):
    line1, line2, line3 = build_td1_lines()
    result = decode_mrz_lines([line2, line3, line1], gazetteer=gazetteer, today=today, reorder=True)

    assert result.unwrap().numero_documento == "1002345678"
    assert result.record.confianza == 100
