import pytest

from cedula_scan.errors import ConfigurationError
from cedula_scan.gazetteer import Gazetteer, StaticGazetteer, default_gazetteer, load_gazetteer


def test_lookup_hit(gazetteer):
    ubicacion = gazetteer.lookup_location("16", "001")
    assert ubicacion.municipio == "Bogotá D.C."
    assert ubicacion.departamento == "Bogotá D.C."
    assert ubicacion.codigo_municipio == "16"
    assert ubicacion.found


@pytest.mark.parametrize(
    ("municipio", "departamento"),
    [("99", "999"), ("", "001"), ("16", ""), ("", ""), ("001", "16")],
)
def test_lookup_miss_returns_empty_names(municipio, departamento, gazetteer):
    ubicacion = gazetteer.lookup_location(municipio, departamento)
    assert ubicacion.municipio == ""
    assert ubicacion.departamento == ""
    assert ubicacion.codigo_municipio == municipio
    assert ubicacion.codigo_departamento == departamento
    assert not ubicacion.found


def test_static_gazetteer_satisfies_protocol():
    assert isinstance(StaticGazetteer(), Gazetteer)
    assert len(StaticGazetteer()) == 0


def test_packaged_catalog():
    gazetteer = load_gazetteer()
    assert ("16", "001") in gazetteer
    assert gazetteer.lookup_location("01", "001").municipio == "Medellín"


def test_load_custom_catalog(tmp_path):
    catalog = tmp_path / "catalog.yaml"
    catalog.write_text(
        'localidades:\n  - ["07", "001", "Tunja", "Boyacá"]\n', encoding="utf-8"
    )

    gazetteer = load_gazetteer(catalog)
    assert len(gazetteer) == 1
    assert gazetteer.lookup_location("07", "001").departamento == "Boyacá"


@pytest.mark.parametrize(
    "content",
    [
        "localidades: [unclosed\n",
        "version: 1\n",
        "- just a list\n",
        'localidades:\n  - ["07", "001", "Tunja"]\n',
        'localidades:\n  - ["07", 1, "Tunja", "Boyacá"]\n',
        'localidades:\n  - ["07", "", "Tunja", "Boyacá"]\n',
    ],
)
def test_malformed_catalog(content, tmp_path):
    catalog = tmp_path / "catalog.yaml"
    catalog.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_gazetteer(catalog)


def test_missing_catalog(tmp_path):
    with pytest.raises(ConfigurationError):
        load_gazetteer(tmp_path / "missing.yaml")


def test_default_gazetteer_follows_settings(tmp_path, monkeypatch):
    catalog = tmp_path / "catalog.yaml"
    catalog.write_text('localidades:\n  - ["07", "001", "Tunja", "Boyacá"]\n', encoding="utf-8")
    monkeypatch.setenv("CEDULA_GAZETTEER_PATH", str(catalog))

    gazetteer = default_gazetteer()
    assert len(gazetteer) == 1
    assert default_gazetteer() is gazetteer
