"""
Test configuration for the cedula-scan test suite.
"""

from datetime import date

import pytest

from cedula_scan.config import get_settings
from cedula_scan.gazetteer import StaticGazetteer, default_gazetteer


# Test markers
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "mrz: mark test as MRZ related")
    config.addinivalue_line("markers", "ocr: mark test as OCR related")
    config.addinivalue_line("markers", "pdf417: mark test as PDF417 related")


# Collection settings
def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        # Add specific markers based on file names
        path = str(item.fspath).lower()
        if "mrz" in path or "mrz" in item.name.lower():
            item.add_marker(pytest.mark.mrz)
        if "ocr" in path or "ocr" in item.name.lower():
            item.add_marker(pytest.mark.ocr)
        if "pdf417" in path or "pdf417" in item.name.lower():
            item.add_marker(pytest.mark.pdf417)


@pytest.fixture(autouse=True)
def clear_cached_settings(monkeypatch):
    """Isolate tests from the host environment and cached singletons."""
    for name in (
        "CEDULA_LOG_LEVEL",
        "CEDULA_LOG_FORMAT",
        "CEDULA_GAZETTEER_PATH",
        "CEDULA_STRICT_PDF417",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    default_gazetteer.cache_clear()
    yield
    get_settings.cache_clear()
    default_gazetteer.cache_clear()


@pytest.fixture
def gazetteer():
    """Small gazetteer with the locations used by the test builders."""
    return StaticGazetteer(
        [
            ("16", "001", "Bogotá D.C.", "Bogotá D.C."),
            ("01", "001", "Medellín", "Antioquia"),
            ("31", "001", "Cali", "Valle del Cauca"),
        ]
    )


@pytest.fixture
def today():
    """Fixed reference date so century resolution does not drift."""
    return date(2024, 6, 15)
