from pathlib import Path

from cedula_scan.config import Settings, get_settings
from cedula_scan.logging_config import DEFAULT_LOG_FORMAT


def test_defaults():
    settings = Settings()
    assert settings.SERVICE_NAME == "cedula-scan"
    assert settings.LOG_LEVEL == "INFO"
    assert settings.LOG_FORMAT == DEFAULT_LOG_FORMAT
    assert settings.GAZETTEER_PATH is None
    assert settings.STRICT_PDF417 is True


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("CEDULA_LOG_LEVEL", "debug")
    monkeypatch.setenv("CEDULA_LOG_FORMAT", "json")
    monkeypatch.setenv("CEDULA_GAZETTEER_PATH", str(tmp_path / "catalog.yaml"))
    monkeypatch.setenv("CEDULA_STRICT_PDF417", "false")

    settings = Settings()
    assert settings.LOG_LEVEL == "DEBUG"
    assert settings.LOG_FORMAT == "json"
    assert settings.GAZETTEER_PATH == Path(tmp_path / "catalog.yaml")
    assert settings.STRICT_PDF417 is False


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
