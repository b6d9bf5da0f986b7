"""Environment-driven configuration."""
import os
from pathlib import Path

import pytest

import refundscan.core.config as config


def test_env_file_is_loaded_once_without_overriding(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    env_file = tmp_path / "refundscan.env"
    env_file.write_text(
        "# scan settings\nREFUNDSCAN_EMAIL_SCAN='yes'\nREFUNDSCAN_SCAN_INTERVAL=30\nnot a setting\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("REFUNDSCAN_ENV_FILE", str(env_file))
    monkeypatch.setenv("REFUNDSCAN_SCAN_INTERVAL", "5")
    monkeypatch.setattr(config, "_ENV_LOADED", False)
    monkeypatch.delenv("REFUNDSCAN_EMAIL_SCAN", raising=False)

    try:
        settings = config.settings_from_env()
    finally:
        os.environ.pop("REFUNDSCAN_EMAIL_SCAN", None)

    assert settings.email_scan_enabled
    assert settings.scan_interval_minutes == 5


def test_defaults_without_environment():
    settings = config.settings_from_env()

    assert not settings.auto_scan_enabled
    assert not settings.auto_import_enabled
    assert settings.scan_interval_minutes == 15
    assert settings.scan_keywords == ["refund", "return", "reimbursement", "money back"]
    assert settings.last_sms_scan_at == 0


def test_non_numeric_interval_falls_back(monkeypatch: pytest.MonkeyPatch, caplog):
    monkeypatch.setenv("REFUNDSCAN_SCAN_INTERVAL", "soon")
    caplog.set_level("WARNING")

    assert config.settings_from_env().scan_interval_minutes == 15
    assert "REFUNDSCAN_SCAN_INTERVAL" in caplog.text


def test_settings_from_dict_ignores_unknown_keys():
    settings = config.ScanSettings.from_dict({"auto_import_enabled": True, "theme": "dark"})

    assert settings.auto_import_enabled
    assert settings.scan_keywords == config.DEFAULT_SCAN_KEYWORDS
