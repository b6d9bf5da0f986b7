"""Pytest configuration to make the local package importable without installation."""
import sys
from pathlib import Path

import pytest

# Ensure repository root is on sys.path for module resolution
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from refundscan.cli import main as cli_main
from refundscan.storage import JsonRecordStore, JsonSettingsStore

FIXED_NOW_MS = 1_710_000_000_000


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep tests independent of a developer's env file and scan settings."""

    monkeypatch.setenv("REFUNDSCAN_ENV_FILE", str(tmp_path / "missing.env"))
    for key in (
        "REFUNDSCAN_AUTO_SCAN",
        "REFUNDSCAN_SCAN_INTERVAL",
        "REFUNDSCAN_SMS_SCAN",
        "REFUNDSCAN_EMAIL_SCAN",
        "REFUNDSCAN_AUTO_IMPORT",
        "REFUNDSCAN_SCAN_KEYWORDS",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def clock():
    """Return a clock frozen at a fixed epoch-millisecond instant."""

    return lambda: FIXED_NOW_MS


@pytest.fixture
def record_store(tmp_path: Path) -> JsonRecordStore:
    return JsonRecordStore(tmp_path / "records.json")


@pytest.fixture
def settings_store(tmp_path: Path) -> JsonSettingsStore:
    return JsonSettingsStore(tmp_path / "settings.json")


@pytest.fixture
def run_cli():
    """Helper to invoke the CLI with custom arguments inside tests."""

    def _run(args: list[str]) -> int:
        return cli_main(args)

    return _run
