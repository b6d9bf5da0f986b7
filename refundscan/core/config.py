"""Environment-driven configuration for scanning and auto-import."""
from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = Path("refundscan.env")
DEFAULT_SCAN_KEYWORDS = ["refund", "return", "reimbursement", "money back"]
_ENV_LOADED = False


def load_env_file(path: Path) -> None:
    """Load environment variables from a file if it exists."""
    if not path.exists():
        return

    try:
        with path.open(encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                if not key or key in os.environ:
                    continue
                os.environ[key] = value.strip().strip('"').strip("'")
    except OSError as exc:
        logger.debug("Could not load env file %s: %s", path, exc)


def _ensure_env() -> None:
    """Populate the environment from ``REFUNDSCAN_ENV_FILE`` once per process."""

    global _ENV_LOADED
    if _ENV_LOADED:
        return
    _ENV_LOADED = True
    load_env_file(Path(os.getenv("REFUNDSCAN_ENV_FILE", DEFAULT_ENV_FILE)))


def get_config_value(key: str, default: str = "") -> str:
    """Get a configuration value from the environment (after loading the env file)."""
    _ensure_env()
    return os.getenv(key, default)


def _flag(key: str, default: bool = False) -> bool:
    raw = get_config_value(key, "1" if default else "0").strip().lower()
    return raw in {"1", "true", "yes", "on"}


@dataclass
class ScanSettings:
    """Settings the background scan cycle reads at the start of every run.

    ``scan_keywords`` is carried for keyword-driven filtering but is not used
    by the extraction patterns.
    """

    auto_scan_enabled: bool = False
    scan_interval_minutes: int = 15
    sms_scan_enabled: bool = False
    email_scan_enabled: bool = False
    scan_keywords: List[str] = field(default_factory=lambda: list(DEFAULT_SCAN_KEYWORDS))
    auto_import_enabled: bool = False
    last_scan_time: Optional[str] = None
    last_sms_scan_at: int = 0
    last_email_scan_at: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ScanSettings":
        known = {name for name in cls.__dataclass_fields__}
        return cls(**{key: value for key, value in payload.items() if key in known})


def settings_from_env() -> ScanSettings:
    """Build scan settings from ``REFUNDSCAN_*`` environment variables."""

    keywords_raw = get_config_value("REFUNDSCAN_SCAN_KEYWORDS")
    keywords = [token.strip() for token in keywords_raw.split(",") if token.strip()]

    try:
        interval = int(get_config_value("REFUNDSCAN_SCAN_INTERVAL", "15"))
    except ValueError:
        logger.warning("Ignoring non-numeric REFUNDSCAN_SCAN_INTERVAL; using 15 minutes")
        interval = 15

    return ScanSettings(
        auto_scan_enabled=_flag("REFUNDSCAN_AUTO_SCAN"),
        scan_interval_minutes=interval,
        sms_scan_enabled=_flag("REFUNDSCAN_SMS_SCAN"),
        email_scan_enabled=_flag("REFUNDSCAN_EMAIL_SCAN"),
        scan_keywords=keywords or list(DEFAULT_SCAN_KEYWORDS),
        auto_import_enabled=_flag("REFUNDSCAN_AUTO_IMPORT"),
    )
