"""Record and settings stores the scan cycle reads from and writes to."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Protocol

from refundscan.core.config import ScanSettings, settings_from_env
from refundscan.core.errors import StorageError
from refundscan.core.models import RefundRecord

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    def load_records(self) -> List[RefundRecord]:
        ...

    def save_records(self, records: Iterable[RefundRecord]) -> None:
        ...


class SettingsStore(Protocol):
    def load(self) -> ScanSettings:
        ...

    def save(self, settings: ScanSettings) -> None:
        ...


def ensure_output_dir(output_path: Path) -> None:
    """Create the parent directory for the output file when missing."""

    output_path.parent.mkdir(parents=True, exist_ok=True)


def _read_json(path: Path):
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise StorageError(f"Failed to read {path}: {exc}") from exc


def _write_json(path: Path, payload) -> None:
    try:
        ensure_output_dir(path)
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        raise StorageError(f"Failed to write {path}: {exc}") from exc


class JsonRecordStore:
    """Keeps refund records as a JSON array in a single file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load_records(self) -> List[RefundRecord]:
        if not self.path.exists():
            return []

        payload = _read_json(self.path)
        if not isinstance(payload, list):
            raise StorageError(f"{self.path} must contain a JSON array of records")

        try:
            return [RefundRecord.from_dict(item) for item in payload]
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Invalid refund record in {self.path}: {exc}") from exc

    def save_records(self, records: Iterable[RefundRecord]) -> None:
        rows = [record.to_dict() for record in records]
        _write_json(self.path, rows)
        logger.info("Saved %d refund record(s) to %s", len(rows), self.path)


class JsonSettingsStore:
    """Keeps scan settings in a JSON object; falls back to env-derived defaults."""

    def __init__(self, path: Path, defaults: Optional[Callable[[], ScanSettings]] = None) -> None:
        self.path = Path(path)
        self._defaults = defaults or settings_from_env

    def load(self) -> ScanSettings:
        if not self.path.exists():
            return self._defaults()

        payload = _read_json(self.path)
        if not isinstance(payload, dict):
            raise StorageError(f"{self.path} must contain a JSON object")
        try:
            return ScanSettings.from_dict(payload)
        except TypeError as exc:
            raise StorageError(f"Invalid settings in {self.path}: {exc}") from exc

    def save(self, settings: ScanSettings) -> None:
        _write_json(self.path, settings.to_dict())
