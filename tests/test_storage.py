"""JSON record and settings stores."""
import json
from pathlib import Path

import pytest

from refundscan.core.config import ScanSettings
from refundscan.core.errors import StorageError
from refundscan.core.models import RefundRecord, RefundStatus
from refundscan.storage import JsonRecordStore, JsonSettingsStore


def test_missing_record_file_loads_empty(record_store):
    assert record_store.load_records() == []


def test_records_survive_a_save_and_load(tmp_path: Path):
    store = JsonRecordStore(tmp_path / "nested" / "records.json")
    record = RefundRecord(
        id="r1",
        order_id="ORD-1",
        amount=12.5,
        status=RefundStatus.APPROVED,
        tags=["auto-imported", "sms"],
        notes="Imported from SMS",
    )

    store.save_records([record])

    assert json.loads(store.path.read_text(encoding="utf-8"))[0]["status"] == "APPROVED"
    assert store.load_records() == [record]


def test_records_ignore_unknown_keys(record_store):
    record_store.path.write_text(
        json.dumps([{"id": "r2", "orderId": "legacy", "order_id": "ORD-2", "status": "PAID"}]),
        encoding="utf-8",
    )

    (record,) = record_store.load_records()

    assert record.order_id == "ORD-2"
    assert record.status is RefundStatus.PAID


@pytest.mark.parametrize(
    "content",
    [
        "{broken",
        json.dumps({"id": "r1"}),
        json.dumps([{"order_id": "ORD-3"}]),
        json.dumps([{"id": "r", "order_id": "o", "status": "LOST"}]),
    ],
)
def test_invalid_record_files_raise_storage_error(record_store, content: str):
    record_store.path.write_text(content, encoding="utf-8")

    with pytest.raises(StorageError):
        record_store.load_records()


def test_missing_settings_file_uses_environment(settings_store, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("REFUNDSCAN_SMS_SCAN", "true")
    monkeypatch.setenv("REFUNDSCAN_SCAN_KEYWORDS", "refund, chargeback")

    settings = settings_store.load()

    assert settings.sms_scan_enabled
    assert not settings.email_scan_enabled
    assert settings.scan_keywords == ["refund", "chargeback"]


def test_settings_round_trip(settings_store):
    settings_store.save(ScanSettings(email_scan_enabled=True, last_email_scan_at=99, last_scan_time="x"))

    loaded = settings_store.load()

    assert loaded.email_scan_enabled
    assert loaded.last_email_scan_at == 99
    assert loaded.last_scan_time == "x"


def test_invalid_settings_file_raises_storage_error(tmp_path: Path):
    path = tmp_path / "settings.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(StorageError):
        JsonSettingsStore(path).load()
