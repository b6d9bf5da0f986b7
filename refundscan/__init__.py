"""Scan SMS and email messages for refund updates and import them as records."""
from refundscan.core import (
    Channel,
    ExtractedFields,
    RawMessage,
    RefundRecord,
    RefundScanError,
    RefundStatus,
    ScanSettings,
    StorageError,
    TransportError,
    TransportUnavailableError,
    configure_logging,
)
from refundscan.extraction import extract, extract_message, resolve_currency
from refundscan.processing import (
    BackgroundScanner,
    ImportOutcome,
    ScanOrchestrator,
    auto_import,
    import_selected,
    to_record,
)
from refundscan.storage import JsonRecordStore, JsonSettingsStore

__all__ = [
    "BackgroundScanner",
    "Channel",
    "ExtractedFields",
    "ImportOutcome",
    "JsonRecordStore",
    "JsonSettingsStore",
    "RawMessage",
    "RefundRecord",
    "RefundScanError",
    "RefundStatus",
    "ScanOrchestrator",
    "ScanSettings",
    "StorageError",
    "TransportError",
    "TransportUnavailableError",
    "auto_import",
    "configure_logging",
    "extract",
    "extract_message",
    "import_selected",
    "resolve_currency",
    "to_record",
]
