"""Scan orchestration, import, and background cycles."""
from refundscan.processing.background import BackgroundScanner, CycleReport
from refundscan.processing.importer import (
    AUTO_IMPORTED_TAG,
    BACKGROUND_SCAN_TAG,
    ImportOutcome,
    auto_import,
    import_selected,
    placeholder_order_id,
    to_record,
)
from refundscan.processing.scanner import MAX_SCAN_MESSAGES, ScanOrchestrator, sample_transport_for

__all__ = [
    "AUTO_IMPORTED_TAG",
    "BACKGROUND_SCAN_TAG",
    "BackgroundScanner",
    "CycleReport",
    "ImportOutcome",
    "MAX_SCAN_MESSAGES",
    "ScanOrchestrator",
    "auto_import",
    "import_selected",
    "placeholder_order_id",
    "sample_transport_for",
    "to_record",
]
