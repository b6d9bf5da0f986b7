"""One unattended scan cycle across the enabled channels."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from refundscan.core.errors import TransportError
from refundscan.core.models import Channel, ExtractedFields, RefundRecord
from refundscan.processing.importer import auto_import
from refundscan.processing.scanner import ScanOrchestrator
from refundscan.storage import RecordStore, SettingsStore
from refundscan.transports.base import Clock, now_ms

logger = logging.getLogger(__name__)

_WATERMARK_FIELDS = {
    Channel.SMS: ("sms_scan_enabled", "last_sms_scan_at"),
    Channel.EMAIL: ("email_scan_enabled", "last_email_scan_at"),
}


@dataclass
class CycleReport:
    """What a background cycle found, imported, and failed on."""

    found: List[ExtractedFields] = field(default_factory=list)
    created: List[RefundRecord] = field(default_factory=list)
    skipped_count: int = 0
    failed_channels: Dict[Channel, str] = field(default_factory=dict)


class BackgroundScanner:
    """Scan state owned by whoever schedules periodic scans.

    Settings, watermarks, and existing records are read from the stores at the
    start of every cycle. Transport failures are logged per channel and do not
    abort the cycle; storage failures propagate to the caller.
    """

    def __init__(
        self,
        record_store: RecordStore,
        settings_store: SettingsStore,
        sms: Optional[ScanOrchestrator] = None,
        email: Optional[ScanOrchestrator] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.record_store = record_store
        self.settings_store = settings_store
        self.scanners: Dict[Channel, Optional[ScanOrchestrator]] = {Channel.SMS: sms, Channel.EMAIL: email}
        self._clock = clock or now_ms
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def perform_scan(self) -> Optional[CycleReport]:
        """Run one cycle; returns ``None`` when a cycle is already running."""

        if self._running:
            logger.info("Background scan already running; skipping")
            return None

        self._running = True
        try:
            return await self._run_cycle()
        finally:
            self._running = False

    async def _run_cycle(self) -> CycleReport:
        settings = self.settings_store.load()
        report = CycleReport()

        for channel, (enabled_field, watermark_field) in _WATERMARK_FIELDS.items():
            scanner = self.scanners[channel]
            if scanner is None or not getattr(settings, enabled_field):
                continue

            started_at = self._clock()
            since = getattr(settings, watermark_field) or None
            try:
                results = await scanner.scan(since=since)
            except TransportError as exc:
                logger.warning("Background %s scan failed: %s", channel.value, exc)
                report.failed_channels[channel] = str(exc)
                continue

            if results is None:
                continue
            report.found.extend(results)
            setattr(settings, watermark_field, started_at)

        cycle_time = datetime.fromtimestamp(self._clock() / 1000, tz=timezone.utc)
        settings.last_scan_time = cycle_time.isoformat()
        self.settings_store.save(settings)

        if settings.auto_import_enabled and report.found:
            existing = self.record_store.load_records()
            outcome = auto_import(report.found, existing, now=cycle_time)
            report.created = outcome.created
            report.skipped_count = outcome.skipped_count
            if outcome.created:
                self.record_store.save_records(existing + outcome.created)
                logger.info("Automatically imported %d new refund(s)", len(outcome.created))
        elif report.found:
            logger.info("Found %d new refund(s); review them to import", len(report.found))

        return report
