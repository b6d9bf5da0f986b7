"""Turn extraction results into refund records, with order-ID deduplication."""
from __future__ import annotations

import logging
import random
import string
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from refundscan.core.models import Channel, ExtractedFields, RefundRecord, RefundStatus

logger = logging.getLogger(__name__)

AUTO_IMPORTED_TAG = "auto-imported"
BACKGROUND_SCAN_TAG = "background-scan"
_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


@dataclass
class ImportOutcome:
    created: List[RefundRecord] = field(default_factory=list)
    skipped_count: int = 0


def placeholder_order_id(now: datetime) -> str:
    """Build an ``AUTO-<epoch-ms>-<random>`` order ID for results without one."""

    suffix = "".join(random.choices(_SUFFIX_ALPHABET, k=6))
    return f"AUTO-{int(now.timestamp() * 1000)}-{suffix}"


def to_record(
    fields: ExtractedFields,
    channel: Optional[Channel] = None,
    *,
    now: Optional[datetime] = None,
    background: bool = False,
) -> RefundRecord:
    """Build a new refund record, filling defaults for anything not extracted."""

    now = now or datetime.now(timezone.utc)
    channel = Channel(channel or fields.channel)
    timestamp = now.isoformat()

    tags = [AUTO_IMPORTED_TAG, channel.value]
    if background:
        tags.append(BACKGROUND_SCAN_TAG)
        reason_default = "Auto-imported"
        notes = "Automatically imported from background scan"
    else:
        reason_default = "Auto-imported from message"
        notes = f"Imported from {channel.value.upper()}"

    return RefundRecord(
        id=str(uuid.uuid4()),
        order_id=fields.order_id or placeholder_order_id(now),
        customer_name=fields.customer_name or "Unknown",
        contact_phone=fields.phone or "",
        email=fields.email or "",
        amount=fields.amount if fields.amount is not None else 0.0,
        currency=fields.currency or "USD",
        reason=fields.reason or reason_default,
        status=fields.status or RefundStatus.PENDING,
        tags=tags,
        notes=notes,
        created_at=timestamp,
        updated_at=timestamp,
    )


def import_selected(fields_list: Iterable[ExtractedFields], *, now: Optional[datetime] = None) -> List[RefundRecord]:
    """Manual import: every selected result becomes a record, no dedup check."""

    return [to_record(fields, now=now) for fields in fields_list]


def auto_import(
    fields_list: Iterable[ExtractedFields],
    existing_records: Iterable[RefundRecord],
    *,
    now: Optional[datetime] = None,
) -> ImportOutcome:
    """Unattended import that skips candidates whose order ID is already stored.

    Candidates without an order ID are never deduplicated, so repeated scans
    over the same messages import them again.
    """

    known_order_ids = {record.order_id for record in existing_records if record.order_id}
    outcome = ImportOutcome()

    for fields in fields_list:
        if fields.order_id and fields.order_id in known_order_ids:
            logger.debug("Skipping refund for order %s; already tracked", fields.order_id)
            outcome.skipped_count += 1
            continue
        outcome.created.append(to_record(fields, now=now, background=True))
        if fields.order_id:
            known_order_ids.add(fields.order_id)

    logger.info(
        "Auto-import created %d record(s), skipped %d duplicate(s)",
        len(outcome.created),
        outcome.skipped_count,
    )
    return outcome
