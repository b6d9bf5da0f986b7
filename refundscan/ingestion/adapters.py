"""Normalize SMS and email payloads into ``RawMessage`` objects."""
from __future__ import annotations

from typing import Any, Mapping

from refundscan.core.models import Channel, RawMessage
from refundscan.ingestion.common import as_epoch_ms, as_text


def from_sms(address: str, body: str, date: int, is_sample: bool = False) -> RawMessage:
    """Wrap an SMS; the body is the whole extraction input."""

    return RawMessage(
        sender=address or "",
        text=body or "",
        timestamp=date,
        channel=Channel.SMS,
        is_sample=is_sample,
    )


def from_email(sender: str, subject: str, body: str, date: int, is_sample: bool = False) -> RawMessage:
    """Wrap an email; subject and body are matched as one blob."""

    return RawMessage(
        sender=sender or "",
        text=f"{subject or ''} {body or ''}",
        timestamp=date,
        channel=Channel.EMAIL,
        is_sample=is_sample,
    )


def from_sms_payload(payload: Mapping[str, Any]) -> RawMessage:
    """Accept the ``{address, body, date}`` shape produced by SMS inbox exports."""

    return from_sms(
        as_text(payload.get("address")),
        as_text(payload.get("body")),
        as_epoch_ms(payload.get("date")),
    )


def from_email_payload(payload: Mapping[str, Any]) -> RawMessage:
    """Accept the ``{from, subject, body, date}`` shape used by email readers."""

    return from_email(
        as_text(payload.get("from")),
        as_text(payload.get("subject")),
        as_text(payload.get("body")),
        as_epoch_ms(payload.get("date")),
    )
