"""Heuristic extraction of refund fields from SMS and email text."""
from __future__ import annotations

import logging
import re
from email.utils import parseaddr
from typing import Optional, Tuple

from refundscan.core.models import Channel, ExtractedFields, RawMessage, RefundStatus
from refundscan.extraction.currency import resolve_currency
from refundscan.extraction.patterns import (
    EMAIL_PATTERNS,
    SMS_PATTERNS,
    KeywordTable,
    PatternSet,
    PatternTable,
)

logger = logging.getLogger(__name__)

_BRACKETED_ADDRESS = re.compile(r"<([^<>]+)>")


def patterns_for(channel: Channel) -> PatternSet:
    return EMAIL_PATTERNS if Channel(channel) is Channel.EMAIL else SMS_PATTERNS


def _first_match(patterns: PatternTable, text: str):
    """Run ``patterns`` in order and convert the first hit."""

    for pattern, convert in patterns:
        match = pattern.search(text)
        if match:
            return convert(match)
    return None


def _match_status(keywords: KeywordTable, lowered: str) -> Optional[RefundStatus]:
    for status, tokens in keywords:
        if any(token in lowered for token in tokens):
            return status
    return None


def _match_reason(keywords: Tuple[str, ...], lowered: str) -> Optional[str]:
    for keyword in keywords:
        if keyword in lowered:
            return keyword.title()
    return None


def _email_contacts(sender: str) -> Tuple[Optional[str], Optional[str]]:
    """Split a ``"Display Name" <addr>`` sender into name and address."""

    match = _BRACKETED_ADDRESS.search(sender)
    if match:
        display_name, _ = parseaddr(sender)
        name = (display_name or sender[: match.start()]).strip().strip('"').strip()
        return name or None, match.group(1).strip()
    if "@" in sender:
        return None, sender
    return None, None


def extract(text: str, sender: str = "", channel: Channel = Channel.SMS) -> ExtractedFields:
    """Pull order ID, amount, currency, status, reason, and contacts out of ``text``.

    Every category is first-match-wins over the channel's ordered tables. The
    function never raises for string input; anything it cannot find is left
    as ``None``.
    """

    text = text or ""
    sender = sender or ""
    channel = Channel(channel)
    patterns = patterns_for(channel)
    lowered = text.lower()

    fields = ExtractedFields(channel=channel)

    order_id = _first_match(patterns.order_patterns, text)
    if order_id:
        fields.order_id = order_id.upper()

    amount = _first_match(patterns.amount_patterns, text)
    if amount is not None:
        fields.amount = amount
        fields.currency = resolve_currency(text)

    fields.status = _match_status(patterns.status_keywords, lowered)
    fields.reason = _match_reason(patterns.reason_keywords, lowered)

    if channel is Channel.SMS:
        fields.phone = sender or None
    else:
        fields.customer_name, fields.email = _email_contacts(sender)

    return fields


def extract_message(message: RawMessage) -> ExtractedFields:
    """Extract fields from a normalized message and stamp its provenance."""

    fields = extract(message.text, message.sender, message.channel)
    fields.timestamp = message.timestamp
    fields.is_sample = message.is_sample
    logger.debug(
        "Extracted order_id=%s amount=%s from %s message", fields.order_id, fields.amount, fields.channel.value
    )
    return fields
