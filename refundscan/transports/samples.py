"""Deterministic built-in messages used when no real transport is available.

Every message produced here carries ``is_sample=True`` so scan results built
from it can be told apart from real ones.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from refundscan.core.models import FetchOptions, RawMessage
from refundscan.ingestion.adapters import from_email, from_sms
from refundscan.transports.base import Clock, now_ms

logger = logging.getLogger(__name__)

DAY_MS = 86_400_000

SAMPLE_SMS = [
    (
        "+1234567890",
        "Your refund for Order #ORD-123456 has been approved. Amount: $150.00 will be processed "
        "within 5-7 business days.",
        1,
    ),
    (
        "+1987654321",
        "Refund request ORD-789012 for ₹5000 rejected due to policy violation. "
        "Contact support for details.",
        2,
    ),
    (
        "+1555555555",
        "Refund of $75.50 for order #ORD-345678 has been paid to your account.",
        3,
    ),
]

SAMPLE_EMAILS = [
    (
        "support@example.com",
        "Refund Approved - Order ORD-123456",
        "Dear Customer, Your refund request for Order #ORD-123456 has been approved. Amount: $150.00 "
        "will be processed within 5-7 business days. Thank you for your patience.",
        1,
    ),
    (
        "refunds@example.com",
        "Refund Update - Order ORD-789012",
        "We regret to inform you that your refund request for ₹5000 has been rejected due to policy "
        "violation. Please contact our support team for more details.",
        2,
    ),
]


class SampleSmsTransport:
    """Serves the sample SMS inbox, dated relative to the injected clock."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or now_ms

    async def fetch(self, options: FetchOptions) -> List[RawMessage]:
        now = self._clock()
        messages = [
            from_sms(address, body, now - days_ago * DAY_MS, is_sample=True)
            for address, body, days_ago in SAMPLE_SMS
        ]
        logger.info("Serving %d sample SMS messages", len(messages))
        return messages[: options.max_count] if options.max_count is not None else messages


class SampleEmailTransport:
    """Serves the sample mailbox, dated relative to the injected clock."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or now_ms

    async def fetch(self, options: FetchOptions) -> List[RawMessage]:
        now = self._clock()
        messages = [
            from_email(sender, subject, body, now - days_ago * DAY_MS, is_sample=True)
            for sender, subject, body, days_ago in SAMPLE_EMAILS
        ]
        logger.info("Serving %d sample emails", len(messages))
        return messages[: options.max_count] if options.max_count is not None else messages
