"""Scan orchestration: fetch, filter, extract, and collect refund candidates."""
from __future__ import annotations

import logging
from typing import List, Optional

from refundscan.core.errors import TransportUnavailableError
from refundscan.core.models import Channel, ExtractedFields, FetchOptions, RawMessage
from refundscan.extraction.extractor import extract_message
from refundscan.transports.base import Clock, MessageTransport
from refundscan.transports.samples import SampleEmailTransport, SampleSmsTransport

logger = logging.getLogger(__name__)

MAX_SCAN_MESSAGES = 500


def sample_transport_for(channel: Channel, clock: Optional[Clock] = None) -> MessageTransport:
    """Return the built-in sample transport for ``channel``."""

    if Channel(channel) is Channel.EMAIL:
        return SampleEmailTransport(clock)
    return SampleSmsTransport(clock)


class ScanOrchestrator:
    """Runs scan cycles for one channel against an injected transport.

    The caller decides which transport to inject (a native source, a
    connected-account reader, or the samples) and may pass a ``fallback``
    used when the transport is unavailable or returns nothing. Without a
    fallback, unavailability is raised to the caller. Only one scan runs at a
    time; overlapping calls return ``None`` without doing any work.
    """

    def __init__(
        self,
        channel: Channel,
        transport: Optional[MessageTransport] = None,
        fallback: Optional[MessageTransport] = None,
        max_count: int = MAX_SCAN_MESSAGES,
    ) -> None:
        self.channel = Channel(channel)
        self.transport = transport
        self.fallback = fallback
        self.max_count = max_count
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def scan(self, since: Optional[int] = None) -> Optional[List[ExtractedFields]]:
        """Return meaningful extraction results in message order.

        Messages with a timestamp strictly before ``since`` are skipped.
        Transport failures propagate to the caller, except unavailability
        when a fallback is configured.
        """

        if self._in_flight:
            logger.info("%s scan already in progress; skipping this invocation", self.channel.value)
            return None

        self._in_flight = True
        try:
            messages = await self._fetch(since)
            results: List[ExtractedFields] = []
            for message in messages:
                if since is not None and message.timestamp < since:
                    continue
                fields = extract_message(message)
                if fields.is_meaningful:
                    results.append(fields)
            logger.info(
                "%s scan found %d refund(s) in %d message(s)", self.channel.value, len(results), len(messages)
            )
            return results
        finally:
            self._in_flight = False

    async def _fetch(self, since: Optional[int]) -> List[RawMessage]:
        options = FetchOptions(max_count=self.max_count, start_date=since)
        messages: List[RawMessage] = []

        if self.transport is not None:
            try:
                messages = await self.transport.fetch(options)
            except TransportUnavailableError as exc:
                if self.fallback is None:
                    raise
                logger.info("%s transport unavailable: %s", self.channel.value, exc)

        if not messages and self.fallback is not None:
            logger.info("No %s messages from the transport; using sample data", self.channel.value)
            messages = await self.fallback.fetch(options)

        return messages[: self.max_count]
