"""Scan orchestration: fallback, filtering, and the one-scan-at-a-time latch."""
import asyncio

import pytest

from refundscan.core.errors import PermissionDeniedError, TransportUnavailableError
from refundscan.core.models import Channel, FetchOptions
from refundscan.ingestion.adapters import from_sms
from refundscan.processing.scanner import ScanOrchestrator, sample_transport_for


class ListTransport:
    """Returns a fixed message list and remembers the options it was called with."""

    def __init__(self, messages=None, error: Exception = None) -> None:
        self.messages = messages or []
        self.error = error
        self.options = []

    async def fetch(self, options: FetchOptions):
        self.options.append(options)
        if self.error is not None:
            raise self.error
        return list(self.messages)


class BlockingTransport(ListTransport):
    def __init__(self, release: asyncio.Event, messages) -> None:
        super().__init__(messages)
        self.release = release

    async def fetch(self, options: FetchOptions):
        self.options.append(options)
        await self.release.wait()
        return list(self.messages)


def test_scan_without_transport_uses_samples(clock):
    orchestrator = ScanOrchestrator(Channel.SMS, fallback=sample_transport_for(Channel.SMS, clock))

    results = asyncio.run(orchestrator.scan())

    assert [fields.order_id for fields in results] == ["ORD-123456", "ORD-789012", "ORD-345678"]
    assert [fields.amount for fields in results] == [150.0, 5000.0, 75.5]
    assert [fields.currency for fields in results] == ["USD", "INR", "USD"]
    assert all(fields.is_sample for fields in results)


def test_email_samples_carry_sender_address(clock):
    orchestrator = ScanOrchestrator(Channel.EMAIL, fallback=sample_transport_for(Channel.EMAIL, clock))

    results = asyncio.run(orchestrator.scan())

    assert [fields.email for fields in results] == ["support@example.com", "refunds@example.com"]
    assert all(fields.channel is Channel.EMAIL for fields in results)


def test_unavailable_transport_falls_back_to_samples(clock):
    transport = ListTransport(error=TransportUnavailableError("no SMS capability"))
    orchestrator = ScanOrchestrator(Channel.SMS, transport, fallback=sample_transport_for(Channel.SMS, clock))

    results = asyncio.run(orchestrator.scan())

    assert len(results) == 3
    assert all(fields.is_sample for fields in results)


def test_empty_transport_falls_back_but_real_messages_do_not(clock):
    real = ListTransport([from_sms("+1", "Refund of $5 for order ORD-42 paid", 10)])
    empty = ListTransport([])
    fallback = sample_transport_for(Channel.SMS, clock)

    real_results = asyncio.run(ScanOrchestrator(Channel.SMS, real, fallback=fallback).scan())
    empty_results = asyncio.run(ScanOrchestrator(Channel.SMS, empty, fallback=fallback).scan())

    assert [fields.order_id for fields in real_results] == ["ORD-42"]
    assert not real_results[0].is_sample
    assert len(empty_results) == 3


def test_unavailable_transport_without_fallback_raises():
    orchestrator = ScanOrchestrator(Channel.SMS, ListTransport(error=TransportUnavailableError("none")))

    with pytest.raises(TransportUnavailableError):
        asyncio.run(orchestrator.scan())
    assert not orchestrator.in_flight


def test_empty_transport_without_fallback_finds_nothing():
    orchestrator = ScanOrchestrator(Channel.SMS, ListTransport())

    assert asyncio.run(orchestrator.scan()) == []


def test_other_transport_errors_propagate(clock):
    transport = ListTransport(error=PermissionDeniedError("READ_SMS denied"))
    orchestrator = ScanOrchestrator(Channel.SMS, transport, fallback=sample_transport_for(Channel.SMS, clock))

    with pytest.raises(PermissionDeniedError):
        asyncio.run(orchestrator.scan())
    assert not orchestrator.in_flight


def test_since_skips_strictly_earlier_messages():
    messages = [
        from_sms("+1", "refund 1 for order ORD-1", 999),
        from_sms("+1", "refund 2 for order ORD-2", 1000),
        from_sms("+1", "refund 3 for order ORD-3", 1001),
    ]
    transport = ListTransport(messages)

    results = asyncio.run(ScanOrchestrator(Channel.SMS, transport).scan(since=1000))

    assert [fields.order_id for fields in results] == ["ORD-2", "ORD-3"]
    assert all(fields.timestamp >= 1000 for fields in results)
    assert transport.options[0].start_date == 1000
    assert transport.options[0].max_count == 500


def test_only_meaningful_results_are_kept_in_order():
    messages = [
        from_sms("+1", "refund 7", 1),
        from_sms("+1", "Your refund is approved", 2),
        from_sms("+1", "hello there", 3),
        from_sms("+1", "order #ORD-8 update", 4),
    ]

    results = asyncio.run(ScanOrchestrator(Channel.SMS, ListTransport(messages)).scan())

    assert [(fields.order_id, fields.amount) for fields in results] == [(None, 7.0), ("ORD-8", None)]


def test_scan_caps_message_count():
    messages = [from_sms("+1", f"refund {index}", index) for index in range(1, 6)]

    results = asyncio.run(ScanOrchestrator(Channel.SMS, ListTransport(messages), max_count=2).scan())

    assert [fields.amount for fields in results] == [1.0, 2.0]


def test_overlapping_scan_returns_none_without_fetching():
    async def scenario():
        release = asyncio.Event()
        transport = BlockingTransport(release, [from_sms("+1", "ORD-1 refund $5", 1)])
        orchestrator = ScanOrchestrator(Channel.SMS, transport)

        first = asyncio.create_task(orchestrator.scan())
        await asyncio.sleep(0)
        assert orchestrator.in_flight
        second = await orchestrator.scan()
        release.set()
        return second, await first, len(transport.options), orchestrator.in_flight

    second, first, fetch_count, in_flight = asyncio.run(scenario())

    assert second is None
    assert [fields.order_id for fields in first] == ["ORD-1"]
    assert fetch_count == 1
    assert not in_flight


def test_skipped_scan_is_logged(caplog):
    async def scenario():
        release = asyncio.Event()
        orchestrator = ScanOrchestrator(Channel.EMAIL, BlockingTransport(release, []))
        first = asyncio.create_task(orchestrator.scan())
        await asyncio.sleep(0)
        await orchestrator.scan()
        release.set()
        await first

    caplog.set_level("INFO")
    asyncio.run(scenario())

    assert any("already in progress" in message for message in caplog.messages)
