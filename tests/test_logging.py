"""Logging coverage to ensure failures are surfaced without stopping the run."""
import asyncio
import logging

import pytest

from refundscan import cli
from refundscan.core.errors import TransportUnavailableError
from refundscan.core.logging import configure_logging
from refundscan.core.models import Channel, ExtractedFields, FetchOptions
from refundscan.processing.importer import auto_import
from refundscan.processing.scanner import ScanOrchestrator, sample_transport_for


class UnavailableTransport:
    async def fetch(self, options: FetchOptions):
        raise TransportUnavailableError("not running on a phone")


def test_configure_logging_reads_level_from_env(monkeypatch: pytest.MonkeyPatch):
    calls = {}
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))

    configure_logging()

    assert calls["level"] == "DEBUG"
    assert "%(name)s" in calls["format"]


def test_explicit_level_wins_over_env(monkeypatch: pytest.MonkeyPatch):
    calls = {}
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))

    configure_logging("warning")

    assert calls["level"] == "WARNING"


def test_unknown_level_falls_back_to_info(monkeypatch: pytest.MonkeyPatch, caplog):
    calls = {}
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
    caplog.set_level("WARNING")

    assert configure_logging() == "INFO"
    assert calls["level"] == "INFO"
    assert "Unknown log level 'CHATTY'" in caplog.text


def test_http_client_loggers_follow_debug_only(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: None)
    urllib3_logger = logging.getLogger("urllib3")
    monkeypatch.setattr(urllib3_logger, "level", urllib3_logger.level)

    configure_logging("info")
    assert urllib3_logger.level == logging.WARNING

    configure_logging("debug")
    assert urllib3_logger.level == logging.DEBUG


@pytest.mark.parametrize("flag, expected", [("debug", "DEBUG"), ("ERROR", "ERROR")])
def test_cli_log_level_flag_reaches_logging_setup(monkeypatch: pytest.MonkeyPatch, run_cli, flag, expected):
    levels = []
    monkeypatch.setattr(cli, "configure_logging", levels.append)

    assert run_cli(["--channel", "sms", "--log-level", flag]) == 0
    assert levels == [expected]


def test_cli_without_log_level_defers_to_environment(monkeypatch: pytest.MonkeyPatch, run_cli):
    levels = []
    monkeypatch.setattr(cli, "configure_logging", levels.append)

    run_cli(["--channel", "sms"])

    assert levels == [None]


def test_cli_rejects_unknown_log_level(run_cli):
    with pytest.raises(SystemExit) as excinfo:
        run_cli(["--log-level", "chatty"])

    assert excinfo.value.code == 2


def test_fallback_to_samples_is_logged(clock, caplog):
    orchestrator = ScanOrchestrator(
        Channel.SMS, UnavailableTransport(), fallback=sample_transport_for(Channel.SMS, clock)
    )
    caplog.set_level("INFO")

    asyncio.run(orchestrator.scan())

    assert "not running on a phone" in caplog.text
    assert any("using sample data" in message for message in caplog.messages)
    assert any("found 3 refund(s)" in message for message in caplog.messages)


def test_auto_import_logs_summary(caplog):
    caplog.set_level("INFO")

    auto_import([ExtractedFields(order_id="ORD-1"), ExtractedFields(order_id="ORD-1")], [])

    assert any("created 1 record(s), skipped 1" in message for message in caplog.messages)
