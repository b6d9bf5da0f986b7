"""Command-line entry point for scanning messages and importing refunds."""
import argparse
import asyncio
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from refundscan.core.errors import RefundScanError
from refundscan.core.logging import configure_logging
from refundscan.core.models import Channel, ExtractedFields
from refundscan.processing.background import BackgroundScanner
from refundscan.processing.importer import auto_import, import_selected
from refundscan.processing.scanner import ScanOrchestrator, sample_transport_for
from refundscan.storage import JsonRecordStore, JsonSettingsStore, ensure_output_dir
from refundscan.transports.files import EmlDirectoryTransport, SmsExportTransport


def parse_since(raw: str) -> int:
    """Accept epoch milliseconds or an ISO date/datetime (UTC when no offset)."""

    if raw.isdigit():
        return int(raw)
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid --since value: {raw!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI entry point."""

    parser = argparse.ArgumentParser(description="Scan SMS and email messages for refund updates")
    parser.add_argument(
        "--channel",
        choices=["sms", "email", "all"],
        default="all",
        help="Which message channel(s) to scan",
    )
    parser.add_argument(
        "--sms-export",
        type=Path,
        help="JSON array of {address, body, date} SMS messages to scan",
    )
    parser.add_argument(
        "--eml-dir",
        type=Path,
        help="Directory of .eml files to scan",
    )
    parser.add_argument(
        "--since",
        type=parse_since,
        help="Skip messages older than this (epoch ms or ISO date)",
    )
    parser.add_argument(
        "--no-samples",
        action="store_true",
        help="Do not fall back to built-in sample messages; a missing source then fails the scan",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="JSON file to write extraction results to",
    )
    parser.add_argument(
        "--store",
        type=Path,
        help="JSON refund record store to import results into",
    )
    parser.add_argument(
        "--auto-import",
        action="store_true",
        help="Skip results whose order ID is already in the store",
    )
    parser.add_argument(
        "--cycle",
        action="store_true",
        help="Run one background scan cycle driven by the settings file",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=Path("refundscan_settings.json"),
        help="JSON settings file used by --cycle",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (defaults to LOG_LEVEL or INFO)",
    )
    return parser


def build_orchestrators(args: argparse.Namespace) -> Dict[Channel, ScanOrchestrator]:
    """Pick a transport per requested channel; samples stand in unless disabled."""

    channels = [Channel.SMS, Channel.EMAIL] if args.channel == "all" else [Channel(args.channel)]
    sources = {
        Channel.SMS: SmsExportTransport(args.sms_export) if args.sms_export else None,
        Channel.EMAIL: EmlDirectoryTransport(args.eml_dir) if args.eml_dir else None,
    }
    return {
        channel: ScanOrchestrator(
            channel,
            transport=sources[channel],
            fallback=None if args.no_samples else sample_transport_for(channel),
        )
        for channel in channels
    }


async def scan_channels(
    orchestrators: Dict[Channel, ScanOrchestrator], since: Optional[int]
) -> List[ExtractedFields]:
    results: List[ExtractedFields] = []
    for orchestrator in orchestrators.values():
        results.extend(await orchestrator.scan(since=since) or [])
    return results


def _describe(fields: ExtractedFields) -> str:
    amount = f"{fields.amount:.2f} {fields.currency}" if fields.amount is not None else "-"
    status = fields.status.value if fields.status else "-"
    sample = " (sample)" if fields.is_sample else ""
    return f"[{fields.channel.value}] order={fields.order_id or '-'} amount={amount} status={status}{sample}"


def _run_cycle(args: argparse.Namespace, orchestrators: Dict[Channel, ScanOrchestrator]) -> int:
    scanner = BackgroundScanner(
        JsonRecordStore(args.store),
        JsonSettingsStore(args.settings),
        sms=orchestrators.get(Channel.SMS),
        email=orchestrators.get(Channel.EMAIL),
    )
    report = asyncio.run(scanner.perform_scan())
    print(
        f"Background cycle found {len(report.found)} refund(s), "
        f"imported {len(report.created)}, skipped {report.skipped_count}"
    )
    for channel, error in report.failed_channels.items():
        print(f"{channel.value} scan failed: {error}", file=sys.stderr)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entrypoint for scanning from the command line."""

    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    orchestrators = build_orchestrators(args)

    try:
        if args.cycle:
            if not args.store:
                parser.error("--cycle requires --store")
            return _run_cycle(args, orchestrators)

        results = asyncio.run(scan_channels(orchestrators, args.since))
        for fields in results:
            print(_describe(fields))
        print(f"Found {len(results)} refund candidate(s)")

        if args.output:
            ensure_output_dir(args.output)
            args.output.write_text(
                json.dumps([fields.to_dict() for fields in results], indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
            print(f"Wrote {args.output}")

        if args.store:
            store = JsonRecordStore(args.store)
            existing = store.load_records()
            if args.auto_import:
                outcome = auto_import(results, existing)
                created, skipped = outcome.created, outcome.skipped_count
            else:
                created, skipped = import_selected(results), 0
            if created:
                store.save_records(existing + created)
            print(f"Imported {len(created)} refund(s) into {args.store}, skipped {skipped}")
    except RefundScanError as exc:
        print(f"Scan failed: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
