"""File-backed transports: SMS inbox exports and directories of .eml files."""
from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import List

from refundscan.core.errors import PermissionDeniedError, TransportError, TransportUnavailableError
from refundscan.core.models import FetchOptions, RawMessage
from refundscan.ingestion.adapters import from_sms_payload
from refundscan.ingestion.emails import parse_eml
from refundscan.transports.base import apply_fetch_options

logger = logging.getLogger(__name__)


class SmsExportTransport:
    """Reads an SMS inbox export: a JSON array of ``{address, body, date}`` objects."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    async def fetch(self, options: FetchOptions) -> List[RawMessage]:
        return await asyncio.to_thread(self._read, options)

    def _read(self, options: FetchOptions) -> List[RawMessage]:
        if not self.path.exists():
            raise TransportUnavailableError(f"SMS export {self.path} does not exist")

        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except PermissionError as exc:
            raise PermissionDeniedError(f"Cannot read SMS export {self.path}") from exc
        except (OSError, ValueError) as exc:
            raise TransportError(f"Failed to read SMS export {self.path}: {exc}") from exc

        if not isinstance(payload, list):
            raise TransportError(f"SMS export {self.path} must contain a JSON array")

        messages = [from_sms_payload(item) for item in payload if isinstance(item, dict)]
        logger.info("Read %d SMS messages from %s", len(messages), self.path)
        return apply_fetch_options(messages, options)


class EmlDirectoryTransport:
    """Reads every ``*.eml`` file in a directory, in file-name order."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    async def fetch(self, options: FetchOptions) -> List[RawMessage]:
        return await asyncio.to_thread(self._read, options)

    def _read(self, options: FetchOptions) -> List[RawMessage]:
        if not self.path.is_dir():
            raise TransportUnavailableError(f"Email directory {self.path} does not exist")

        messages: List[RawMessage] = []
        for email_path in sorted(self.path.glob("*.eml")):
            try:
                messages.append(parse_eml(email_path))
            except PermissionError as exc:
                raise PermissionDeniedError(f"Cannot read {email_path}") from exc
            except OSError as exc:
                raise TransportError(f"Failed to read {email_path}: {exc}") from exc

        logger.info("Read %d emails from %s", len(messages), self.path)
        return apply_fetch_options(messages, options)
