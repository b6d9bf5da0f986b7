"""Read refund emails from an IMAP mailbox."""
from __future__ import annotations

import asyncio
import imaplib
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from refundscan.core.errors import PermissionDeniedError, TransportError
from refundscan.core.models import AccountDescriptor, FetchOptions, RawMessage
from refundscan.ingestion.emails import parse_eml_bytes

logger = logging.getLogger(__name__)

IMAP_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def imap_since(epoch_ms: int) -> str:
    """Format epoch milliseconds as an IMAP ``SINCE`` date (e.g. ``05-Mar-2024``)."""

    day = datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc)
    return f"{day.day:02d}-{IMAP_MONTHS[day.month - 1]}-{day.year}"


class ImapReader:
    """Searches a mailbox for refund messages and parses the RFC 822 payloads."""

    def __init__(
        self,
        mailbox: str = "INBOX",
        search_text: str = "refund",
        connect: Optional[Callable[[str, int], imaplib.IMAP4]] = None,
    ) -> None:
        self.mailbox = mailbox
        self.search_text = search_text
        self._connect = connect or imaplib.IMAP4_SSL

    async def read(self, account: AccountDescriptor, options: FetchOptions) -> List[RawMessage]:
        return await asyncio.to_thread(self._read_sync, account, options)

    def _read_sync(self, account: AccountDescriptor, options: FetchOptions) -> List[RawMessage]:
        if not account.imap_host:
            raise TransportError(f"Account {account.email} has no IMAP host configured")

        logger.info("Connecting to IMAP server %s:%s", account.imap_host, account.imap_port)
        try:
            connection = self._connect(account.imap_host, account.imap_port)
        except (OSError, imaplib.IMAP4.error) as exc:
            raise TransportError(f"Failed to connect to {account.imap_host}: {exc}") from exc

        try:
            try:
                connection.login(account.username or account.email, account.password or "")
            except imaplib.IMAP4.error as exc:
                raise PermissionDeniedError(f"IMAP login failed for {account.email}") from exc

            status, _ = connection.select(self.mailbox, readonly=True)
            if status != "OK":
                raise TransportError(f"Cannot open mailbox {self.mailbox} for {account.email}: {status}")

            criteria = ["TEXT", f'"{self.search_text}"']
            if options.start_date:
                criteria += ["SINCE", imap_since(options.start_date)]

            status, data = connection.search(None, *criteria)
            if status != "OK":
                raise TransportError(f"IMAP search failed for {account.email}: {status}")

            message_ids = data[0].split() if data and data[0] else []
            if options.max_count is not None:
                message_ids = message_ids[-options.max_count:]

            messages: List[RawMessage] = []
            for message_id in message_ids:
                status, parts = connection.fetch(message_id, "(RFC822)")
                if status != "OK":
                    logger.warning("Could not fetch IMAP message %s from %s", message_id, account.email)
                    continue
                for part in parts:
                    if isinstance(part, tuple) and len(part) > 1:
                        messages.append(parse_eml_bytes(part[1]))
        except (OSError, imaplib.IMAP4.error) as exc:
            raise TransportError(f"IMAP read failed for {account.email}: {exc}") from exc
        finally:
            try:
                connection.logout()
            except (OSError, imaplib.IMAP4.error) as exc:
                logger.warning("Error during IMAP logout for %s: %s", account.email, exc)

        logger.info("Read %d emails from IMAP account %s", len(messages), account.email)
        return messages
