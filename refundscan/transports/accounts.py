"""Email transport that reads every active connected account."""
from __future__ import annotations

import logging
from typing import List, Optional

from refundscan.core.errors import TransportError, TransportUnavailableError
from refundscan.core.models import AccountDescriptor, FetchOptions, RawMessage
from refundscan.transports.base import AccountReader, AccountRegistry
from refundscan.transports.gmail import GmailApiReader
from refundscan.transports.imap import ImapReader

logger = logging.getLogger(__name__)


class AccountEmailTransport:
    """Fan out a fetch across the registry's active accounts.

    A failing account is logged and skipped so the others still contribute;
    only when every readable account fails does the fetch itself fail.
    """

    def __init__(
        self,
        registry: AccountRegistry,
        gmail: Optional[AccountReader] = None,
        imap: Optional[AccountReader] = None,
    ) -> None:
        self.registry = registry
        self._gmail = gmail
        self._imap = imap

    def reader_for(self, account: AccountDescriptor) -> Optional[AccountReader]:
        """Pick the reader that can serve ``account`` (``None`` if unsupported)."""

        if account.provider == "gmail" and account.access_token:
            if self._gmail is None:
                self._gmail = GmailApiReader()
            return self._gmail
        if account.provider == "imap" or account.imap_host:
            if self._imap is None:
                self._imap = ImapReader()
            return self._imap
        return None

    async def fetch(self, options: FetchOptions) -> List[RawMessage]:
        accounts = self.registry.list_active_accounts()
        if not accounts:
            raise TransportUnavailableError("No active email accounts connected")

        messages: List[RawMessage] = []
        attempted = 0
        failures = 0
        last_error: Optional[TransportError] = None

        for account in accounts:
            reader = self.reader_for(account)
            if reader is None:
                logger.warning("No reader for %s account %s; skipping", account.provider, account.email)
                continue
            attempted += 1
            try:
                messages.extend(await reader.read(account, options))
            except TransportError as exc:
                logger.error("Error reading from %s: %s", account.email, exc)
                failures += 1
                last_error = exc

        if attempted == 0:
            raise TransportUnavailableError("No connected account has a supported reader")
        if last_error is not None and failures == attempted:
            raise last_error
        return messages
