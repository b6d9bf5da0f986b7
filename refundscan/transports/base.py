"""Interfaces the scan orchestrator uses to obtain messages."""
from __future__ import annotations

import time
from typing import Callable, Iterable, List, Protocol

from refundscan.core.models import AccountDescriptor, FetchOptions, RawMessage

Clock = Callable[[], int]


def now_ms() -> int:
    """Current time in epoch milliseconds."""

    return int(time.time() * 1000)


class MessageTransport(Protocol):
    """A source of raw messages for one channel."""

    async def fetch(self, options: FetchOptions) -> List[RawMessage]:
        """Return up to ``options.max_count`` messages.

        Raises ``TransportUnavailableError`` when the source cannot run in this
        environment and ``TransportError`` for any other failure.
        """
        ...


class AccountRegistry(Protocol):
    """Lists already-authenticated email accounts."""

    def list_active_accounts(self) -> List[AccountDescriptor]:
        ...


class AccountReader(Protocol):
    """Reads messages from a single connected account."""

    async def read(self, account: AccountDescriptor, options: FetchOptions) -> List[RawMessage]:
        ...


class StaticAccountRegistry:
    """Account registry backed by an in-memory list."""

    def __init__(self, accounts: Iterable[AccountDescriptor] = ()) -> None:
        self._accounts = list(accounts)

    def list_active_accounts(self) -> List[AccountDescriptor]:
        return [account for account in self._accounts if account.is_active]


def apply_fetch_options(messages: List[RawMessage], options: FetchOptions) -> List[RawMessage]:
    """Drop messages older than ``start_date`` and cap the result at ``max_count``."""

    if options.start_date is not None:
        messages = [message for message in messages if message.timestamp >= options.start_date]
    if options.max_count is not None:
        messages = messages[: options.max_count]
    return messages
