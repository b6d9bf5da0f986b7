"""Message transports: built-in samples, file sources, and connected accounts."""
from refundscan.transports.accounts import AccountEmailTransport
from refundscan.transports.base import (
    AccountReader,
    AccountRegistry,
    MessageTransport,
    StaticAccountRegistry,
    now_ms,
)
from refundscan.transports.files import EmlDirectoryTransport, SmsExportTransport
from refundscan.transports.gmail import GmailApiReader
from refundscan.transports.imap import ImapReader
from refundscan.transports.samples import SampleEmailTransport, SampleSmsTransport

__all__ = [
    "AccountEmailTransport",
    "AccountReader",
    "AccountRegistry",
    "EmlDirectoryTransport",
    "GmailApiReader",
    "ImapReader",
    "MessageTransport",
    "SampleEmailTransport",
    "SampleSmsTransport",
    "SmsExportTransport",
    "StaticAccountRegistry",
    "now_ms",
]
