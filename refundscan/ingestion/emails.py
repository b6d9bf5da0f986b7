"""Parser for RFC 822 email sources (.eml files and IMAP fetches)."""
from __future__ import annotations

import logging
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from email.utils import parsedate_to_datetime
from pathlib import Path

from refundscan.core.models import RawMessage
from refundscan.ingestion.adapters import from_email
from refundscan.ingestion.common import html_to_text

logger = logging.getLogger(__name__)


def _parse_email_timestamp(date_header: str | None) -> int:
    """Return epoch milliseconds derived from an email ``Date`` header (0 if unknown)."""

    if not date_header:
        return 0

    try:
        parsed = parsedate_to_datetime(date_header)
    except (TypeError, ValueError):
        logger.debug("Unparseable Date header %r", date_header)
        return 0

    if not parsed:
        return 0

    return int(parsed.timestamp() * 1000)


def _extract_text_body(message: EmailMessage) -> str:
    if message.is_multipart():
        part = message.get_body(preferencelist=("plain", "html"))
        if part:
            content = part.get_content()
            if part.get_content_subtype() == "html":
                return html_to_text(content)
            return content.strip()
        return ""

    if message.get_content_type().startswith("text/"):
        content = message.get_content()
        if message.get_content_subtype() == "html":
            return html_to_text(content)
        return content.strip()

    payload = message.get_payload(decode=True)
    if payload:
        charset = message.get_content_charset() or "utf-8"
        return payload.decode(charset, errors="ignore").strip()
    return ""


def message_to_raw(message: EmailMessage) -> RawMessage:
    """Normalize a parsed email into sender, subject+body text, and timestamp."""

    body = _extract_text_body(message).replace("\r\n", "\n").replace("\r", "\n")
    return from_email(
        str(message["From"] or ""),
        str(message["Subject"] or ""),
        body,
        _parse_email_timestamp(message.get("Date")),
    )


def parse_eml_bytes(raw: bytes) -> RawMessage:
    """Parse raw RFC 822 bytes (as returned by IMAP ``FETCH``)."""

    message = BytesParser(policy=policy.default).parsebytes(raw)
    return message_to_raw(message)


def parse_eml(path: Path) -> RawMessage:
    """Extract sender, subject, body, and date from an EML file."""

    with path.open("rb") as eml_file:
        message = BytesParser(policy=policy.default).parse(eml_file)
    return message_to_raw(message)
