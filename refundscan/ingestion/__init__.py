"""Message source adapters for SMS and email payloads."""
from refundscan.ingestion.adapters import from_email, from_email_payload, from_sms, from_sms_payload
from refundscan.ingestion.common import html_to_text
from refundscan.ingestion.emails import message_to_raw, parse_eml, parse_eml_bytes

__all__ = [
    "from_email",
    "from_email_payload",
    "from_sms",
    "from_sms_payload",
    "html_to_text",
    "message_to_raw",
    "parse_eml",
    "parse_eml_bytes",
]
