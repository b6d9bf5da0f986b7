"""Field extraction and currency inference."""
from refundscan.extraction.currency import DEFAULT_CURRENCY, SUPPORTED_CURRENCIES, resolve_currency
from refundscan.extraction.extractor import extract, extract_message, patterns_for

__all__ = [
    "DEFAULT_CURRENCY",
    "SUPPORTED_CURRENCIES",
    "extract",
    "extract_message",
    "patterns_for",
    "resolve_currency",
]
