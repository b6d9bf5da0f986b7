"""Infer a currency code from symbol and keyword cues in message text."""
from __future__ import annotations

import re
from typing import List, Tuple

DEFAULT_CURRENCY = "USD"
SUPPORTED_CURRENCIES = ("USD", "INR", "EUR", "GBP")

CURRENCY_CUES: List[Tuple[re.Pattern[str], str]] = [
    (re.compile(r"₹|inr|rs", re.IGNORECASE), "INR"),
    (re.compile(r"\$|usd", re.IGNORECASE), "USD"),
    (re.compile(r"€|eur", re.IGNORECASE), "EUR"),
    (re.compile(r"£|gbp", re.IGNORECASE), "GBP"),
]


def resolve_currency(text: str, default: str = DEFAULT_CURRENCY) -> str:
    """Return the first currency whose cue appears anywhere in ``text``.

    Cues are checked in a fixed priority order (INR, USD, EUR, GBP), not by
    position in the text, so a message mentioning both ``₹`` and ``$``
    resolves to INR. Keyword cues are plain substrings: "orders" contains
    "rs" and therefore reads as INR.
    """

    for pattern, code in CURRENCY_CUES:
        if pattern.search(text or ""):
            return code
    return default
