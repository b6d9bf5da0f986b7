"""Shared helpers for turning transport payloads into plain text."""
from __future__ import annotations

import html
import re
from typing import Any


def html_to_text(raw: str) -> str:
    """Convert HTML content into normalized plain text."""

    with_breaks = re.sub(r"(?i)<\s*br\s*/?>", "\n", raw)
    with_breaks = re.sub(r"(?i)</p>", "\n", with_breaks)
    with_breaks = re.sub(r"(?i)</div>", "\n", with_breaks)
    with_breaks = re.sub(r"(?is)<(script|style)[^>]*>.*?</\1>", " ", with_breaks)
    text = re.sub(r"<[^>]+>", " ", with_breaks)
    text = html.unescape(text)
    lines = [" ".join(line.split()) for line in text.splitlines() if line.strip()]
    return "\n".join(lines)


def as_text(value: Any) -> str:
    """Coerce an optional payload value into a string."""

    if value is None:
        return ""
    return str(value)


def as_epoch_ms(value: Any) -> int:
    """Coerce a payload timestamp (int, float, or numeric string) into epoch ms."""

    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0
