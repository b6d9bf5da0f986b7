"""Ordered pattern tables for refund field extraction.

Each field category is an ordered list evaluated first-match-wins: earlier
entries take precedence even when a later one would also match, so the order
of every list below is part of the extraction behavior. SMS and email use
separate tables; the email table accepts a few extra keywords.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Tuple

from refundscan.core.models import RefundStatus

Converter = Callable[[re.Match[str]], object]
PatternTable = List[Tuple[re.Pattern[str], Converter]]
KeywordTable = List[Tuple[RefundStatus, Tuple[str, ...]]]

_FLAGS = re.IGNORECASE

_NUMBER = r"(\d[\d,]*(?:\.\d+)?)"


def _first_group(match: re.Match[str]) -> str:
    return next(group for group in match.groups() if group)


def _parse_number(match: re.Match[str]) -> float:
    return float(match.group(1).replace(",", ""))


# A leading "ORD-" identifier is captured whole; otherwise the token after the keyword.
ORDER_KEYWORD = re.compile(r"(ord-[a-z0-9-]+)|(?:order|ord)[\s#:]*([a-z0-9-]+)", _FLAGS)
ORDER_PREFIXED_DIGITS = re.compile(r"ord-(\d+)", _FLAGS)
ORDER_HASH_DIGITS = re.compile(r"#(\d{6,})")
ORDER_NUMBER_LABEL = re.compile(r"order\s+number[:\s]+([a-z0-9-]+)", _FLAGS)

AMOUNT_AFTER_CUE = re.compile(rf"(?:refund|amount|rs\.?|[₹$€£])\s*{_NUMBER}", _FLAGS)
AMOUNT_BEFORE_CODE = re.compile(rf"{_NUMBER}\s*(?:usd|inr|eur|gbp|rs)", _FLAGS)

SMS_ORDER_PATTERNS: PatternTable = [
    (ORDER_KEYWORD, _first_group),
    (ORDER_PREFIXED_DIGITS, _first_group),
    (ORDER_HASH_DIGITS, _first_group),
]
EMAIL_ORDER_PATTERNS: PatternTable = SMS_ORDER_PATTERNS + [
    (ORDER_NUMBER_LABEL, _first_group),
]

AMOUNT_PATTERNS: PatternTable = [
    (AMOUNT_AFTER_CUE, _parse_number),
    (AMOUNT_BEFORE_CODE, _parse_number),
]

SMS_STATUS_KEYWORDS: KeywordTable = [
    (RefundStatus.APPROVED, ("approved",)),
    (RefundStatus.REJECTED, ("rejected", "denied")),
    (RefundStatus.PAID, ("paid", "processed")),
    (RefundStatus.PENDING, ("pending", "processing")),
]
EMAIL_STATUS_KEYWORDS: KeywordTable = [
    (RefundStatus.APPROVED, ("approved",)),
    (RefundStatus.REJECTED, ("rejected", "denied")),
    (RefundStatus.PAID, ("paid", "processed", "completed")),
    (RefundStatus.PENDING, ("pending", "processing", "under review")),
]

SMS_REASON_KEYWORDS: Tuple[str, ...] = (
    "defect",
    "damaged",
    "wrong",
    "missing",
    "late",
    "cancelled",
    "quality",
    "size",
    "color",
    "not as described",
    "changed mind",
)
EMAIL_REASON_KEYWORDS: Tuple[str, ...] = SMS_REASON_KEYWORDS + ("return",)


@dataclass(frozen=True)
class PatternSet:
    """All ordered tables used for one channel."""

    order_patterns: PatternTable
    amount_patterns: PatternTable
    status_keywords: KeywordTable
    reason_keywords: Tuple[str, ...]


SMS_PATTERNS = PatternSet(
    order_patterns=SMS_ORDER_PATTERNS,
    amount_patterns=AMOUNT_PATTERNS,
    status_keywords=SMS_STATUS_KEYWORDS,
    reason_keywords=SMS_REASON_KEYWORDS,
)
EMAIL_PATTERNS = PatternSet(
    order_patterns=EMAIL_ORDER_PATTERNS,
    amount_patterns=AMOUNT_PATTERNS,
    status_keywords=EMAIL_STATUS_KEYWORDS,
    reason_keywords=EMAIL_REASON_KEYWORDS,
)
