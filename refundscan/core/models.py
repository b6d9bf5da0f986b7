"""Data models shared by the extraction, scanning, and import stages."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Channel(str, Enum):
    """Message source type."""

    SMS = "sms"
    EMAIL = "email"


class RefundStatus(str, Enum):
    """Lifecycle status of a refund claim."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PAID = "PAID"


@dataclass
class RawMessage:
    """A transport message normalized into a single text blob plus sender metadata."""

    sender: str
    text: str
    timestamp: int
    channel: Channel = Channel.SMS
    is_sample: bool = False


@dataclass
class FetchOptions:
    """Options passed to a transport ``fetch`` call."""

    max_count: Optional[int] = None
    start_date: Optional[int] = None


@dataclass
class ExtractedFields:
    """Best-effort structured data pulled out of a single message.

    Every field is optional: ``None`` means the pattern did not match. The
    ``channel``, ``timestamp`` and ``is_sample`` attributes record where the
    result came from.
    """

    order_id: Optional[str] = None
    amount: Optional[float] = None
    currency: Optional[str] = None
    status: Optional[RefundStatus] = None
    reason: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    customer_name: Optional[str] = None
    channel: Channel = Channel.SMS
    timestamp: Optional[int] = None
    is_sample: bool = False

    @property
    def is_meaningful(self) -> bool:
        """Only results with an order ID or an amount are worth importing."""

        return self.order_id is not None or self.amount is not None

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["channel"] = self.channel.value
        payload["status"] = self.status.value if self.status else None
        return payload


@dataclass
class RefundRecord:
    """A persisted refund claim as stored by the record store."""

    id: str
    order_id: str
    customer_name: str = "Unknown"
    contact_phone: str = ""
    email: str = ""
    amount: float = 0.0
    currency: str = "USD"
    reason: str = ""
    status: RefundStatus = RefundStatus.PENDING
    tags: List[str] = field(default_factory=list)
    notes: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain dictionary representation for JSON serialization."""

        payload = asdict(self)
        payload["status"] = self.status.value
        return payload

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "RefundRecord":
        data = dict(payload)
        data["status"] = RefundStatus(data.get("status") or RefundStatus.PENDING.value)
        data["tags"] = list(data.get("tags") or [])
        known = {name for name in cls.__dataclass_fields__}
        return cls(**{key: value for key, value in data.items() if key in known})


@dataclass
class AccountDescriptor:
    """An already-authenticated email account the email transport can read from."""

    id: str
    provider: str
    email: str
    display_name: Optional[str] = None
    is_active: bool = True
    access_token: Optional[str] = None
    imap_host: Optional[str] = None
    imap_port: int = 993
    username: Optional[str] = None
    password: Optional[str] = None
