"""Read refund emails from a connected Gmail account through the REST API."""
from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any, Dict, List, Optional

import requests

from refundscan.core.errors import PermissionDeniedError, TransportError
from refundscan.core.models import AccountDescriptor, FetchOptions, RawMessage
from refundscan.ingestion.adapters import from_email
from refundscan.ingestion.common import as_epoch_ms, html_to_text

logger = logging.getLogger(__name__)

GMAIL_API_URL = "https://gmail.googleapis.com/gmail/v1/users/me"
DEFAULT_QUERY = "refund"
DEFAULT_PAGE_SIZE = 100


def _decode_part(data: str) -> str:
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8", errors="ignore")


def _find_part(payload: Dict[str, Any], mime_type: str) -> Optional[str]:
    """Depth-first search for the first body part with ``mime_type``."""

    if payload.get("mimeType") == mime_type:
        data = (payload.get("body") or {}).get("data")
        if data:
            return _decode_part(data)
    for part in payload.get("parts") or []:
        found = _find_part(part, mime_type)
        if found is not None:
            return found
    return None


def gmail_message_to_raw(detail: Dict[str, Any]) -> RawMessage:
    """Convert a ``users.messages.get`` (format=full) response into a RawMessage."""

    payload = detail.get("payload") or {}
    headers = {header.get("name", "").lower(): header.get("value", "") for header in payload.get("headers") or []}

    body = _find_part(payload, "text/plain")
    if body is None:
        html_body = _find_part(payload, "text/html")
        body = html_to_text(html_body) if html_body else detail.get("snippet", "")

    return from_email(
        headers.get("from", ""),
        headers.get("subject", ""),
        body.strip(),
        as_epoch_ms(detail.get("internalDate")),
    )


class GmailApiReader:
    """Lists messages matching a search query and fetches their full payloads.

    The account must already carry an OAuth access token; this reader never
    performs authentication itself.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        base_url: str = GMAIL_API_URL,
        query: str = DEFAULT_QUERY,
        timeout: int = 30,
    ) -> None:
        self.session = session or requests.Session()
        self.base_url = base_url.rstrip("/")
        self.query = query
        self.timeout = timeout

    async def read(self, account: AccountDescriptor, options: FetchOptions) -> List[RawMessage]:
        return await asyncio.to_thread(self._read_sync, account, options)

    def _search_query(self, options: FetchOptions) -> str:
        if options.start_date:
            return f"{self.query} after:{options.start_date // 1000}"
        return self.query

    def _read_sync(self, account: AccountDescriptor, options: FetchOptions) -> List[RawMessage]:
        if not account.access_token:
            raise PermissionDeniedError(f"Account {account.email} has no access token")

        headers = {"Authorization": f"Bearer {account.access_token}"}
        limit = options.max_count or DEFAULT_PAGE_SIZE
        message_ids: List[str] = []
        page_token: Optional[str] = None

        while len(message_ids) < limit:
            params: Dict[str, Any] = {
                "q": self._search_query(options),
                "maxResults": min(limit - len(message_ids), 500),
            }
            if page_token:
                params["pageToken"] = page_token
            listing = self._get("/messages", headers, params)
            message_ids.extend(item["id"] for item in listing.get("messages") or [])
            page_token = listing.get("nextPageToken")
            if not page_token:
                break

        messages = [
            gmail_message_to_raw(self._get(f"/messages/{message_id}", headers, {"format": "full"}))
            for message_id in message_ids[:limit]
        ]
        logger.info("Read %d emails from Gmail account %s", len(messages), account.email)
        return messages

    def _get(self, path: str, headers: Dict[str, str], params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self.session.get(
                f"{self.base_url}{path}",
                headers=headers,
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Gmail request failed: {exc}") from exc

        if response.status_code in (401, 403):
            raise PermissionDeniedError(f"Gmail rejected the access token (HTTP {response.status_code})")

        try:
            response.raise_for_status()
            return response.json()
        except (requests.HTTPError, ValueError) as exc:
            raise TransportError(f"Gmail request to {path} failed: {exc}") from exc
