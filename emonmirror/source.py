"""Remote feed source: the capability the updater consumes, and an HTTP client for it."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

import requests
from pydantic import ValidationError

from .exceptions import RemoteError, TransportError
from .types import Connection, FeedInfo, FeedMeta

logger = logging.getLogger(__name__)


def _is_number(x: Any) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool)


def _is_sample(p: Any) -> bool:
    """A [timestamp_ms, value|null] pair."""
    return (
        isinstance(p, (list, tuple))
        and len(p) == 2
        and _is_number(p[0])
        and (p[1] is None or _is_number(p[1]))
    )


class FeedSource(Protocol):
    def list_feeds(self) -> List[Dict[str, Any]]: ...

    def feed_info(self, feed_id: int) -> FeedInfo: ...

    def feed_meta(self, feed_id: int) -> FeedMeta: ...

    def fetch_range(
        self, feed_id: int, start: int, end: int, interval: int
    ) -> List[List[Optional[float]]]: ...


class EmonClient:
    """
    HTTP client for an emoncms-style feed API.

    `connection.server_address` is the feed API root
    (e.g. 'https://emoncms.org/feed'); the API key is sent in the
    Authorization header.
    """

    def __init__(self, connection: Connection, *, timeout: float = 30.0) -> None:
        self.connection = connection
        self.timeout = timeout

    def _url(self, page: str) -> str:
        return f"{self.connection.server_address.rstrip('/')}/{page}"

    def _get_json(self, page: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = self._url(page)
        try:
            resp = requests.get(
                url,
                params=params,
                headers={"Authorization": self.connection.apikey},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            raise TransportError(f"Request {url} failed: {e}") from e

        if not resp.content:
            return []
        try:
            payload = resp.json()
        except ValueError as e:
            raise RemoteError(f"Malformed response from {url}: {e}") from e

        if isinstance(payload, dict) and payload.get("success") is False:
            raise RemoteError(
                f"Request {url} failed with error: {payload.get('message', 'unknown')}"
            )
        return payload

    def list_feeds(self) -> List[Dict[str, Any]]:
        return list(self._get_json("list.json"))

    def feed_info(self, feed_id: int) -> FeedInfo:
        payload = self._get_json("aget.json", {"id": feed_id})
        try:
            return FeedInfo.model_validate(payload)
        except ValidationError as e:
            raise RemoteError(f"Unexpected feed info for feed {feed_id}: {e}") from e

    def feed_meta(self, feed_id: int) -> FeedMeta:
        payload = self._get_json("getmeta.json", {"id": feed_id})
        try:
            return FeedMeta.model_validate(payload)
        except ValidationError as e:
            raise RemoteError(f"Unexpected metadata for feed {feed_id}: {e}") from e

    def fetch_range(
        self, feed_id: int, start: int, end: int, interval: int
    ) -> List[List[Optional[float]]]:
        """Samples in [start, end] (epoch seconds) as [timestamp_ms, value] pairs."""
        params = {"id": feed_id, "start": start * 1000, "end": end * 1000, "interval": interval}
        payload = self._get_json("data.json", params)
        if not isinstance(payload, list) or not all(_is_sample(p) for p in payload):
            raise RemoteError(f"Malformed data block for feed {feed_id}")
        logger.debug("Fetched %d samples for feed %s", len(payload), feed_id)
        return payload
