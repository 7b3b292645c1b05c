"""Endpoints of the remote check-in service."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Mapping, Optional

from ..config import API_CONFIG, ApiConfig
from ..core.exceptions import DecodeError
from .http import HttpClient, JsonClient


def _section(payload: object, *path: str) -> Mapping[str, object]:
    """Walk ``payload`` along ``path``; missing keys decode as empty."""

    if not isinstance(payload, Mapping):
        raise DecodeError("response body is not a JSON object")
    node: object = payload
    for key in path:
        node = node.get(key) if isinstance(node, Mapping) else None
    return node if isinstance(node, Mapping) else {}


class FoursquareApi:
    """Thin client for the v2 user history endpoints.

    The transport is passed in so callers (and tests) decide how requests
    leave the process.
    """

    def __init__(
        self,
        http_client: Optional[JsonClient] = None,
        config: ApiConfig = API_CONFIG,
    ):
        self.http_client = http_client or HttpClient()
        self.config = config

    @property
    def venue_history_url(self) -> str:
        return f"{self.config.base_url}/users/self/venuehistory"

    @property
    def checkins_url(self) -> str:
        return f"{self.config.base_url}/users/self/checkins"

    @property
    def categories_url(self) -> str:
        return f"{self.config.base_url}/venues/categories"

    def venue_history(
        self,
        token: str,
        *,
        after: Optional[datetime] = None,
        before: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Mapping[str, object]:
        """Return the ``response.venues`` section (``count`` and ``items``)."""

        params = self._query(token, after=after, before=before, limit=limit, offset=offset)
        payload = self.http_client.get_json(self.venue_history_url, params, self.config.timeout)
        return _section(payload, "response", "venues")

    def checkins(
        self,
        token: str,
        *,
        after: Optional[datetime] = None,
        before: Optional[datetime] = None,
        limit: int,
        offset: int,
    ) -> Mapping[str, object]:
        """Return the ``response.checkins`` section (``count`` and ``items``)."""

        params = self._query(token, after=after, before=before, limit=limit, offset=offset)
        payload = self.http_client.get_json(self.checkins_url, params, self.config.timeout)
        return _section(payload, "response", "checkins")

    def categories(self, token: str) -> list[Mapping[str, object]]:
        """Return the top-level nodes of the category forest."""

        payload = self.http_client.get_json(self.categories_url, self._query(token), self.config.timeout)
        categories = _section(payload, "response").get("categories")
        if not isinstance(categories, list):
            return []
        return [item for item in categories if isinstance(item, Mapping)]

    def _query(
        self,
        token: str,
        *,
        after: Optional[datetime] = None,
        before: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Dict[str, object]:
        params: Dict[str, object] = {"oauth_token": token, "v": self.config.version}
        if limit is not None:
            params["limit"] = limit
        if offset is not None:
            params["offset"] = offset
        if before is not None:
            params["beforeTimestamp"] = int(before.timestamp())
        if after is not None:
            params["afterTimestamp"] = int(after.timestamp())
        return params


def page_items(section: Mapping[str, object], key: str | None = None) -> list[Mapping[str, object]]:
    """Return the ``items`` list of a page, unwrapping ``key`` when given."""

    items = section.get("items")
    if not isinstance(items, list):
        return []
    result: list[Mapping[str, object]] = []
    for item in items:
        if not isinstance(item, Mapping):
            continue
        if key is not None:
            inner = item.get(key)
            item = inner if isinstance(inner, Mapping) else {}
        result.append(item)
    return result


def declared_count(section: Mapping[str, object]) -> int:
    count = section.get("count")
    try:
        return int(count)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0
