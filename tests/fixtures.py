"""Shared fakes and payload builders for the exporter tests."""

from __future__ import annotations

from typing import Callable, Dict, List, Tuple, Union

Handler = Union[dict, Exception, Callable[[Dict[str, object]], dict]]


class DummyHttpClient:
    """Answer ``get_json`` calls from canned payloads keyed by URL."""

    def __init__(self) -> None:
        self.routes: Dict[str, Handler] = {}
        self.requests: List[Tuple[str, Dict[str, object]]] = []

    def route(self, url: str, handler: Handler) -> None:
        self.routes[url] = handler

    def get_json(self, url: str, params: Dict[str, object], timeout: int) -> object:
        self.requests.append((url, dict(params)))
        if url not in self.routes:
            raise AssertionError(f"Unexpected request for {url}")
        handler = self.routes[url]
        if isinstance(handler, Exception):
            raise handler
        if callable(handler):
            return handler(params)
        return handler

    def params_for(self, url: str) -> List[Dict[str, object]]:
        return [params for requested, params in self.requests if requested == url]


def venue(venue_id: str, name: str | None = None, categories=(), lat=1.1, lng=2.2) -> dict:
    return {
        "id": venue_id,
        "name": name or f"Venue {venue_id}",
        "location": {"lat": lat, "lng": lng},
        "categories": [{"id": cid, "name": cid} for cid in categories],
    }


def venue_page(venues: list, count: int) -> dict:
    return {"response": {"venues": {"count": count, "items": [{"venue": v} for v in venues]}}}


def checkin(venue_id: str, created_at: int) -> dict:
    return {"createdAt": created_at, "venue": {"id": venue_id}}


def checkin_page(items: list, count: int) -> dict:
    return {"response": {"checkins": {"count": count, "items": items}}}


def category(category_id: str, name: str, *children: dict) -> dict:
    return {"id": category_id, "name": name, "categories": list(children)}


def category_response(*categories: dict) -> dict:
    return {"response": {"categories": list(categories)}}


FOOD_CATEGORIES = category_response(
    category("top-food", "Food", category("child-coffee", "Coffee Shop")),
)
