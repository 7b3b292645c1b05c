from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from checkin_kml.core import TransportError
from checkin_kml.pipelines import ExportPipeline
from checkin_kml.services import FoursquareApi, KmlExporter

from fixtures import (
    FOOD_CATEGORIES,
    DummyHttpClient,
    checkin,
    checkin_page,
    venue,
    venue_page,
)


@pytest.fixture()
def client() -> DummyHttpClient:
    return DummyHttpClient()


@pytest.fixture()
def api(client) -> FoursquareApi:
    return FoursquareApi(client)


def test_run_builds_foldered_document(client, api):
    client.route(api.categories_url, FOOD_CATEGORIES)
    client.route(
        api.venue_history_url,
        venue_page([venue("v1", "Cafe One", categories=["child-coffee"])], count=1),
    )
    client.route(
        api.checkins_url,
        checkin_page([checkin("v1", 1770785520), checkin("v1", 1770770687)], count=2),
    )
    before = datetime.now(timezone.utc)
    after = before - timedelta(days=1)

    result = ExportPipeline.default(client).run("token", after=after, before=before)

    content = KmlExporter().to_bytes(result.document).decode("utf-8")
    assert "<name>Food</name>" in content
    assert "<name>Cafe One</name>" in content
    assert "Visit count: 2" in content
    assert "<ExtendedData>" in content
    assert "visit_timestamps_unix" in content
    assert result.stats.venues_fetched == 1
    assert result.stats.checkins_matched_to_venues == 2
    assert result.stats.raw_checkins_fetched == 2


def test_run_reports_progress_for_both_stages(client, api):
    client.route(api.categories_url, FOOD_CATEGORIES)
    client.route(api.venue_history_url, venue_page([venue("v1")], count=1))
    client.route(api.checkins_url, checkin_page([checkin("v1", 10)], count=1))
    events = []

    ExportPipeline.default(client).run("token", progress=lambda *event: events.append(event))

    assert [stage for stage, _, _ in events] == ["venues", "venues", "checkins", "checkins"]


def test_venue_history_failure_aborts_before_build(client, api):
    client.route(
        api.venue_history_url,
        TransportError("request failed with status 502 Bad Gateway: upstream failure", status=502),
    )
    client.route(api.categories_url, {"response": {"categories": []}})

    with pytest.raises(TransportError) as excinfo:
        ExportPipeline.default(client).run("token")

    assert "502" in str(excinfo.value)
    assert [url for url, _ in client.requests] == [api.venue_history_url]


def test_category_failure_aborts_after_fetching(client, api):
    client.route(api.venue_history_url, venue_page([venue("v1")], count=1))
    client.route(api.checkins_url, checkin_page([], count=0))
    client.route(api.categories_url, TransportError("request failed: timed out"))

    with pytest.raises(TransportError):
        ExportPipeline.default(client).run("token")
