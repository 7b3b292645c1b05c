from __future__ import annotations

from datetime import datetime, timezone

import pytest

from checkin_kml.core import TransportError
from checkin_kml.services import CheckinFetcher, FoursquareApi

from fixtures import DummyHttpClient, checkin, checkin_page


def build_fetcher(handler) -> tuple[CheckinFetcher, DummyHttpClient]:
    client = DummyHttpClient()
    api = FoursquareApi(client)
    client.route(api.checkins_url, handler)
    return CheckinFetcher(api), client


def paged(pages: dict[int, list], count: int):
    def handler(params):
        return checkin_page(pages.get(params["offset"], []), count)

    return handler


def test_paginates_and_aggregates_by_venue():
    fetcher, client = build_fetcher(
        paged(
            {
                0: [checkin("v1", 200), checkin("v1", 100)],
                2: [checkin("v2", 300)],
            },
            count=3,
        )
    )

    by_venue, stats = fetcher.fetch(
        "token",
        after=datetime.fromtimestamp(10, tz=timezone.utc),
        before=datetime.fromtimestamp(1000, tz=timezone.utc),
    )

    assert len(client.requests) == 2
    for _, params in client.requests:
        assert params["limit"] == 250
        assert params["afterTimestamp"] == 10
        assert params["beforeTimestamp"] == 1000
    assert by_venue == {"v1": [200, 100], "v2": [300]}
    assert stats.raw_checkins_fetched == 3
    assert stats.unique_checkins_retained == 3


def test_timestamps_are_sorted_most_recent_first():
    fetcher, _ = build_fetcher(
        paged({0: [checkin("v1", 100), checkin("v1", 300), checkin("v1", 200)]}, count=3)
    )

    by_venue, _ = fetcher.fetch("token")

    assert by_venue["v1"] == [300, 200, 100]


def test_duplicate_venue_and_timestamp_is_counted_once():
    fetcher, _ = build_fetcher(
        paged({0: [checkin("v1", 100), checkin("v1", 100), checkin("v2", 100)]}, count=3)
    )

    by_venue, stats = fetcher.fetch("token")

    assert by_venue == {"v1": [100], "v2": [100]}
    assert stats.deduplicated_by_venue_and_time == 1
    assert stats.unique_checkins_retained == 2


def test_duplicates_are_detected_across_pages():
    fetcher, _ = build_fetcher(
        paged({0: [checkin("v1", 100)], 1: [checkin("v1", 100)]}, count=2)
    )

    by_venue, stats = fetcher.fetch("token")

    assert by_venue == {"v1": [100]}
    assert stats.deduplicated_by_venue_and_time == 1


def test_records_without_venue_or_timestamp_are_dropped():
    fetcher, _ = build_fetcher(
        paged(
            {
                0: [
                    checkin("", 100),
                    {"createdAt": 200},
                    checkin("v1", 0),
                    {"venue": {"id": "v1"}},
                    checkin("v1", 300),
                ]
            },
            count=5,
        )
    )

    by_venue, stats = fetcher.fetch("token")

    assert by_venue == {"v1": [300]}
    assert stats.missing_venue_or_timestamp == 4


def test_counters_account_for_every_raw_record():
    fetcher, _ = build_fetcher(
        paged(
            {
                0: [checkin("v1", 100), checkin("v1", 100), checkin("", 5)],
                3: [checkin("v2", 7), checkin("v2", 0), checkin("v1", 100)],
            },
            count=6,
        )
    )

    _, stats = fetcher.fetch("token")

    assert stats.raw_checkins_fetched == 6
    assert stats.raw_checkins_fetched == (
        stats.unique_checkins_retained
        + stats.missing_venue_or_timestamp
        + stats.deduplicated_by_venue_and_time
    )


def test_empty_first_page_returns_nothing():
    events = []
    fetcher, _ = build_fetcher(checkin_page([], count=0))

    by_venue, stats = fetcher.fetch("token", on_progress=lambda *event: events.append(event))

    assert by_venue == {}
    assert stats.raw_checkins_fetched == 0
    assert events == [("checkins", 0, 0)]


def test_progress_reports_offset_then_completion():
    events = []
    fetcher, _ = build_fetcher(
        paged({0: [checkin("v1", 1), checkin("v1", 2)], 2: [checkin("v1", 3)]}, count=3)
    )

    fetcher.fetch("token", on_progress=lambda *event: events.append(event))

    assert events == [("checkins", 2, 3), ("checkins", 3, 3), ("checkins", 3, 3)]


def test_page_ceiling_bounds_pagination():
    fetcher, client = build_fetcher(
        lambda params: checkin_page([checkin("v1", params["offset"] + 1)], count=10**9)
    )
    fetcher.max_pages = 4

    by_venue, _ = fetcher.fetch("token")

    assert len(client.requests) == 4
    assert by_venue["v1"] == [4, 3, 2, 1]


def test_transport_error_aborts():
    fetcher, _ = build_fetcher(TransportError("request failed with status 502 Bad Gateway", status=502))

    with pytest.raises(TransportError):
        fetcher.fetch("token")
