"""Paginate the check-in collection into per-venue visit lists."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from typing import Mapping, Optional

from ..core import CheckinFetchStats, CheckinsByVenue
from ..utils.progress import ProgressCallback, report_progress
from .foursquare import FoursquareApi, declared_count, page_items

logger = logging.getLogger(__name__)

STAGE = "checkins"


def _checkin_record(item: Mapping[str, object]) -> tuple[str, int]:
    venue = item.get("venue")
    venue_id = venue.get("id") if isinstance(venue, Mapping) else None
    try:
        timestamp = int(item.get("createdAt") or 0)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        timestamp = 0
    return (str(venue_id) if venue_id else ""), timestamp


class CheckinFetcher:
    """Group check-in timestamps by venue, dropping incomplete and repeated records."""

    page_limit = 250
    max_pages = 1000

    def __init__(self, api: FoursquareApi):
        self.api = api

    def fetch(
        self,
        token: str,
        after: Optional[datetime] = None,
        before: Optional[datetime] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> tuple[CheckinsByVenue, CheckinFetchStats]:
        by_venue: dict[str, list[int]] = defaultdict(list)
        seen_by_venue: dict[str, set[int]] = defaultdict(set)
        stats = CheckinFetchStats()
        offset = 0

        for page in range(self.max_pages):
            section = self.api.checkins(
                token,
                after=after,
                before=before,
                limit=self.page_limit,
                offset=offset,
            )
            items = page_items(section)
            if not items:
                break
            stats.raw_checkins_fetched += len(items)

            for item in items:
                venue_id, timestamp = _checkin_record(item)
                if not venue_id or timestamp == 0:
                    stats.missing_venue_or_timestamp += 1
                    continue
                seen = seen_by_venue[venue_id]
                if timestamp in seen:
                    stats.deduplicated_by_venue_and_time += 1
                    continue
                seen.add(timestamp)
                by_venue[venue_id].append(timestamp)
                stats.unique_checkins_retained += 1

            total = declared_count(section)
            offset += len(items)
            logger.debug("Check-in page %s: %s items, offset %s of %s", page, len(items), offset, total)
            report_progress(on_progress, STAGE, offset, total)
            if offset >= total:
                break
        else:
            logger.warning("Check-in history hit the %s page ceiling", self.max_pages)

        for timestamps in by_venue.values():
            timestamps.sort(reverse=True)

        logger.info(
            "Fetched %s check-ins: %s retained, %s missing venue or timestamp, %s duplicates",
            stats.raw_checkins_fetched,
            stats.unique_checkins_retained,
            stats.missing_venue_or_timestamp,
            stats.deduplicated_by_venue_and_time,
        )
        report_progress(on_progress, STAGE, offset, offset)
        return dict(by_venue), stats
