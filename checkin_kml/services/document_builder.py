"""Merge venues, visits and category groupings into a folder tree."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence

from ..core import (
    UNKNOWN_FOLDER,
    CheckinFetchStats,
    ExportStats,
    Folder,
    NameMap,
    Placemark,
    RootMap,
    Venue,
    VisitDocument,
)
from ..utils.formatting import format_utc

logger = logging.getLogger(__name__)


def build_visit_description(timestamps: Sequence[int], recent_limit: int = 5) -> str:
    """Describe a venue's visits; ``timestamps`` must be newest first."""

    if not timestamps:
        return "Visit count: 0"

    lines = [
        f"Visit count: {len(timestamps)}",
        f"Last visit (UTC): {format_utc(timestamps[0])}",
        "Recent visits (UTC):",
    ]
    lines.extend(format_utc(timestamp) for timestamp in timestamps[:recent_limit])
    return "\n".join(lines)


def encode_timestamps(timestamps: Iterable[int]) -> str:
    try:
        return json.dumps([int(timestamp) for timestamp in timestamps], separators=(",", ":"))
    except (TypeError, ValueError):
        return "[]"


@dataclass(slots=True)
class DocumentBuilder:
    """Assemble the export tree and account for every fetched record."""

    fallback_folder: str = UNKNOWN_FOLDER

    def build(
        self,
        venues: Iterable[Venue],
        checkins_by_venue: Mapping[str, Sequence[int]],
        root_map: RootMap,
        name_map: NameMap,
        *,
        fetch_stats: Optional[CheckinFetchStats] = None,
    ) -> tuple[VisitDocument, ExportStats]:
        venues = list(venues)
        stats = ExportStats(venues_fetched=len(venues))
        if fetch_stats is not None:
            stats.raw_checkins_fetched = fetch_stats.raw_checkins_fetched
            stats.unique_checkins_retained = fetch_stats.unique_checkins_retained
            stats.checkins_skipped_missing_data = fetch_stats.missing_venue_or_timestamp
            stats.checkins_deduplicated_by_venue_ts = fetch_stats.deduplicated_by_venue_and_time

        for venue in venues:
            venue.visit_timestamps = list(checkins_by_venue.get(venue.id, ()))

        venue_ids = {venue.id for venue in venues}
        for venue_id, timestamps in checkins_by_venue.items():
            if venue_id in venue_ids:
                stats.checkins_matched_to_venues += len(timestamps)
            else:
                stats.unmatched_venue_ids += 1
                stats.checkins_unmatched_to_venues += len(timestamps)

        folders: dict[str, Folder] = {}

        def file_under(label: str, placemark: Placemark) -> None:
            folder = folders.get(label)
            if folder is None:
                folder = folders[label] = Folder(name=label)
            folder.placemarks.append(placemark)

        for venue in venues:
            placemark = self._placemark(venue)
            if not venue.categories:
                stats.unknown_category_venues += 1
                file_under(self.fallback_folder, placemark)
            else:
                for category in venue.categories:
                    root_id = root_map.get(category.id, "")
                    file_under(name_map.get(root_id) or self.fallback_folder, placemark)
            stats.venues_exported += 1

        if stats.unmatched_venue_ids:
            logger.info(
                "%s check-ins reference %s venues missing from the venue history",
                stats.checkins_unmatched_to_venues,
                stats.unmatched_venue_ids,
            )

        return VisitDocument(folders=list(folders.values())), stats

    @staticmethod
    def _placemark(venue: Venue) -> Placemark:
        timestamps = venue.visit_timestamps
        return Placemark(
            name=venue.name,
            description=build_visit_description(timestamps),
            longitude=venue.location.lng,
            latitude=venue.location.lat,
            visit_count=len(timestamps),
            last_visit_unix=timestamps[0] if timestamps else 0,
            visit_timestamps_unix=encode_timestamps(timestamps),
        )
