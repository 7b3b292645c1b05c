"""Paginate the venue-history collection."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..core import Venue
from ..utils.progress import ProgressCallback, report_progress
from .foursquare import FoursquareApi, declared_count, page_items

logger = logging.getLogger(__name__)

STAGE = "venues"


class VenueFetcher:
    """Collect the user's visited venues, unique by id, in upstream order."""

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
    ) -> list[Venue]:
        venues: list[Venue] = []
        seen: set[str] = set()

        # The unpaged call returns more of the history than an explicit first page.
        first = self.api.venue_history(token, after=after, before=before)
        total = declared_count(first)
        first_items = page_items(first, "venue")
        self._collect(first_items, venues, seen)
        report_progress(on_progress, STAGE, len(venues), total)

        if total > len(first_items):
            self._paginate(token, after, before, total, len(first_items), venues, seen, on_progress)

        logger.info("Fetched %s unique venues (declared %s)", len(venues), total)
        report_progress(on_progress, STAGE, len(venues), len(venues))
        return venues

    def _paginate(
        self,
        token: str,
        after: Optional[datetime],
        before: Optional[datetime],
        total: int,
        offset: int,
        venues: list[Venue],
        seen: set[str],
        on_progress: Optional[ProgressCallback],
    ) -> None:
        for page in range(self.max_pages):
            section = self.api.venue_history(
                token,
                after=after,
                before=before,
                limit=self.page_limit,
                offset=offset,
            )
            items = page_items(section, "venue")
            if not items:
                logger.info("Venue history page %s was empty; stopping", page)
                return

            added = self._collect(items, venues, seen)
            offset += len(items)
            logger.debug("Venue page %s: %s items, %s new, offset %s", page, len(items), added, offset)
            report_progress(on_progress, STAGE, len(venues), total)

            if total > 0 and offset >= total:
                return
            if len(items) < self.page_limit:
                logger.info("Venue history page %s was partial; stopping", page)
                return
            if added == 0:
                logger.info("Venue history page %s added no new venues; stopping", page)
                return

        logger.warning("Venue history hit the %s page ceiling", self.max_pages)

    @staticmethod
    def _collect(items: list, venues: list[Venue], seen: set[str]) -> int:
        added = 0
        for item in items:
            venue = Venue.from_payload(item)
            if not venue.id or venue.id in seen:
                continue
            seen.add(venue.id)
            venues.append(venue)
            added += 1
        return added
