"""Export pipeline orchestrator."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core import ExportResult, iter_placemarks
from ..services import (
    CategoryResolver,
    CheckinFetcher,
    DocumentBuilder,
    FoursquareApi,
    VenueFetcher,
)
from ..services.http import JsonClient
from ..utils.progress import ProgressCallback

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ExportPipeline:
    """Fetch venues, check-ins and categories, then build the document.

    Every upstream fetch must succeed before the document is built; the
    first transport or decode error propagates to the caller.
    """

    venue_fetcher: VenueFetcher
    checkin_fetcher: CheckinFetcher
    category_resolver: CategoryResolver
    builder: DocumentBuilder

    def run(
        self,
        token: str,
        *,
        after: Optional[datetime] = None,
        before: Optional[datetime] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> ExportResult:
        logger.info("Starting export for window %s - %s", after, before)

        venues = self.venue_fetcher.fetch(token, after, before, progress)
        checkins_by_venue, fetch_stats = self.checkin_fetcher.fetch(token, after, before, progress)
        root_map, name_map = self.category_resolver.resolve(token)

        document, stats = self.builder.build(
            venues,
            checkins_by_venue,
            root_map,
            name_map,
            fetch_stats=fetch_stats,
        )

        placemarks = sum(1 for _ in iter_placemarks(document))
        logger.info(
            "Export finished: %s venues in %s folders (%s placemarks)",
            stats.venues_exported,
            len(document.folders),
            placemarks,
        )
        logger.info("Export statistics: %s", stats.as_dict())
        return ExportResult(document=document, stats=stats)

    @classmethod
    def default(cls, http_client: Optional[JsonClient] = None) -> "ExportPipeline":
        api = FoursquareApi(http_client)
        return cls(
            venue_fetcher=VenueFetcher(api),
            checkin_fetcher=CheckinFetcher(api),
            category_resolver=CategoryResolver(api),
            builder=DocumentBuilder(),
        )
