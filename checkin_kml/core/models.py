"""Domain models used throughout the check-in exporter."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Iterator, Mapping, Sequence

UNKNOWN_FOLDER = "Unknown"

RootMap = dict[str, str]
NameMap = dict[str, str]
CheckinsByVenue = dict[str, list[int]]


def _as_str(value: object) -> str:
    if value in (None, ""):
        return ""
    return str(value)


def _as_float(value: object) -> float:
    if value in (None, ""):
        return 0.0
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0


@dataclass(slots=True)
class Category:
    id: str
    name: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "Category":
        return cls(id=_as_str(payload.get("id")), name=_as_str(payload.get("name")))


@dataclass(slots=True)
class Location:
    lat: float = 0.0
    lng: float = 0.0


@dataclass(slots=True)
class Venue:
    """A point of interest from the venue-history collection."""

    id: str
    name: str
    location: Location = field(default_factory=Location)
    categories: list[Category] = field(default_factory=list)
    visit_timestamps: list[int] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "Venue":
        location = payload.get("location")
        if not isinstance(location, Mapping):
            location = {}
        categories = payload.get("categories")
        if not isinstance(categories, list):
            categories = []

        return cls(
            id=_as_str(payload.get("id")),
            name=_as_str(payload.get("name")),
            location=Location(
                lat=_as_float(location.get("lat")),
                lng=_as_float(location.get("lng")),
            ),
            categories=[
                Category.from_payload(item) for item in categories if isinstance(item, Mapping)
            ],
        )


@dataclass(slots=True)
class GlobalCategory:
    """One node of the remote category forest."""

    id: str
    name: str
    children: list["GlobalCategory"] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "GlobalCategory":
        children = payload.get("categories")
        if not isinstance(children, list):
            children = []
        return cls(
            id=_as_str(payload.get("id")),
            name=_as_str(payload.get("name")),
            children=[cls.from_payload(child) for child in children if isinstance(child, Mapping)],
        )


@dataclass(slots=True)
class CheckinFetchStats:
    raw_checkins_fetched: int = 0
    unique_checkins_retained: int = 0
    missing_venue_or_timestamp: int = 0
    deduplicated_by_venue_and_time: int = 0


@dataclass(slots=True)
class ExportStats:
    """Counters describing what happened to every fetched record."""

    venues_fetched: int = 0
    venues_exported: int = 0
    unknown_category_venues: int = 0
    raw_checkins_fetched: int = 0
    unique_checkins_retained: int = 0
    checkins_matched_to_venues: int = 0
    checkins_unmatched_to_venues: int = 0
    unmatched_venue_ids: int = 0
    checkins_skipped_missing_data: int = 0
    checkins_deduplicated_by_venue_ts: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class SchemaDeclaration:
    id: str
    name: str
    fields: tuple[tuple[str, str], ...]


VISIT_SCHEMA = SchemaDeclaration(
    id="visit-metadata",
    name="VisitMetadata",
    fields=(
        ("visit_count", "int"),
        ("last_visit_unix", "int"),
        ("visit_timestamps_unix", "string"),
    ),
)


@dataclass(slots=True)
class Placemark:
    name: str
    description: str
    longitude: float
    latitude: float
    visit_count: int = 0
    last_visit_unix: int = 0
    visit_timestamps_unix: str = "[]"


@dataclass(slots=True)
class Folder:
    name: str
    placemarks: list[Placemark] = field(default_factory=list)


@dataclass(slots=True)
class VisitDocument:
    """Folders of placemarks plus the schema for their extended data."""

    folders: list[Folder] = field(default_factory=list)
    schema: SchemaDeclaration = VISIT_SCHEMA

    def folder(self, name: str) -> Folder | None:
        for folder in self.folders:
            if folder.name == name:
                return folder
        return None


@dataclass(slots=True)
class ExportResult:
    document: VisitDocument
    stats: ExportStats


@dataclass(slots=True)
class ExportSummary:
    """Information returned to API callers after job completion."""

    job_id: str
    created_at: datetime
    completed_at: datetime
    generated_files: Sequence[str]
    after: datetime | None
    before: datetime | None
    stats: ExportStats

    def as_dict(self) -> dict:
        return {
            "job_id": self.job_id,
            "created_at": self.created_at.isoformat(),
            "completed_at": self.completed_at.isoformat(),
            "generated_files": list(self.generated_files),
            "window": {
                "after": self.after.isoformat() if self.after else None,
                "before": self.before.isoformat() if self.before else None,
            },
            "stats": self.stats.as_dict(),
        }


def iter_placemarks(document: VisitDocument) -> Iterator[tuple[str, Placemark]]:
    """Yield ``(folder name, placemark)`` pairs across a document."""

    for folder in document.folders:
        for placemark in folder.placemarks:
            yield folder.name, placemark
