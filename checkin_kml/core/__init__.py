"""Core domain primitives for the check-in exporter."""

from .models import (
    UNKNOWN_FOLDER,
    VISIT_SCHEMA,
    Category,
    CheckinFetchStats,
    CheckinsByVenue,
    ExportResult,
    ExportStats,
    ExportSummary,
    Folder,
    GlobalCategory,
    Location,
    NameMap,
    Placemark,
    RootMap,
    SchemaDeclaration,
    Venue,
    VisitDocument,
    iter_placemarks,
)
from .exceptions import DecodeError, ExportError, TransportError

__all__ = [
    "UNKNOWN_FOLDER",
    "VISIT_SCHEMA",
    "Category",
    "CheckinFetchStats",
    "CheckinsByVenue",
    "ExportResult",
    "ExportStats",
    "ExportSummary",
    "Folder",
    "GlobalCategory",
    "Location",
    "NameMap",
    "Placemark",
    "RootMap",
    "SchemaDeclaration",
    "Venue",
    "VisitDocument",
    "iter_placemarks",
    "DecodeError",
    "ExportError",
    "TransportError",
]
