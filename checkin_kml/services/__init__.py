"""Service layer exports."""

from .auth import Authenticator
from .categories import CategoryResolver
from .checkins import CheckinFetcher
from .document_builder import DocumentBuilder
from .foursquare import FoursquareApi
from .http import HttpClient
from .kml_exporter import KmlExporter
from .venues import VenueFetcher

__all__ = [
    "Authenticator",
    "CategoryResolver",
    "CheckinFetcher",
    "DocumentBuilder",
    "FoursquareApi",
    "HttpClient",
    "KmlExporter",
    "VenueFetcher",
]
