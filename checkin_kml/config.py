"""Runtime configuration for the check-in exporter."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class StoragePaths:
    """Collection of filesystem paths used by the application."""

    outputs: Path


@dataclass(frozen=True)
class ApiConfig:
    """Endpoints and request settings for the remote check-in service."""

    base_url: str = "https://api.foursquare.com/v2"
    oauth_base_url: str = "https://foursquare.com/oauth2"
    version: str = "20130116"
    timeout: int = 15  # seconds


@dataclass(frozen=True)
class ClientConfig:
    """OAuth2 application credentials."""

    client_id: str = ""
    client_secret: str = ""
    redirect_url: str = "http://localhost:8080/api/export"


@dataclass(frozen=True)
class ExportConfig:
    """Defaults applied when a caller does not pass a time window."""

    default_window_years: int = 10


@dataclass(frozen=True)
class QueueConfig:
    """Configuration for the Redis-backed task queue."""

    redis_url: str = "redis://localhost:6379/0"
    queue_name: str = "checkin-kml"
    default_timeout: int = 60 * 30  # seconds


API_CONFIG = ApiConfig(
    base_url=os.environ.get("CHECKIN_KML_API_URL", ApiConfig.base_url),
    oauth_base_url=os.environ.get("CHECKIN_KML_OAUTH_URL", ApiConfig.oauth_base_url),
    version=os.environ.get("CHECKIN_KML_API_VERSION", ApiConfig.version),
    timeout=int(os.environ.get("CHECKIN_KML_API_TIMEOUT", ApiConfig.timeout)),
)
CLIENT_CONFIG = ClientConfig(
    client_id=os.environ.get("CHECKIN_KML_CLIENT_ID", ClientConfig.client_id),
    client_secret=os.environ.get("CHECKIN_KML_CLIENT_SECRET", ClientConfig.client_secret),
    redirect_url=os.environ.get("CHECKIN_KML_REDIRECT_URL", ClientConfig.redirect_url),
)
EXPORT_CONFIG = ExportConfig(
    default_window_years=int(
        os.environ.get("CHECKIN_KML_WINDOW_YEARS", ExportConfig.default_window_years)
    ),
)
STORAGE_PATHS = StoragePaths(
    outputs=Path(os.environ.get("CHECKIN_KML_OUTPUTS", "outputs")),
)
QUEUE_CONFIG = QueueConfig(
    redis_url=os.environ.get("CHECKIN_KML_REDIS_URL", QueueConfig.redis_url),
    queue_name=os.environ.get("CHECKIN_KML_QUEUE", QueueConfig.queue_name),
    default_timeout=int(
        os.environ.get("CHECKIN_KML_QUEUE_TIMEOUT", QueueConfig.default_timeout)
    ),
)
