"""HTTP API for starting exports and collecting their results."""

from .app_factory import create_app

__all__ = ["create_app"]
