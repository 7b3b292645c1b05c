"""Top-level package for the check-in KML exporter."""

from .api.app_factory import create_app
from .pipelines.export_pipeline import ExportPipeline

__all__ = ["create_app", "ExportPipeline"]
