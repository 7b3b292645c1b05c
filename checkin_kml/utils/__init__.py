"""Utility helpers for the check-in exporter."""

from .formatting import format_utc, parse_date, resolve_window
from .io import ensure_directory, safe_filename
from .progress import ProgressCallback, render_progress_bar, report_progress

__all__ = [
    "format_utc",
    "parse_date",
    "resolve_window",
    "ensure_directory",
    "safe_filename",
    "ProgressCallback",
    "render_progress_bar",
    "report_progress",
]
