"""RQ task definitions for asynchronous export jobs."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from rq import get_current_job

from .config import STORAGE_PATHS
from .core import ExportSummary
from .core.exceptions import ExportError
from .pipelines import ExportPipeline
from .services import KmlExporter
from .utils.formatting import DATE_PATTERN
from .utils.io import ensure_directory, safe_filename

logger = logging.getLogger(__name__)


def export_filename(after: datetime, before: datetime) -> str:
    return f"export-{after.strftime(DATE_PATTERN)}-{before.strftime(DATE_PATTERN)}.kml"


def process_export(*, job_id: str, token: str, after: str, before: str) -> dict:
    """Run one export for the given job and store the KML under its output folder."""

    job = get_current_job()
    window_after = datetime.fromisoformat(after)
    window_before = datetime.fromisoformat(before)
    created_at = datetime.now(timezone.utc)

    def on_progress(stage: str, fetched: int, total: int) -> None:
        if job:
            job.meta["progress"] = {"stage": stage, "fetched": fetched, "total": total}
            job.save_meta()

    pipeline = ExportPipeline.default()
    try:
        result = pipeline.run(
            token,
            after=window_after,
            before=window_before,
            progress=on_progress,
        )
    except ExportError as exc:
        logger.error("Export job %s failed: %s", job_id, exc)
        if job:
            job.meta["error"] = exc.as_dict()
            job.save_meta()
        raise

    output_dir = ensure_directory(STORAGE_PATHS.outputs / safe_filename(job_id))
    output_file = output_dir / export_filename(window_after, window_before)
    KmlExporter().export(result.document, output_file)
    logger.info("Job %s finished; generated %s", job_id, output_file.name)

    summary = ExportSummary(
        job_id=job_id,
        created_at=created_at,
        completed_at=datetime.now(timezone.utc),
        generated_files=[output_file.name],
        after=window_after,
        before=window_before,
        stats=result.stats,
    )
    return summary.as_dict()
