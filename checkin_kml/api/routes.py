"""REST API blueprint."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request, send_file
from rq.exceptions import NoSuchJobError
from rq.job import Job

from ..config import EXPORT_CONFIG, STORAGE_PATHS
from ..core.exceptions import ExportError
from ..services.kml_exporter import KML_MIMETYPE
from ..utils.formatting import parse_date, resolve_window
from ..utils.io import safe_filename

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)

DOWNLOAD_NAME = "kml-export.kml"


@api_bp.get("/preauth")
def preauth():
    """Return the URL the user must visit to grant access."""

    return jsonify({"auth": _authenticator().authorization_url()})


@api_bp.get("/export")
def start_export():
    """OAuth redirect target: trade the code for a token and queue the export."""

    code = request.args.get("code")
    if not code:
        return jsonify({"error": "missing code query parameter"}), 400

    try:
        after = _date_arg("from")
        before = _date_arg("to")
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    after, before = resolve_window(after, before, years=EXPORT_CONFIG.default_window_years)

    try:
        token = _authenticator().exchange(code)
    except ExportError as exc:
        logger.warning("Authentication failed: %s", exc)
        return jsonify({"error": "authentication failed", "details": exc.as_dict()}), 502

    job_id = str(uuid.uuid4())
    created_at = datetime.now(timezone.utc).isoformat()
    job = _queue().enqueue(
        "checkin_kml.tasks.process_export",
        kwargs={
            "job_id": job_id,
            "token": token,
            "after": after.isoformat(),
            "before": before.isoformat(),
        },
        job_id=job_id,
        meta={"created_at": created_at},
    )

    response = {
        "job_id": job.id,
        "status": job.get_status(refresh=False),
        "created_at": created_at,
    }
    return jsonify(response), 202


@api_bp.get("/jobs/<job_id>")
def job_status(job_id: str):
    try:
        job = Job.fetch(job_id, connection=_connection())
    except NoSuchJobError:
        return jsonify({"error": "Job not found"}), 404

    payload: dict[str, object] = {
        "job_id": job.id,
        "status": job.get_status(refresh=True),
        "created_at": job.meta.get("created_at"),
    }

    if job.is_finished:
        payload["result"] = job.result or {}
        return jsonify(payload), 200
    if job.is_failed:
        payload["error"] = job.meta.get("error", job.exc_info)
        return jsonify(payload), 500

    payload["progress"] = job.meta.get("progress", {})
    return jsonify(payload), 200


@api_bp.get("/jobs/<job_id>/download")
def download_export(job_id: str):
    try:
        job = Job.fetch(job_id, connection=_connection())
    except NoSuchJobError:
        return jsonify({"error": "Job not found"}), 404

    if not job.is_finished:
        return jsonify({"error": "Export is not ready"}), 409

    generated = (job.result or {}).get("generated_files") or []
    if not generated:
        return jsonify({"error": "Export produced no file"}), 404

    path = STORAGE_PATHS.outputs / safe_filename(job_id) / safe_filename(generated[0])
    if not path.exists():
        return jsonify({"error": "Export file is missing"}), 404

    return send_file(
        path.resolve(),
        mimetype=KML_MIMETYPE,
        as_attachment=True,
        download_name=DOWNLOAD_NAME,
    )


def _date_arg(name: str) -> datetime | None:
    value = request.args.get(name)
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a YYYY-MM-DD date") from exc


def _authenticator():
    return current_app.extensions["authenticator"]


def _queue():
    return current_app.extensions["rq"]["queue"]


def _connection():
    return current_app.extensions["rq"]["connection"]
