"""WSGI entry point for the check-in export service.

Serves ``/health`` plus the ``/api`` blueprint: ``/api/preauth`` for the
authorization URL, ``/api/export`` for the OAuth redirect that queues an
export job, and ``/api/jobs/<id>`` (with ``/download``) for job status and the
finished KML. ``PORT`` selects the listening port and ``FLASK_ENV`` other than
``production`` turns on debug mode.
"""

from __future__ import annotations

import os

from checkin_kml import create_app

app = create_app()


if __name__ == "__main__":
    debug = os.environ.get("FLASK_ENV", "production") != "production"
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 8080)), debug=debug, use_reloader=debug)
