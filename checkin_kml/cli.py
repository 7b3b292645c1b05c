"""Command line entry point for running exports locally."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Iterable, Optional, TextIO

from .config import EXPORT_CONFIG
from .core import ExportResult
from .core.exceptions import ExportError
from .pipelines import ExportPipeline
from .services import Authenticator, KmlExporter
from .tasks import export_filename
from .utils.formatting import parse_date, resolve_window
from .utils.progress import ProgressCallback, render_progress_bar

LOGGER = logging.getLogger(__name__)

TOKEN_ENV = "CHECKIN_KML_TOKEN"


def terminal_progress(stream: TextIO = sys.stderr) -> ProgressCallback:
    """Return a callback that redraws one progress line per stage."""

    current_stage = ""

    def report(stage: str, fetched: int, total: int) -> None:
        nonlocal current_stage
        if stage != current_stage:
            if current_stage:
                stream.write("\n")
            current_stage = stage
        stream.write(f"\r{stage}: {render_progress_bar(fetched, total)}")
        if total > 0 and fetched >= total:
            stream.write("\n")
            current_stage = ""
        stream.flush()

    return report


def run_export(
    token: str,
    *,
    output: Optional[Path] = None,
    after=None,
    before=None,
    pipeline: Optional[ExportPipeline] = None,
    exporter: Optional[KmlExporter] = None,
    progress: Optional[ProgressCallback] = None,
) -> tuple[Path, ExportResult]:
    """Export the user's history and write it to ``output``."""

    after, before = resolve_window(after, before, years=EXPORT_CONFIG.default_window_years)
    pipeline = pipeline or ExportPipeline.default()
    exporter = exporter or KmlExporter()

    result = pipeline.run(token, after=after, before=before, progress=progress)
    output = output or Path(export_filename(after, before))
    exporter.export(result.document, output)
    return output, result


def _date(value: str):
    try:
        return parse_date(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a YYYY-MM-DD date, got {value!r}") from exc


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Export check-in history to a KML document grouped by venue category.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("auth-url", help="Print the URL that grants this application access.")

    token = subparsers.add_parser("token", help="Exchange an authorization code for an access token.")
    token.add_argument("code", help="Authorization code from the OAuth redirect")

    export = subparsers.add_parser("export", help="Fetch the history and write a KML file.")
    export.add_argument(
        "--token",
        default=os.environ.get(TOKEN_ENV),
        help=f"Access token (defaults to ${TOKEN_ENV})",
    )
    export.add_argument("--from", dest="after", type=_date, help="Start date (YYYY-MM-DD)")
    export.add_argument("--to", dest="before", type=_date, help="End date (YYYY-MM-DD)")
    export.add_argument(
        "--output",
        type=Path,
        help="Output path (defaults to 'export-<from>-<to>.kml'; use .kmz to zip)",
    )
    export.add_argument(
        "--quiet",
        action="store_true",
        help="Do not draw progress bars.",
    )
    return parser


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = _build_argument_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    if args.command == "auth-url":
        print(Authenticator().authorization_url())
        return 0

    if args.command == "token":
        try:
            print(Authenticator().exchange(args.code))
        except ExportError as error:
            LOGGER.error("Authentication failed: %s", error)
            return 1
        return 0

    if args.command == "export":
        if not args.token:
            parser.error(f"an access token is required (--token or ${TOKEN_ENV})")
        try:
            output, result = run_export(
                args.token,
                output=args.output,
                after=args.after,
                before=args.before,
                progress=None if args.quiet else terminal_progress(),
            )
        except ExportError as error:
            LOGGER.error("Export failed: %s", error)
            return 1

        for key, value in result.stats.as_dict().items():
            LOGGER.info("%s: %s", key, value)
        LOGGER.info("Wrote %s", output)
        return 0

    parser.error("Unknown command")


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
