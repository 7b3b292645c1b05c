"""Formatting helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

DATE_PATTERN = "%Y-%m-%d"


def format_utc(timestamp: int) -> str:
    """Return an epoch timestamp as an RFC 3339 UTC string.

    Values outside the representable date range are returned as the raw
    integer.
    """

    try:
        moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        return str(timestamp)
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_date(value: str) -> datetime:
    """Parse a ``YYYY-MM-DD`` string into a UTC datetime."""

    return datetime.strptime(value.strip(), DATE_PATTERN).replace(tzinfo=timezone.utc)


def resolve_window(
    after: datetime | None,
    before: datetime | None,
    *,
    years: int,
    now: datetime | None = None,
) -> tuple[datetime, datetime]:
    """Fill in a missing export window bound.

    ``before`` defaults to ``now``; ``after`` defaults to ``years`` 365-day
    years before ``before``.
    """

    if before is None:
        before = now or datetime.now(timezone.utc)
    if after is None:
        after = before - timedelta(days=365 * years)
    return after, before
