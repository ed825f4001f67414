"""Time helpers."""

from __future__ import annotations

import datetime as dt


def utc_iso() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat(timespec="microseconds")


def utc_iso_after(previous: str) -> str:
    """Return the current UTC timestamp, nudged past ``previous`` if needed."""
    now = utc_iso()
    if now > previous:
        return now
    bumped = dt.datetime.fromisoformat(previous) + dt.timedelta(microseconds=1)
    return bumped.isoformat(timespec="microseconds")
