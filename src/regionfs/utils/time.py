"""Time helpers."""

from __future__ import annotations

import datetime as dt


def iso_from_ts(ts: float) -> str:
    return dt.datetime.fromtimestamp(ts, dt.UTC).isoformat()
