from __future__ import annotations

import math
from datetime import datetime

PLACEHOLDER_DASH = "—"


def format_clock(checked_at: str | None) -> str:
    """Render an ISO-8601 timestamp as local ``HH:MM:SS``, or a dash."""
    if not checked_at:
        return PLACEHOLDER_DASH
    try:
        dt = datetime.fromisoformat(checked_at.strip())
        # Naive timestamps are taken as already local.
        if dt.tzinfo is not None:
            dt = dt.astimezone()
        return dt.strftime("%H:%M:%S")
    except (TypeError, ValueError, OverflowError, OSError):
        return PLACEHOLDER_DASH


def format_latency(latency_ms: float | None) -> str:
    if latency_ms is None or not math.isfinite(latency_ms):
        return f"{PLACEHOLDER_DASH} ms"
    if float(latency_ms).is_integer():
        return f"{int(latency_ms)} ms"
    return f"{latency_ms:.1f} ms"


def format_http_code(http_code: int | None) -> str:
    return PLACEHOLDER_DASH if http_code is None else str(http_code)


def format_entry_line(
    clock: str, url: str, label: str, latency: str, http_code: str
) -> str:
    return f"{clock:>8}  {label:<7}  {latency:>9}  {http_code:>3}  {url}"
