from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from pingconsole.formatting import (
    format_clock,
    format_entry_line,
    format_http_code,
    format_latency,
)
from pingconsole.models import (
    BANNER_KINDS,
    SLOW_THRESHOLD_MS,
    STATE_LABELS,
    BannerKind,
    ProbeResult,
    VisualState,
    classify,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_TEXT = "No results yet."


@dataclass(frozen=True)
class LogEntry:
    result: ProbeResult
    state: VisualState
    sub_line: str | None = None

    @property
    def label(self) -> str:
        return STATE_LABELS[self.state]

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.result.url,
            "state": self.state,
            "label": self.label,
            "time": format_clock(self.result.checked_at),
            "latency": format_latency(self.result.latency_ms),
            "http_code": format_http_code(self.result.http_code),
            "sub_line": self.sub_line,
        }


@dataclass(frozen=True)
class Banner:
    text: str = ""
    kind: BannerKind = "info"


class ResultRenderer:
    """In-memory console log, newest entry first, plus a status banner.

    The log is the source of truth; ``snapshot()`` and ``render_lines()`` are
    pure projections of it.
    """

    def __init__(self, slow_threshold_ms: float = SLOW_THRESHOLD_MS) -> None:
        self.slow_threshold_ms = slow_threshold_ms
        self._entries: list[LogEntry] = []
        self._banner = Banner()

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    @property
    def banner(self) -> Banner:
        return self._banner

    @property
    def placeholder_visible(self) -> bool:
        return not self._entries

    def _build_entry(self, result: ProbeResult) -> LogEntry:
        state = classify(result, self.slow_threshold_ms)
        sub_line = None
        if not result.is_available and result.error_message:
            sub_line = result.error_message
        return LogEntry(result=result, state=state, sub_line=sub_line)

    def reset(self) -> None:
        self._entries.clear()

    def append(self, result: ProbeResult) -> LogEntry:
        entry = self._build_entry(result)
        self._entries.insert(0, entry)
        logger.debug("rendered %s as %s", result.url, entry.state)
        return entry

    def load_all(self, results: Iterable[ProbeResult]) -> int:
        # Results arrive newest first already; keep that order as-is.
        self._entries = [self._build_entry(result) for result in results]
        return len(self._entries)

    def set_status(self, text: str | None, kind: BannerKind = "info") -> None:
        if kind not in BANNER_KINDS:
            raise ValueError(f"Unknown banner kind: {kind!r}")
        self._banner = Banner(text=text or "", kind=kind)

    def snapshot(self) -> dict[str, Any]:
        return {
            "banner": {"text": self._banner.text, "kind": self._banner.kind},
            "placeholder": PLACEHOLDER_TEXT if self.placeholder_visible else None,
            "entries": [entry.to_dict() for entry in self._entries],
        }

    def render_lines(self) -> list[str]:
        lines: list[str] = []
        if self._banner.text:
            lines.append(f"[{self._banner.kind}] {self._banner.text}")
        if self.placeholder_visible:
            lines.append(PLACEHOLDER_TEXT)
            return lines

        for entry in self._entries:
            row = entry.to_dict()
            lines.append(
                format_entry_line(
                    row["time"], row["url"], row["label"], row["latency"], row["http_code"]
                )
            )
            if entry.sub_line:
                lines.append(f"    {entry.sub_line}")
        return lines
