from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Literal

from pingconsole.clients.monitor_api import MonitorApiClient
from pingconsole.errors import ConsoleError
from pingconsole.renderer import ResultRenderer

logger = logging.getLogger(__name__)

SchedulerPhase = Literal["idle", "running"]

MSG_URL_REQUIRED = "Enter a URL first."
MSG_INVALID_FREQUENCY = "Invalid frequency. Enter a number >= 1."
MSG_STOPPED = "Auto-ping stopped."


def parse_interval(value: Any) -> int | None:
    """Return a whole number of seconds >= 1, or None if ``value`` is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        value = int(value)
    if not isinstance(value, int) or value < 1:
        return None
    return value


@dataclass
class SchedulerState:
    timer: asyncio.Task
    target_url: str
    interval_s: int


class AutoPingScheduler:
    """Repeats probes against one URL at a fixed interval.

    Idle/Running is decided by ``state``; ``in_flight`` guards the probe
    itself. A tick that lands while a probe is outstanding is dropped.
    The in-flight flag belongs to the scheduler, not to a run, so restarting
    while a probe is outstanding still cannot overlap it.
    """

    def __init__(
        self,
        client: MonitorApiClient,
        renderer: ResultRenderer,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        run_blocking: Callable[..., Awaitable[Any]] = asyncio.to_thread,
    ) -> None:
        self._client = client
        self._renderer = renderer
        self._sleep = sleep
        self._run_blocking = run_blocking
        self._state: SchedulerState | None = None
        self._in_flight = False
        self._probe_task: asyncio.Task | None = None

    @property
    def phase(self) -> SchedulerPhase:
        return "running" if self._state is not None else "idle"

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def state(self) -> SchedulerState | None:
        return self._state

    def start(self, url: str | None, interval_seconds: Any) -> bool:
        url = (url or "").strip()
        if not url:
            self._renderer.set_status(MSG_URL_REQUIRED, "info")
            return False
        interval_s = parse_interval(interval_seconds)
        if interval_s is None:
            self._renderer.set_status(MSG_INVALID_FREQUENCY, "err")
            return False

        self._cancel_timer()
        timer = asyncio.get_running_loop().create_task(self._run(url, interval_s))
        self._state = SchedulerState(timer=timer, target_url=url, interval_s=interval_s)
        self._renderer.set_status(f"Auto-ping enabled every {interval_s}s", "ok")
        logger.info("Auto-ping started for %s every %ss", url, interval_s)
        return True

    def stop(self) -> bool:
        if self._state is None:
            return False
        url = self._state.target_url
        self._cancel_timer()
        self._renderer.set_status(MSG_STOPPED, "info")
        logger.info("Auto-ping stopped for %s", url)
        return True

    def _cancel_timer(self) -> None:
        if self._state is not None:
            self._state.timer.cancel()
            self._state = None

    async def _run(self, url: str, interval_s: int) -> None:
        while True:
            await self._sleep(interval_s)
            self._tick(url)

    def _tick(self, url: str) -> None:
        if self._in_flight:
            logger.debug("Skipping tick for %s: probe still in flight", url)
            return
        self._in_flight = True
        logger.debug("Tick: probing %s", url)
        self._probe_task = asyncio.get_running_loop().create_task(self._probe(url))

    async def _probe(self, url: str) -> None:
        try:
            result = await self._run_blocking(self._client.submit_check, url)
        except ConsoleError as exc:
            # A failed probe never stops the schedule.
            self._renderer.set_status(str(exc), "err")
        else:
            self._renderer.append(result)
        finally:
            self._in_flight = False

    def snapshot(self) -> dict[str, Any]:
        return {
            "phase": self.phase,
            "target_url": self._state.target_url if self._state else None,
            "interval_s": self._state.interval_s if self._state else None,
            "in_flight": self._in_flight,
        }

    async def shutdown(self) -> None:
        """Cancel the timer and wait for an outstanding probe to land."""
        self._cancel_timer()
        if self._probe_task is not None and not self._probe_task.done():
            await asyncio.gather(self._probe_task, return_exceptions=True)
