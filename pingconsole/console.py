from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from pingconsole.clients.monitor_api import DEFAULT_RESULTS_LIMIT, MonitorApiClient
from pingconsole.config import settings
from pingconsole.errors import ConsoleError
from pingconsole.models import ProbeResult
from pingconsole.profile import DeploymentProfile, load_profile
from pingconsole.renderer import ResultRenderer
from pingconsole.scheduler import AutoPingScheduler

logger = logging.getLogger(__name__)


class PingConsole:
    """User actions of the console: load, manual test, clear, auto-ping."""

    def __init__(
        self,
        client: MonitorApiClient,
        *,
        renderer: ResultRenderer | None = None,
        scheduler: AutoPingScheduler | None = None,
        run_blocking: Callable[..., Awaitable[Any]] = asyncio.to_thread,
    ) -> None:
        self.client = client
        self.renderer = renderer or ResultRenderer()
        self.scheduler = scheduler or AutoPingScheduler(
            client, self.renderer, run_blocking=run_blocking
        )
        self._run_blocking = run_blocking

    @property
    def profile(self) -> DeploymentProfile:
        return self.client.profile

    async def load_recent(self, limit: int = DEFAULT_RESULTS_LIMIT) -> int:
        try:
            results = await self._run_blocking(self.client.fetch_recent, limit)
        except ConsoleError as exc:
            logger.warning("Initial result load failed: %s", exc)
            self.renderer.set_status(f"Unable to load results: {exc}", "err")
            return 0
        return self.renderer.load_all(results)

    async def test_url(self, url: str | None) -> ProbeResult | None:
        url = (url or "").strip()
        if not url:
            return None

        self.renderer.set_status("Checking...", "info")
        try:
            result = await self._run_blocking(self.client.submit_check, url)
        except ConsoleError as exc:
            self.renderer.set_status(str(exc), "err")
            return None

        self.renderer.append(result)
        self.renderer.set_status("Ping done.", "ok")
        return result

    async def clear(self) -> bool:
        if self.profile.clear_remote:
            try:
                await self._run_blocking(self.client.clear_all)
            except ConsoleError as exc:
                self.renderer.set_status(f"Unable to clear results: {exc}", "err")
                return False
        self.renderer.reset()
        self.renderer.set_status("Console cleared.", "info")
        return True

    def start_auto(self, url: str | None, interval_seconds: Any) -> bool:
        return self.scheduler.start(url, interval_seconds)

    def stop_auto(self) -> bool:
        return self.scheduler.stop()

    def snapshot(self) -> dict[str, Any]:
        snap = self.renderer.snapshot()
        snap["auto_ping"] = self.scheduler.snapshot()
        return snap

    async def shutdown(self) -> None:
        await self.scheduler.shutdown()


def build_console() -> PingConsole:
    client = MonitorApiClient(
        settings.API_BASE_URL,
        profile=load_profile(settings.PROFILE_PATH),
        timeout_s=settings.HTTP_TIMEOUT_SECONDS,
    )
    renderer = ResultRenderer(slow_threshold_ms=settings.SLOW_THRESHOLD_MS)
    return PingConsole(client, renderer=renderer)
