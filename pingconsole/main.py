import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query
from fastapi.responses import PlainTextResponse

from pingconsole.api_schemas import (
    AutoPingRequest,
    CheckRequest,
    ConfigResponse,
    ConsoleSnapshotResponse,
    HealthResponse,
)
from pingconsole.config import settings
from pingconsole.console import build_console

logging.getLogger("pingconsole").setLevel(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)
console = build_console()


@asynccontextmanager
async def lifespan(_: FastAPI):
    loaded = await console.load_recent(settings.RESULTS_LIMIT)
    logger.info("Loaded %s recent result(s) from %s", loaded, settings.API_BASE_URL)
    yield
    await console.shutdown()


app = FastAPI(
    title="Ping Console",
    version="1.0.0",
    description=(
        "Client console for a URL-monitoring backend: submits probes, "
        "runs auto-ping schedules, and keeps a newest-first log of results."
    ),
    lifespan=lifespan,
)


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["system"],
    summary="Health Check",
    description="Liveness endpoint used by probes and orchestration.",
)
def health():
    return {"status": "ok"}


@app.get(
    "/config",
    response_model=ConfigResponse,
    tags=["system"],
    summary="Current Effective Config",
    description="Returns runtime config values and the backend deployment profile.",
)
def config():
    return {
        "api_base_url": settings.API_BASE_URL,
        "results_limit": settings.RESULTS_LIMIT,
        "slow_threshold_ms": settings.SLOW_THRESHOLD_MS,
        "http_timeout_seconds": settings.HTTP_TIMEOUT_SECONDS,
        "profile": console.profile.model_dump(),
    }


@app.get(
    "/api/console",
    response_model=ConsoleSnapshotResponse,
    tags=["console"],
    summary="Console State",
    description="Status banner, newest-first result log and auto-ping state.",
)
async def console_state():
    return console.snapshot()


@app.get(
    "/api/console/text",
    response_class=PlainTextResponse,
    tags=["console"],
    summary="Console As Text",
    description="Plain-text rendering of the banner and result log.",
)
async def console_text():
    return "\n".join(console.renderer.render_lines()) + "\n"


@app.post(
    "/api/console/check",
    response_model=ConsoleSnapshotResponse,
    tags=["console"],
    summary="Probe A URL Once",
    description="Submits one probe; the outcome lands at the top of the log or on the banner.",
)
async def console_check(request: CheckRequest):
    await console.test_url(request.url)
    return console.snapshot()


@app.post(
    "/api/console/reload",
    response_model=ConsoleSnapshotResponse,
    tags=["console"],
    summary="Reload Recent Results",
    description="Replaces the log with the backend's most recent results, in backend order.",
)
async def console_reload(
    limit: int = Query(
        default=settings.RESULTS_LIMIT, ge=1, le=500, description="Max number of results"
    )
):
    await console.load_recent(limit)
    return console.snapshot()


@app.post(
    "/api/console/clear",
    response_model=ConsoleSnapshotResponse,
    tags=["console"],
    summary="Clear Results",
    description="Clears the log, and the backend store when the profile enables it.",
)
async def console_clear():
    await console.clear()
    return console.snapshot()


@app.post(
    "/api/console/auto",
    response_model=ConsoleSnapshotResponse,
    tags=["auto-ping"],
    summary="Start Auto-Ping",
    description="Arms a repeating probe of one URL, replacing any running schedule.",
)
async def auto_ping_start(request: AutoPingRequest):
    console.start_auto(request.url, request.interval_s)
    return console.snapshot()


@app.delete(
    "/api/console/auto",
    response_model=ConsoleSnapshotResponse,
    tags=["auto-ping"],
    summary="Stop Auto-Ping",
    description="Cancels the repeating probe; a probe already in flight still lands.",
)
async def auto_ping_stop():
    console.stop_auto()
    return console.snapshot()
