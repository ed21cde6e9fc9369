from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = Field(description="Health status")


class ProfileResponse(BaseModel):
    check_path: str
    results_path: str
    clear_remote: bool


class ConfigResponse(BaseModel):
    api_base_url: str
    results_limit: int = Field(ge=1)
    slow_threshold_ms: int
    http_timeout_seconds: float | None = None
    profile: ProfileResponse


class BannerResponse(BaseModel):
    text: str
    kind: Literal["info", "ok", "err"]


class LogEntryResponse(BaseModel):
    url: str
    state: Literal["online", "slow", "offline"]
    label: str
    time: str
    latency: str
    http_code: str
    sub_line: str | None = None


class AutoPingResponse(BaseModel):
    phase: Literal["idle", "running"]
    target_url: str | None = None
    interval_s: int | None = None
    in_flight: bool


class ConsoleSnapshotResponse(BaseModel):
    banner: BannerResponse
    placeholder: str | None = None
    entries: list[LogEntryResponse]
    auto_ping: AutoPingResponse


class CheckRequest(BaseModel):
    url: str = Field(default="", description="Address to probe once")


class AutoPingRequest(BaseModel):
    url: str = Field(default="", description="Address to probe repeatedly")
    interval_s: int | float | str = Field(
        default=10, description="Probe interval in whole seconds (>= 1)"
    )
