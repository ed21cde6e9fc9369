from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Must agree with the backend's own slow-response threshold.
SLOW_THRESHOLD_MS = 800

VisualState = Literal["online", "slow", "offline"]
BannerKind = Literal["info", "ok", "err"]

BANNER_KINDS: frozenset[str] = frozenset({"info", "ok", "err"})

STATE_LABELS: dict[str, str] = {
    "online": "ONLINE",
    "slow": "SLOW",
    "offline": "OFFLINE",
}


class ProbeResult(BaseModel):
    """One probe outcome as reported by the backend (`statut` object)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    url: str = ""
    is_available: bool = Field(default=False, alias="est_disponible")
    http_code: Optional[int] = Field(default=None, alias="code_http")
    error_message: Optional[str] = Field(default=None, alias="message_erreur")
    latency_ms: Optional[float] = Field(default=None, alias="latence_ms")
    checked_at: Optional[str] = Field(default=None, alias="verifie_a")

    @field_validator("http_code")
    @classmethod
    def _zero_code_means_no_response(cls, value: Optional[int]) -> Optional[int]:
        if value == 0:
            return None
        return value

    @field_validator("error_message")
    @classmethod
    def _blank_message_is_absent(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    @field_validator("checked_at", mode="before")
    @classmethod
    def _non_string_timestamp_is_absent(cls, value):
        return value if isinstance(value, str) else None

    @field_validator("is_available", mode="before")
    @classmethod
    def _null_is_unavailable(cls, value):
        return False if value is None else value


def classify(result: ProbeResult, slow_threshold_ms: float = SLOW_THRESHOLD_MS) -> VisualState:
    if not result.is_available:
        return "offline"
    if result.latency_ms is not None and result.latency_ms >= slow_threshold_ms:
        return "slow"
    return "online"
