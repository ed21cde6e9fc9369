import os
from dotenv import load_dotenv

load_dotenv()


def _optional_float(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return float(raw)


class Settings:
    API_BASE_URL: str = os.getenv("PINGCONSOLE_API_BASE_URL", "http://localhost:8080")
    PROFILE_PATH: str | None = os.getenv("PINGCONSOLE_PROFILE_PATH") or None
    RESULTS_LIMIT: int = int(os.getenv("PINGCONSOLE_RESULTS_LIMIT", 50))
    SLOW_THRESHOLD_MS: int = int(os.getenv("PINGCONSOLE_SLOW_THRESHOLD_MS", 800))
    HTTP_TIMEOUT_SECONDS: float | None = _optional_float(
        "PINGCONSOLE_HTTP_TIMEOUT_SECONDS"
    )
    LOG_LEVEL: str = os.getenv("PINGCONSOLE_LOG_LEVEL", "INFO").upper()


settings = Settings()
