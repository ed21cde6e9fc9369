from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, field_validator


class DeploymentProfile(BaseModel):
    """Backend endpoints the console talks to.

    The default is the `/api/verifier` deployment with server-side clearing.
    Older deployments expose `/api/check` and have no DELETE route; describe
    them with ``check_path: /api/check`` and ``clear_remote: false``.
    """

    check_path: str = "/api/verifier"
    results_path: str = "/api/resultats"
    clear_remote: bool = True

    @field_validator("check_path", "results_path")
    @classmethod
    def _absolute_path(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith("/"):
            raise ValueError(f"endpoint path must start with '/': {value!r}")
        return value


def load_profile(path: str | Path | None = None) -> DeploymentProfile:
    if path is None:
        return DeploymentProfile()

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing deployment profile at {path}")

    data = yaml.safe_load(path.read_text()) or {}
    return DeploymentProfile.model_validate(data)
