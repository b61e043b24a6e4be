"""
Connection settings for the hospital REST backend.
"""
from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_BASE_URL = "http://localhost:5000/api"


def _env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None:
        return default
    raw = raw.strip()
    return raw or default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from exc


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from exc


class ClientConfig(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    token: Optional[str] = None
    tenant_subdomain: Optional[str] = None
    timeout_seconds: float = Field(default=15.0, gt=0)
    max_workers: int = Field(default=8, ge=1, le=32)
    max_sessions: int = Field(default=256, ge=1)
    session_ttl_seconds: Optional[float] = Field(default=300.0, gt=0)

    @classmethod
    def from_env(cls) -> "ClientConfig":
        return cls(
            base_url=_env_str("HMS_API_BASE_URL", DEFAULT_BASE_URL),
            token=_env_str("HMS_API_TOKEN"),
            tenant_subdomain=_env_str("HMS_TENANT_SUBDOMAIN"),
            timeout_seconds=_env_float("HMS_API_TIMEOUT_SECONDS", 15.0),
            max_workers=_env_int("HISTORY_FETCH_WORKERS", 8),
            max_sessions=_env_int("HISTORY_MAX_SESSIONS", 256),
            session_ttl_seconds=_env_float("HISTORY_SESSION_TTL_SECONDS", 300.0),
        )
