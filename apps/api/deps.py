"""
FastAPI dependencies shared by the history routes.
"""
from __future__ import annotations

from functools import lru_cache

from apps.history.session import SessionRegistry
from packages.client import ApiClient, ClientConfig


@lru_cache(maxsize=1)
def get_registry() -> SessionRegistry:
    """Process-wide session registry bound to the configured backend."""
    config = ClientConfig.from_env()
    return SessionRegistry(
        ApiClient(config),
        max_workers=config.max_workers,
        max_sessions=config.max_sessions,
        ttl_seconds=config.session_ttl_seconds,
    )
