"""
Generic JSON client for the hospital REST backend.

Exposes GET/POST/PUT/PATCH/DELETE and maps transport, status and decoding
failures onto a small exception hierarchy so callers can decide what to
swallow.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from packages.client.config import ClientConfig

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for every failure talking to the backend."""

    def __init__(self, message: str, *, method: str = "", url: str = ""):
        super().__init__(message)
        self.method = method
        self.url = url


class ApiTransportError(ApiError):
    """Connection refused, DNS failure, timeout."""


class ApiStatusError(ApiError):
    def __init__(self, message: str, *, status_code: int, method: str = "", url: str = ""):
        super().__init__(message, method=method, url=url)
        self.status_code = status_code


class ApiDecodeError(ApiError):
    """Response body was not valid JSON."""


class ApiClient:
    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers["Accept"] = "application/json"
        if config.token:
            self.session.headers["Authorization"] = f"Bearer {config.token}"
        if config.tenant_subdomain:
            self.session.headers["X-Tenant-Subdomain"] = config.tenant_subdomain

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        url = self._url(path)
        try:
            resp = self.session.request(
                method,
                url,
                params=params,
                json=json,
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise ApiTransportError(f"{method} {url} failed: {exc}", method=method, url=url) from exc

        logger.debug("%s %s -> %s", method, url, resp.status_code)
        if resp.status_code >= 400:
            raise ApiStatusError(
                f"{method} {url} returned {resp.status_code}",
                status_code=resp.status_code,
                method=method,
                url=url,
            )
        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise ApiDecodeError(f"{method} {url} returned a non-JSON body", method=method, url=url) from exc

    def get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None) -> Any:
        return self.request("POST", path, json=json)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)

    def patch(self, path: str, json: Any = None) -> Any:
        return self.request("PATCH", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def close(self) -> None:
        self.session.close()
