"""
Thin `requests.Session` wrapper shared by the listings API and the CEP client.

Every call goes through `HttpClient.request`, which applies the configured
timeout and headers, and converts transport/status failures into the typed
errors of `src.core.api.errors`.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from src.schemas.models import ApiSettings

from .errors import HttpStatusError, api_error_guard

logger = logging.getLogger(__name__)


class HttpClient:
    """Base class: one session, one base URL, one timeout policy."""

    def __init__(
        self,
        base_url: str,
        *,
        settings: ApiSettings,
        session: requests.Session | None = None,
        auth: bool = True,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.settings = settings
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({"User-Agent": settings.user_agent, "Accept": "application/json"})
        if auth and settings.auth_token:
            self.session.headers["Authorization"] = f"Bearer {settings.auth_token}"

    def url_for(self, path: str) -> str:
        """Join a relative API path onto the base URL; absolute URLs pass through untouched."""
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = self.url_for(path)
        kwargs.setdefault("timeout", self.settings.timeout_s)
        logger.debug("%s %s", method, url)
        with api_error_guard():
            resp = self.session.request(method, url, **kwargs)
            if resp.status_code >= 400:
                raise HttpStatusError(f"HTTP {resp.status_code} for {url}", status_code=resp.status_code, url=url)
            return resp

    def get_json(self, path: str, **kwargs: Any) -> Any:
        resp = self.request("GET", path, **kwargs)
        with api_error_guard():
            return resp.json()

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
