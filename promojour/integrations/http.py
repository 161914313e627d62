"""
Thin aiohttp wrappers used by every outbound integration.

The clients own one ``aiohttp.ClientSession`` for their lifetime and return
``HttpResponse`` objects instead of raising on HTTP errors, so each adapter
decides which status codes are terminal for its own state machine.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import aiohttp

from promojour import config
from promojour.utils import get_logger

logger = get_logger(__name__)


@dataclass
class HttpResponse:
    status: int
    data: Dict[str, Any] = field(default_factory=dict)
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class JsonHttpClient:
    """Async JSON client with a lazily created session."""

    def __init__(self, session: Optional[aiohttp.ClientSession] = None, *, timeout: Optional[float] = None):
        self._session = session
        self._owns_session = session is None
        self._timeout = aiohttp.ClientTimeout(total=timeout or config.HTTP_TIMEOUT_SECONDS)

    async def __aenter__(self) -> "JsonHttpClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()

    def _url(self, path_or_url: str) -> str:
        return path_or_url

    async def request(
        self,
        method: str,
        path_or_url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        data: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> HttpResponse:
        url = self._url(path_or_url)
        session = self._get_session()
        async with session.request(method, url, params=params, json=json, data=data, headers=headers) as resp:
            text = await resp.text()
            try:
                payload = await resp.json(content_type=None)
            except ValueError:
                payload = None
            if not isinstance(payload, dict):
                payload = {"raw": payload if payload is not None else text}
            if resp.status >= 400:
                logger.debug("Outbound request returned error status", method=method, url=url, status=resp.status)
            return HttpResponse(status=resp.status, data=payload, text=text)

    async def get(self, path_or_url: str, params: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> HttpResponse:
        return await self.request("GET", path_or_url, params=params, **kwargs)

    async def post(self, path_or_url: str, params: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> HttpResponse:
        return await self.request("POST", path_or_url, params=params, **kwargs)

    async def download(self, url: str) -> bytes:
        session = self._get_session()
        async with session.get(url) as resp:
            resp.raise_for_status()
            return await resp.read()


class GraphAPIClient(JsonHttpClient):
    """Meta Graph API client. Paths are relative to the versioned base URL."""

    def __init__(self, session: Optional[aiohttp.ClientSession] = None, *, base_url: Optional[str] = None, timeout: Optional[float] = None):
        super().__init__(session, timeout=timeout)
        self.base_url = (base_url or config.GRAPH_API_BASE_URL).rstrip("/")

    def _url(self, path_or_url: str) -> str:
        if path_or_url.startswith(("http://", "https://")):
            return path_or_url
        return f"{self.base_url}/{path_or_url.lstrip('/')}"

    async def upload(self, url: str, content: bytes, headers: Mapping[str, str]) -> HttpResponse:
        """Push raw bytes to a resumable upload URL (Facebook Reels)."""
        return await self.request("POST", url, data=content, headers=headers)


__all__ = ["HttpResponse", "JsonHttpClient", "GraphAPIClient"]
