"""
aiohttp transport shared by the auth client and the authenticated gateway.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import aiohttp

from ...core.config import ApiSettings
from ...core.exceptions import NetworkError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    """Status plus parsed JSON body (None for an empty body)."""

    status: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class HttpTransport:
    """Owns one aiohttp session and sends JSON requests to the backend."""

    def __init__(self, settings: ApiSettings, session: Optional[aiohttp.ClientSession] = None):
        self.base_url = settings.base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=settings.timeout_seconds)
        self._session = session
        self._owns_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create the client session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def send(
        self,
        method: str,
        path: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
        json_body: Any = None,
    ) -> HttpResponse:
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url} params={params or {}}")
        try:
            async with self.session.request(
                method, url, headers=headers, params=params, json=json_body
            ) as response:
                text = await response.text(errors="replace")
                status = response.status
        except asyncio.TimeoutError as e:
            logger.error(f"Timeout calling {method} {path}")
            raise NetworkError(f"Request timed out: {method} {path}") from e
        except aiohttp.ClientError as e:
            logger.error(f"Transport error calling {method} {path}: {e}")
            raise NetworkError(f"Request failed: {method} {path}") from e

        if not text:
            return HttpResponse(status=status, body=None)
        try:
            body = json.loads(text)
        except json.JSONDecodeError:
            if 200 <= status < 300:
                raise NetworkError("Response body is not valid JSON", status=status)
            # Error pages are often HTML; the status is what matters
            body = text
        return HttpResponse(status=status, body=body)

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
