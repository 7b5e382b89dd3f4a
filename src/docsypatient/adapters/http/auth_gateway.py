"""
Authenticated request gateway.

Attaches the bearer token and active-profile headers to every request,
refreshes once on 401 and retries the original request once.
"""

import logging
from typing import Any, Dict, Optional

from ...application.session_store import SessionStore
from ...core.exceptions import AuthError, NetworkError
from .auth_client import AuthClient
from .transport import HttpResponse, HttpTransport

logger = logging.getLogger(__name__)


def normalize_response(body: Any) -> Any:
    """Unwrap a response body.

    Paginated bodies come back whole so the pagination block survives;
    otherwise a ``data`` envelope is unwrapped; anything else is returned
    as parsed.
    """
    if isinstance(body, dict):
        if "pagination" in body:
            return body
        if "data" in body:
            return body["data"]
    return body


class AuthGateway:
    """Fetch-with-auth for every profile-scoped backend call."""

    def __init__(self, transport: HttpTransport, store: SessionStore, auth_client: AuthClient):
        self._transport = transport
        self._store = store
        self._auth_client = auth_client

    async def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        headers.update(await self._store.get_context_headers())
        token = await self._store.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, str]],
        json_body: Any,
    ) -> HttpResponse:
        return await self._transport.send(
            method, path, headers=await self._headers(), params=params, json_body=json_body
        )

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, str]] = None,
        json_body: Any = None,
    ) -> Any:
        response = await self._send(method, path, params, json_body)

        if response.status == 401:
            logger.info(f"401 from {method} {path}, refreshing access token")
            try:
                await self._auth_client.refresh_tokens()
            except (AuthError, NetworkError) as e:
                logger.warning(f"Token refresh failed, clearing session: {e}")
                await self._store.logout()
                raise AuthError("Session expired", {"path": path}) from e

            response = await self._send(method, path, params, json_body)
            if response.status == 401:
                raise AuthError("Unauthorized after token refresh", {"path": path})

        if not response.ok:
            logger.error(f"Request failed: {method} {path} -> {response.status}")
            raise NetworkError(status=response.status)

        return normalize_response(response.body)

    async def get(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json_body: Any = None) -> Any:
        return await self.request("POST", path, json_body=json_body)

    async def put(self, path: str, json_body: Any = None) -> Any:
        return await self.request("PUT", path, json_body=json_body)
