"""
Authentication endpoints: OTP login, password login and token refresh.
These calls go straight to the transport, never through the gateway.
"""

import logging
from typing import Any, Dict

from ...application.session_store import SessionStore
from ...core.constants import LOGIN_PATH, REFRESH_PATH, REQUEST_OTP_PATH, VERIFY_OTP_PATH
from ...core.exceptions import AuthError, NetworkError, ValidationError
from .transport import HttpTransport

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json"}


class AuthClient:
    """Obtains and renews credentials and persists them in the session store."""

    def __init__(self, transport: HttpTransport, store: SessionStore):
        self._transport = transport
        self._store = store

    async def request_otp(self, mobile: str) -> Dict[str, Any]:
        """Ask the backend to send an OTP to ``mobile``."""
        mobile = (mobile or "").strip()
        if not mobile:
            raise ValidationError("Mobile number is required")
        response = await self._transport.send(
            "POST", REQUEST_OTP_PATH, headers=_JSON_HEADERS, json_body={"mobile": mobile}
        )
        if not response.ok:
            raise NetworkError("Request OTP failed", status=response.status)
        logger.info("OTP requested")
        return response.body or {}

    async def verify_otp(self, mobile: str, otp: str) -> Dict[str, Any]:
        """Exchange an OTP for credentials; a token in the reply is persisted."""
        response = await self._transport.send(
            "POST",
            VERIFY_OTP_PATH,
            headers=_JSON_HEADERS,
            json_body={"mobile": mobile, "otp": otp},
        )
        if not response.ok:
            raise AuthError("Verify OTP failed", {"status": response.status})
        return await self._persist_token_response(response.body)

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        """Password login used by staff accounts on the same backend."""
        response = await self._transport.send(
            "POST",
            LOGIN_PATH,
            headers=_JSON_HEADERS,
            json_body={"email": email, "password": password},
        )
        if not response.ok:
            raise AuthError("Login failed", {"status": response.status})
        return await self._persist_token_response(response.body)

    async def refresh_tokens(self) -> Dict[str, Any]:
        """Trade the stored refresh token for a new access token."""
        refresh_token = await self._store.get_refresh_token()
        if not refresh_token:
            raise AuthError("No refresh token")
        response = await self._transport.send(
            "POST",
            REFRESH_PATH,
            headers=_JSON_HEADERS,
            json_body={"refreshToken": refresh_token},
        )
        if not response.ok:
            raise AuthError("Refresh failed", {"status": response.status})
        if not isinstance(response.body, dict) or not response.body.get("token"):
            raise AuthError("Refresh failed: no token in response", {"status": response.status})
        body = await self._persist_token_response(response.body)
        logger.info("Access token refreshed")
        return body

    async def _persist_token_response(self, body: Any) -> Dict[str, Any]:
        body = body if isinstance(body, dict) else {}
        if body.get("token"):
            await self._store.save_credentials(body)
        return body
