"""
Shared fixtures: in-memory session store and a fake Docsy ERP backend.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from docsypatient.adapters.storage import InMemoryKeyValueStore
from docsypatient.application.session_store import SessionStore
from docsypatient.core.config import ApiSettings, LoggingSettings, ProfileSettings, Settings, StorageSettings
from docsypatient.core.container import build_container
from docsypatient.domain.events import ProfileEventBus

PROFILES = [
    {"id": "p1", "name": "Asha Verma", "clinicId": "c1", "clinicName": "City Clinic", "displayId": "PT-001"},
    {"id": "p2", "name": "Ravi Verma", "clinicId": "c2", "clinicName": "Lake Clinic", "displayId": "PT-002"},
]


@dataclass
class RecordedRequest:
    method: str
    path: str
    query: Dict[str, str]
    authorization: Optional[str]
    headers: Dict[str, str]
    body: Any = None


@dataclass
class FakeBackend:
    """Tiny in-process stand-in for the Docsy ERP REST API."""

    valid_tokens: set = field(default_factory=lambda: {"tok-1"})
    refresh_map: Dict[str, str] = field(default_factory=lambda: {"ref-1": "tok-2"})
    profiles_payload: Dict[str, Any] = field(
        default_factory=lambda: {"profiles": PROFILES, "defaultProfileId": "p2"}
    )
    appointments: List[Dict[str, Any]] = field(
        default_factory=lambda: [
            {"id": f"a{i}", "status": "CONFIRMED", "doctor": "Dr. Rao"} for i in range(1, 13)
        ]
    )
    bills: List[Dict[str, Any]] = field(
        default_factory=lambda: [{"id": f"b{i}", "total": 100 * i} for i in range(1, 4)]
    )
    # When False, refreshed tokens are issued but still rejected
    accept_refreshed_tokens: bool = True
    # When set, refresh answers 200 with this body instead of issuing a token
    refresh_reply: Optional[Dict[str, Any]] = None
    requests: List[RecordedRequest] = field(default_factory=list)
    base_url: str = ""

    def calls_to(self, path: str) -> List[RecordedRequest]:
        return [r for r in self.requests if r.path == path]

    # ------------------------------------------------------------------

    def build_app(self) -> web.Application:
        @web.middleware
        async def record(request: web.Request, handler):
            body = None
            if request.can_read_body:
                body = await request.json()
            self.requests.append(
                RecordedRequest(
                    method=request.method,
                    path=request.path,
                    query=dict(request.query),
                    authorization=request.headers.get("Authorization"),
                    headers=dict(request.headers),
                    body=body,
                )
            )
            return await handler(request)

        app = web.Application(middlewares=[record])
        app.router.add_post("/api/auth/request-otp", self.request_otp)
        app.router.add_post("/api/auth/verify-otp", self.verify_otp)
        app.router.add_post("/api/auth/login", self.login)
        app.router.add_post("/api/auth/refresh", self.refresh)
        app.router.add_get("/api/auth/patient-profiles", self.patient_profiles)
        app.router.add_get("/api/appointments", self.list_appointments)
        app.router.add_get("/api/appointments/doctors", self.doctors)
        app.router.add_get("/api/appointments/{id}", self.get_appointment)
        app.router.add_put("/api/appointments/{id}/status", self.update_status)
        app.router.add_post("/api/appointments", self.book)
        app.router.add_get("/api/billing", self.list_bills)
        app.router.add_get("/api/prescriptions/{id}", self.get_prescription)
        app.router.add_get("/api/plain", self.plain)
        app.router.add_get("/api/broken", self.broken)
        app.router.add_get("/api/garbled", self.garbled)
        return app

    def _authorized(self, request: web.Request) -> bool:
        header = request.headers.get("Authorization", "")
        return header.startswith("Bearer ") and header[len("Bearer "):] in self.valid_tokens

    def _unauthorized(self) -> web.Response:
        return web.json_response({"error": "Unauthorized"}, status=401)

    async def request_otp(self, request: web.Request) -> web.Response:
        return web.json_response({"ok": True})

    async def verify_otp(self, request: web.Request) -> web.Response:
        body = await request.json()
        if body.get("otp") != "1234":
            return web.json_response({"error": "Invalid OTP"}, status=400)
        return web.json_response(
            {"token": "tok-1", "refreshToken": "ref-1", "user": {"mobile": body["mobile"]}}
        )

    async def login(self, request: web.Request) -> web.Response:
        body = await request.json()
        if body.get("password") != "secret":
            return web.json_response({"error": "Invalid credentials"}, status=401)
        return web.json_response({"token": "tok-1", "user": {"email": body["email"]}})

    async def refresh(self, request: web.Request) -> web.Response:
        if self.refresh_reply is not None:
            return web.json_response(self.refresh_reply)
        body = await request.json()
        new_token = self.refresh_map.get(body.get("refreshToken"))
        if new_token is None:
            return web.json_response({"error": "Invalid refresh token"}, status=401)
        if self.accept_refreshed_tokens:
            self.valid_tokens.add(new_token)
        return web.json_response({"token": new_token, "refreshToken": "ref-2"})

    async def patient_profiles(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return self._unauthorized()
        return web.json_response({"data": self.profiles_payload})

    async def list_appointments(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return self._unauthorized()
        page = int(request.query.get("page", "1"))
        limit = int(request.query.get("limit", "10"))
        start = (page - 1) * limit
        total = len(self.appointments)
        return web.json_response(
            {
                "data": self.appointments[start:start + limit],
                "pagination": {
                    "page": page,
                    "limit": limit,
                    "total": total,
                    "totalPages": -(-total // limit),
                },
            }
        )

    async def doctors(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return self._unauthorized()
        return web.json_response({"data": [{"id": "d1", "name": "Dr. Rao"}]})

    async def get_appointment(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return self._unauthorized()
        for item in self.appointments:
            if item["id"] == request.match_info["id"]:
                return web.json_response({"data": item})
        return web.json_response({"error": "Not found"}, status=404)

    async def update_status(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return self._unauthorized()
        body = await request.json()
        return web.json_response({"data": {"id": request.match_info["id"], "status": body["status"]}})

    async def book(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return self._unauthorized()
        body = await request.json()
        return web.json_response({"data": dict(body, id="a-new")}, status=201)

    async def list_bills(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return self._unauthorized()
        return web.json_response({"data": self.bills})

    async def get_prescription(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return self._unauthorized()
        return web.json_response({"data": {"id": request.match_info["id"], "medicines": []}})

    async def plain(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return self._unauthorized()
        return web.json_response({"hello": "world"})

    async def broken(self, request: web.Request) -> web.Response:
        return web.json_response({"error": "validation failed"}, status=422)

    async def garbled(self, request: web.Request) -> web.Response:
        return web.Response(
            body=b"\xff\xfe<html>oops</html>", status=500, content_type="text/html", charset="utf-8"
        )


@pytest.fixture
def storage():
    return InMemoryKeyValueStore()


@pytest.fixture
def event_bus():
    return ProfileEventBus()


@pytest.fixture
def store(storage, event_bus):
    return SessionStore(storage, event_bus=event_bus)


@pytest_asyncio.fixture
async def backend():
    fake = FakeBackend()
    server = TestServer(fake.build_app())
    await server.start_server()
    fake.base_url = f"http://{server.host}:{server.port}"
    try:
        yield fake
    finally:
        await server.close()


def make_settings(base_url: str = "http://localhost:3001", strict: bool = False) -> Settings:
    return Settings(
        app_env="testing",
        api=ApiSettings(base_url=base_url, timeout_seconds=5),
        storage=StorageSettings(backend="memory"),
        logging=LoggingSettings(level="DEBUG", format="text"),
        profile=ProfileSettings(strict_membership=strict),
    )


@pytest_asyncio.fixture
async def container(backend):
    c = build_container(make_settings(backend.base_url), storage=InMemoryKeyValueStore())
    try:
        yield c
    finally:
        await c.close()


@pytest_asyncio.fixture
async def logged_in(container):
    """Container whose session already holds valid credentials."""
    store = container.session_store
    await store.save_token("tok-1")
    await store.save_refresh_token("ref-1")
    return container
