"""
CLI commands run against the fake backend with an in-memory session.
"""

import json

import pytest

from docsypatient.cli import EXIT_AUTH, EXIT_FAILURE, EXIT_OK, build_parser, run
from docsypatient.core.container import build_container

from conftest import make_settings


async def invoke(backend, storage, *argv):
    args = build_parser().parse_args(list(argv))
    container = build_container(make_settings(backend.base_url), storage=storage)
    return await run(args, container)


@pytest.mark.asyncio
async def test_login_select_profile_and_list(backend, storage, capsys):
    assert await invoke(backend, storage, "otp-request", "9876543210") == EXIT_OK
    assert await invoke(backend, storage, "otp-verify", "9876543210", "1234") == EXIT_OK
    out = capsys.readouterr().out
    assert "2 patient profile(s)" in out
    assert "Ravi Verma" in out

    assert await invoke(backend, storage, "use-profile", "PT-001") == EXIT_OK
    capsys.readouterr()

    assert await invoke(backend, storage, "list", "appointments", "--pages", "2") == EXIT_OK
    items = json.loads(capsys.readouterr().out)
    assert len(items) == 12
    assert backend.calls_to("/api/appointments")[-1].query["patientProfileId"] == "p1"


@pytest.mark.asyncio
async def test_profiles_marks_active(backend, storage, capsys):
    await invoke(backend, storage, "otp-verify", "9876543210", "1234")
    capsys.readouterr()

    assert await invoke(backend, storage, "profiles") == EXIT_OK

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("  p1")
    assert lines[1].startswith("* p2")


@pytest.mark.asyncio
async def test_wrong_otp_is_auth_failure(backend, storage):
    assert await invoke(backend, storage, "otp-verify", "9876543210", "0000") == EXIT_AUTH


@pytest.mark.asyncio
async def test_short_otp_rejected_without_request(backend, storage):
    assert await invoke(backend, storage, "otp-verify", "9876543210", "12") == EXIT_FAILURE
    assert backend.calls_to("/api/auth/verify-otp") == []


@pytest.mark.asyncio
async def test_list_requires_active_profile(backend, storage):
    assert await invoke(backend, storage, "list", "bills") == EXIT_FAILURE


@pytest.mark.asyncio
async def test_cancel_refuses_final_appointment(backend, storage):
    await invoke(backend, storage, "otp-verify", "9876543210", "1234")
    backend.appointments[0]["status"] = "COMPLETED"

    assert await invoke(backend, storage, "cancel", "a1") == EXIT_FAILURE
    assert await invoke(backend, storage, "cancel", "a2") == EXIT_OK
    assert backend.calls_to("/api/appointments/a2/status")[0].body == {"status": "CANCELLED"}


@pytest.mark.asyncio
async def test_logout_then_status(backend, storage, capsys):
    await invoke(backend, storage, "otp-verify", "9876543210", "1234")
    assert await invoke(backend, storage, "logout") == EXIT_OK
    capsys.readouterr()

    assert await invoke(backend, storage, "status") == EXIT_OK

    assert "State: logged_out" in capsys.readouterr().out
    assert storage.snapshot() == {}


@pytest.mark.asyncio
async def test_expired_session_exits_with_auth_code(backend, storage):
    await storage.set("docclinic_token", "expired")

    assert await invoke(backend, storage, "show", "appointments", "a1") == EXIT_AUTH
    assert await storage.get("docclinic_token") is None


@pytest.mark.asyncio
@pytest.mark.parametrize("otp", ["12345", "123456", "12a4"])
async def test_otp_of_wrong_length_rejected_without_request(backend, storage, otp):
    assert await invoke(backend, storage, "otp-verify", "9876543210", otp) == EXIT_FAILURE
    assert backend.calls_to("/api/auth/verify-otp") == []
    assert await storage.get("docclinic_token") is None


@pytest.mark.asyncio
async def test_seo_without_built_index_fails_cleanly(backend, storage, tmp_path, capsys):
    missing = tmp_path / "no-build"

    assert await invoke(backend, storage, "seo", "--dist", str(missing)) == EXIT_FAILURE

    assert "cannot generate SEO pages" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_seo_writes_pages(backend, storage, tmp_path, capsys):
    (tmp_path / "index.html").write_text(
        '<html><head><title>x</title><meta name="description" content="y" /></head></html>'
    )

    assert await invoke(backend, storage, "seo", "--dist", str(tmp_path)) == EXIT_OK

    assert len(capsys.readouterr().out.splitlines()) == 3
