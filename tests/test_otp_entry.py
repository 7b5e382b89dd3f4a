"""
OTP entry: verification fires once per complete code.
"""

import asyncio

import pytest

from docsypatient.application.otp_entry import OtpEntry
from docsypatient.core.exceptions import AuthError


class RecordingVerifier:
    def __init__(self, result=None, error=None):
        self.codes = []
        self.result = result if result is not None else {"token": "tok-1"}
        self.error = error

    async def __call__(self, code):
        self.codes.append(code)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.mark.asyncio
async def test_typing_digits_verifies_once_on_last_digit():
    verify = RecordingVerifier()
    entry = OtpEntry(verify)

    results = [await entry.type_digit(ch) for ch in "1234"]

    assert results[:3] == [None, None, None]
    assert results[3] == {"token": "tok-1"}
    assert verify.codes == ["1234"]
    assert entry.value == ""


@pytest.mark.asyncio
async def test_non_digits_are_ignored():
    verify = RecordingVerifier()
    entry = OtpEntry(verify)

    await entry.type_digit("a")
    await entry.type_digit("1")
    await entry.set_text("1-2 3")

    assert entry.value == "123"
    assert verify.codes == []


@pytest.mark.asyncio
async def test_pasted_code_is_truncated_and_verified_once():
    verify = RecordingVerifier()
    entry = OtpEntry(verify)

    await entry.set_text("123456")

    assert verify.codes == ["1234"]


@pytest.mark.asyncio
async def test_input_cleared_after_failed_attempt():
    verify = RecordingVerifier(error=AuthError("Invalid OTP"))
    entry = OtpEntry(verify)

    with pytest.raises(AuthError):
        await entry.set_text("9999")

    assert entry.value == ""
    assert entry.is_verifying is False


@pytest.mark.asyncio
async def test_input_during_verification_is_ignored():
    gate = asyncio.Event()
    codes = []

    async def slow_verify(code):
        codes.append(code)
        await gate.wait()
        return {"token": "tok-1"}

    entry = OtpEntry(slow_verify)
    pending = asyncio.ensure_future(entry.set_text("1234"))
    await asyncio.sleep(0)
    assert entry.is_verifying is True

    assert await entry.set_text("5678") is None
    assert await entry.type_digit("5") is None
    gate.set()
    await pending

    assert codes == ["1234"]


@pytest.mark.asyncio
async def test_custom_length():
    verify = RecordingVerifier()
    entry = OtpEntry(verify, length=6)

    await entry.set_text("1234")
    assert verify.codes == []
    await entry.set_text("123456")
    assert verify.codes == ["123456"]
