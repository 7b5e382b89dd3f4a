"""
OTP input handling: verification fires once, when the last digit arrives.
"""

from typing import Any, Awaitable, Callable, Optional

from ..core.constants import OTP_LENGTH

Verifier = Callable[[str], Awaitable[Any]]


class OtpEntry:
    """Collects OTP digits and calls ``verify`` exactly once per full code."""

    def __init__(self, verify: Verifier, length: int = OTP_LENGTH):
        self._verify = verify
        self.length = length
        self._digits = ""
        self._verifying = False

    @property
    def value(self) -> str:
        return self._digits

    @property
    def is_verifying(self) -> bool:
        return self._verifying

    async def type_digit(self, char: str) -> Optional[Any]:
        """Append one keystroke; non-digits and input during verification are ignored."""
        if self._verifying or len(char) != 1 or not char.isdigit():
            return None
        return await self.set_text(self._digits + char)

    async def set_text(self, text: str) -> Optional[Any]:
        """Replace the whole input, as a text field change does.

        Returns the verification result when the code became complete and
        None otherwise. The input is cleared after each attempt, whether it
        succeeded or raised.
        """
        if self._verifying:
            return None
        self._digits = "".join(ch for ch in text if ch.isdigit())[: self.length]
        if len(self._digits) < self.length:
            return None

        code = self._digits
        self._verifying = True
        try:
            return await self._verify(code)
        finally:
            self._verifying = False
            self._digits = ""
