"""
Domain-specific error types for profile rule violations.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class InvalidProfileDataError(DomainError):
    """Profile payload is missing required data."""

    def __init__(self, field: str, value: Any) -> None:
        message = f"Invalid patient profile data. Field: {field}, Value: {value!r}"
        super().__init__(
            message, "INVALID_PROFILE_DATA", {"field": field, "value": value}
        )


class ProfileNotInSessionError(DomainError):
    """Active profile is not part of the session's profile set."""

    def __init__(self, profile_id: str) -> None:
        message = f"Patient profile '{profile_id}' is not linked to this session"
        super().__init__(message, "PROFILE_NOT_IN_SESSION", {"profile_id": profile_id})
