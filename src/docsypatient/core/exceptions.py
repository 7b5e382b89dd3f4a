"""
Exception handling for the Docsy patient client.

AuthError routes the user back to login, NetworkError covers every failed
backend call and StorageError wraps local persistence failures.
"""

from typing import Any, Dict, Optional


class DocsyPatientException(Exception):
    """Base exception class for the Docsy patient client."""

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


class ConfigurationError(DocsyPatientException):
    """Raised when there's a configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "CONFIG_ERROR", details)


class ValidationError(DocsyPatientException):
    """Raised when caller input is rejected before any request is sent."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthError(DocsyPatientException):
    """Raised when credentials are missing, invalid or expired."""

    def __init__(
        self,
        message: str = "Unauthorized",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, "AUTH_ERROR", details)


class NetworkError(DocsyPatientException):
    """Raised when a backend call fails.

    The status is kept for logging only; callers treat every NetworkError
    the same way.
    """

    def __init__(
        self,
        message: str = "Network error",
        status: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.status = status
        super().__init__(message, "NETWORK_ERROR", details)


class StorageError(DocsyPatientException):
    """Raised when the local key-value store cannot be read or written."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "STORAGE_ERROR", details)
