"""
HTTP adapters for the Docsy ERP backend.
"""

from .auth_client import AuthClient
from .auth_gateway import AuthGateway, normalize_response
from .transport import HttpResponse, HttpTransport

__all__ = [
    "AuthClient",
    "AuthGateway",
    "HttpResponse",
    "HttpTransport",
    "normalize_response",
]
