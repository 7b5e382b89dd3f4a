"""
Domain enums package.
"""

from .resource import AppointmentStatus, ResourceType, is_cancellable
from .session_state import SessionState

__all__ = [
    "AppointmentStatus",
    "ResourceType",
    "SessionState",
    "is_cancellable",
]
