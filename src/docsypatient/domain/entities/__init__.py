"""
Domain entities package.
"""

from .page import ListState, Page, Pagination
from .profile import PatientProfile
from .session import ProfileBootstrap, Session, SessionSnapshot

__all__ = [
    "ListState",
    "Page",
    "Pagination",
    "PatientProfile",
    "ProfileBootstrap",
    "Session",
    "SessionSnapshot",
]
