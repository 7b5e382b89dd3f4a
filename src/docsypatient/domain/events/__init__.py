"""
Domain events package.
"""

from .profile_events import ActiveProfileChanged, ProfileEventBus

__all__ = [
    "ActiveProfileChanged",
    "ProfileEventBus",
]
