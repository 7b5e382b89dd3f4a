"""
Session lifecycle states.
"""

from enum import Enum


class SessionState(str, Enum):
    """Where a session stands between login and logout."""
    LOGGED_OUT = "logged_out"
    LOGGED_IN = "logged_in"            # Authenticated, no profile selected yet
    PROFILE_ACTIVE = "profile_active"  # Authenticated with an active profile
