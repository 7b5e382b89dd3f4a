"""Session entities: credentials and the persisted session snapshot."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..enums.session_state import SessionState
from .profile import PatientProfile


@dataclass(frozen=True)
class Session:
    """Opaque bearer credentials."""

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)


@dataclass
class SessionSnapshot:
    """Everything the session store has persisted, read in one pass."""

    session: Session = field(default_factory=Session)
    user: Optional[Dict[str, Any]] = None
    profiles: List[PatientProfile] = field(default_factory=list)
    active_profile: Optional[PatientProfile] = None

    @property
    def state(self) -> SessionState:
        if not self.session.is_authenticated:
            return SessionState.LOGGED_OUT
        if self.active_profile is None:
            return SessionState.LOGGED_IN
        return SessionState.PROFILE_ACTIVE


@dataclass(frozen=True)
class ProfileBootstrap:
    """Result of fetching the session's profiles and picking a default."""

    profiles: List[PatientProfile]
    default_profile: Optional[PatientProfile]
