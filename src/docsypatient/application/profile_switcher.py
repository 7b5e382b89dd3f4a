"""
Profile picker logic shared by the profile-selection screen and the
quick-switch bar.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, List, Optional, Tuple, Union

from ..domain.entities.profile import PatientProfile
from .session_store import SessionStore

logger = logging.getLogger(__name__)

OnChanged = Callable[[], Union[None, Awaitable[Any]]]


class ProfileSwitcher:
    """Lists the session's profiles and moves the active-profile pointer."""

    def __init__(self, store: SessionStore, on_changed: Optional[OnChanged] = None):
        self._store = store
        self._on_changed = on_changed

    async def load(self) -> Tuple[List[PatientProfile], Optional[PatientProfile]]:
        """Stored profiles and the active one, bootstrapping when none are stored."""
        profiles = await self._store.get_patient_profiles()
        if not profiles:
            boot = await self._store.bootstrap_profiles()
            return boot.profiles, boot.default_profile
        return profiles, await self._store.get_active_profile()

    async def find(self, profile_ref: str) -> Optional[PatientProfile]:
        """Look a stored profile up by id or display id."""
        for profile in await self._store.get_patient_profiles():
            if profile_ref in (profile.id, profile.display_id):
                return profile
        return None

    async def select(self, profile: Optional[PatientProfile]) -> Optional[PatientProfile]:
        await self._store.set_active_profile(profile)
        logger.info(f"Active profile set to {profile.id if profile else None}")
        if self._on_changed is not None:
            result = self._on_changed()
            if inspect.isawaitable(result):
                await result
        return profile
