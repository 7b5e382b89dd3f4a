"""
Session and patient-profile store.

Single source of truth for who is acting now: credentials, the user record,
the profile set linked to the login and the active-profile pointer. All of
it lives in a KeyValueStore so it survives restarts.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from ..core.constants import (
    ACTIVE_PROFILE_KEY,
    CLINIC_HEADER,
    PROFILE_HEADER,
    PROFILES_KEY,
    REFRESH_KEY,
    SESSION_KEYS,
    TOKEN_KEY,
    USER_KEY,
)
from ..core.exceptions import AuthError, ConfigurationError, StorageError
from ..domain.entities.profile import PatientProfile
from ..domain.entities.session import ProfileBootstrap, Session, SessionSnapshot
from ..domain.enums.session_state import SessionState
from ..domain.errors import InvalidProfileDataError, ProfileNotInSessionError
from ..domain.events import ActiveProfileChanged, ProfileEventBus
from .ports.key_value_store import KeyValueStore
from .ports.profile_directory import ProfileDirectory

logger = logging.getLogger(__name__)


class SessionStore:
    """Persisted session state shared by every screen."""

    def __init__(
        self,
        storage: KeyValueStore,
        event_bus: Optional[ProfileEventBus] = None,
        profile_directory: Optional[ProfileDirectory] = None,
        key_prefix: str = "docclinic_",
        strict_membership: bool = False,
    ):
        self._storage = storage
        self.event_bus = event_bus or ProfileEventBus()
        self.profile_directory = profile_directory
        self._key_prefix = key_prefix
        self._strict_membership = strict_membership

    def _key(self, name: str) -> str:
        return f"{self._key_prefix}{name}"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def init(self) -> SessionSnapshot:
        """Read every persisted key once, typically at app start."""
        snapshot = SessionSnapshot(
            session=Session(
                access_token=await self.get_token(),
                refresh_token=await self.get_refresh_token(),
            ),
            user=await self.get_user(),
            profiles=await self.get_patient_profiles(),
            active_profile=await self.get_active_profile(),
        )
        logger.info(
            f"Session loaded: state={snapshot.state.value}, profiles={len(snapshot.profiles)}"
        )
        return snapshot

    async def get_state(self) -> SessionState:
        if not await self.get_token():
            return SessionState.LOGGED_OUT
        if await self.get_active_profile() is None:
            return SessionState.LOGGED_IN
        return SessionState.PROFILE_ACTIVE

    async def logout(self) -> None:
        """Clear credentials, user record, profile set and active profile.

        Everything goes in one storage call so file-backed stores replace
        their state in a single write.
        """
        previous = await self._read_active_profile_quietly()
        await self._storage.remove_many([self._key(name) for name in SESSION_KEYS])
        logger.info("Session cleared")
        if previous is not None:
            await self.event_bus.publish(ActiveProfileChanged(previous=previous, current=None))

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    async def get_token(self) -> Optional[str]:
        return await self._storage.get(self._key(TOKEN_KEY))

    async def save_token(self, token: str) -> None:
        await self._storage.set(self._key(TOKEN_KEY), token)

    async def get_refresh_token(self) -> Optional[str]:
        return await self._storage.get(self._key(REFRESH_KEY))

    async def save_refresh_token(self, token: str) -> None:
        await self._storage.set(self._key(REFRESH_KEY), token)

    async def get_session(self) -> Session:
        return Session(
            access_token=await self.get_token(),
            refresh_token=await self.get_refresh_token(),
        )

    async def save_credentials(self, payload: Dict[str, Any]) -> None:
        """Persist a token response: token, optional refresh token and user."""
        await self.save_token(payload["token"])
        if payload.get("refreshToken"):
            await self.save_refresh_token(payload["refreshToken"])
        if payload.get("user"):
            await self.save_user(payload["user"])

    # ------------------------------------------------------------------
    # User record
    # ------------------------------------------------------------------

    async def save_user(self, user: Dict[str, Any]) -> None:
        await self._storage.set(self._key(USER_KEY), json.dumps(user))

    async def get_user(self) -> Optional[Dict[str, Any]]:
        return self._decode(await self._storage.get(self._key(USER_KEY)), USER_KEY)

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    async def get_patient_profiles(self) -> List[PatientProfile]:
        raw = self._decode(await self._storage.get(self._key(PROFILES_KEY)), PROFILES_KEY)
        if not raw:
            return []
        return [PatientProfile.from_dict(item) for item in raw]

    async def save_patient_profiles(self, profiles: List[PatientProfile]) -> None:
        await self._storage.set(
            self._key(PROFILES_KEY), json.dumps([p.to_dict() for p in profiles])
        )

    async def bootstrap_profiles(self) -> ProfileBootstrap:
        """Fetch the account's profiles and pick a default active profile.

        Default is the server-declared ``defaultProfileId``, else the first
        profile in server order, else none.
        """
        if not await self.get_token():
            raise AuthError("Cannot load patient profiles without an access token")
        if self.profile_directory is None:
            raise ConfigurationError("No profile directory configured for the session store")

        payload = await self.profile_directory.get_patient_profiles()
        profiles = _parse_profiles(payload)
        default_id = payload.get("defaultProfileId") if isinstance(payload, dict) else None

        default_profile = None
        if default_id is not None:
            default_profile = next((p for p in profiles if p.id == str(default_id)), None)
        if default_profile is None and profiles:
            default_profile = profiles[0]

        await self.save_patient_profiles(profiles)
        await self._write_active_profile(default_profile)
        logger.info(
            f"Bootstrapped {len(profiles)} patient profiles, "
            f"default={default_profile.id if default_profile else None}"
        )
        return ProfileBootstrap(profiles=profiles, default_profile=default_profile)

    async def set_active_profile(self, profile: Optional[PatientProfile]) -> None:
        """Point the session at ``profile``; None clears the selection.

        Membership in the stored profile set is only checked in strict mode.
        """
        if profile is not None and self._strict_membership:
            known_ids = {p.id for p in await self.get_patient_profiles()}
            if profile.id not in known_ids:
                raise ProfileNotInSessionError(profile.id)
        await self._write_active_profile(profile)

    async def get_active_profile(self) -> Optional[PatientProfile]:
        raw = self._decode(
            await self._storage.get(self._key(ACTIVE_PROFILE_KEY)), ACTIVE_PROFILE_KEY
        )
        if not raw:
            return None
        return PatientProfile.from_dict(raw)

    async def get_context_headers(self) -> Dict[str, str]:
        """Headers scoping a request to the active profile and its clinic."""
        active = await self.get_active_profile()
        headers: Dict[str, str] = {}
        if active is None:
            return headers
        if active.clinic_id:
            headers[CLINIC_HEADER] = active.clinic_id
        headers[PROFILE_HEADER] = active.id
        return headers

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _write_active_profile(self, profile: Optional[PatientProfile]) -> None:
        previous = await self._read_active_profile_quietly()
        if profile is None:
            await self._storage.delete(self._key(ACTIVE_PROFILE_KEY))
        else:
            await self._storage.set(self._key(ACTIVE_PROFILE_KEY), json.dumps(profile.to_dict()))

        previous_id = previous.id if previous else None
        current_id = profile.id if profile else None
        if previous_id != current_id:
            await self.event_bus.publish(ActiveProfileChanged(previous=previous, current=profile))

    async def _read_active_profile_quietly(self) -> Optional[PatientProfile]:
        """Read the current pointer for change events; a corrupt entry counts as none."""
        try:
            return await self.get_active_profile()
        except (StorageError, InvalidProfileDataError):
            logger.warning("Stored active profile is unreadable; treating it as unset")
            return None

    def _decode(self, value: Optional[str], name: str) -> Any:
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise StorageError(
                f"Stored value for '{name}' is not valid JSON", {"key": self._key(name)}
            ) from e


def _parse_profiles(payload: Any) -> List[PatientProfile]:
    if isinstance(payload, dict):
        raw = payload.get("profiles") or []
    elif isinstance(payload, list):
        raw = payload
    else:
        raw = []
    return [PatientProfile.from_dict(item) for item in raw]
