"""
Profile-scoped calls to the patient endpoints.

Every scoped call reads the active profile when it is made, so a profile
switch takes effect on the very next request.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from ...application.ports.profile_directory import ProfileDirectory
from ...application.session_store import SessionStore
from ...core.constants import (
    APPOINTMENTS_PATH,
    DEFAULT_PAGE_SIZE,
    DOCTORS_PATH,
    PATIENT_PROFILES_PATH,
)
from ...core.exceptions import ValidationError
from ...domain.entities.profile import PatientProfile
from ...domain.enums.resource import AppointmentStatus, ResourceType
from ..http.auth_gateway import AuthGateway

logger = logging.getLogger(__name__)

PageFetcher = Callable[[int, int], Awaitable[Any]]

_BOOKING_REQUIRED = ("doctorId", "date", "timeSlot")


class PatientApiClient(ProfileDirectory):
    """Appointments, bills, prescriptions and profiles for the active patient."""

    def __init__(self, gateway: AuthGateway, store: SessionStore):
        self._gateway = gateway
        self._store = store

    # ------------------------------------------------------------------
    # Scoping helpers
    # ------------------------------------------------------------------

    async def _scope_params(self, include_profile: bool = True) -> Dict[str, str]:
        active = await self._store.get_active_profile()
        params: Dict[str, str] = {}
        if active is None:
            return params
        if active.clinic_id:
            params["clinicId"] = str(active.clinic_id)
        if include_profile:
            params["patientProfileId"] = str(active.id)
        return params

    async def _list_params(self, page: int, limit: int) -> Dict[str, str]:
        params = {"patientId": "me", "page": str(page), "limit": str(limit)}
        params.update(await self._scope_params())
        return params

    async def list_resource(
        self, resource: ResourceType, page: int = 1, limit: int = DEFAULT_PAGE_SIZE
    ) -> Any:
        return await self._gateway.get(resource.path, params=await self._list_params(page, limit))

    async def get_resource(self, resource: ResourceType, item_id: Any) -> Any:
        return await self._gateway.get(
            f"{resource.path}/{item_id}", params=await self._scope_params() or None
        )

    def page_fetcher(self, resource: ResourceType) -> PageFetcher:
        """Coroutine function ``(page, limit)`` used by list loaders."""

        async def fetch(page: int, limit: int) -> Any:
            return await self.list_resource(resource, page, limit)

        return fetch

    # ------------------------------------------------------------------
    # Appointments
    # ------------------------------------------------------------------

    async def list_appointments(self, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> Any:
        return await self.list_resource(ResourceType.APPOINTMENTS, page, limit)

    async def get_appointment(self, appointment_id: Any) -> Any:
        return await self.get_resource(ResourceType.APPOINTMENTS, appointment_id)

    async def update_appointment_status(self, appointment_id: Any, status: Any) -> Any:
        if not isinstance(status, AppointmentStatus):
            try:
                status = AppointmentStatus(str(status).upper())
            except ValueError as e:
                raise ValidationError(f"Unknown appointment status: {status}") from e
        status_value = status.value
        return await self._gateway.put(
            f"{APPOINTMENTS_PATH}/{appointment_id}/status", json_body={"status": status_value}
        )

    async def cancel_appointment(self, appointment_id: Any) -> Any:
        logger.info(f"Cancelling appointment {appointment_id}")
        return await self.update_appointment_status(appointment_id, AppointmentStatus.CANCELLED)

    async def get_doctors(self) -> Any:
        params = await self._scope_params(include_profile=False)
        return await self._gateway.get(DOCTORS_PATH, params=params or None)

    async def book_appointment(self, payload: Dict[str, Any]) -> Any:
        """Book for the active profile.

        ``payload`` carries ``doctorId``, ``date``, ``timeSlot`` and optionally
        ``type``, ``symptoms`` and ``patientId``.
        """
        missing = [key for key in _BOOKING_REQUIRED if not payload.get(key)]
        if missing:
            raise ValidationError(
                f"Missing booking fields: {', '.join(missing)}", {"missing": missing}
            )
        body = dict(payload)
        active = await self._store.get_active_profile()
        if active is not None:
            if active.clinic_id:
                body["clinicId"] = active.clinic_id
            body["patientProfileId"] = active.id
        return await self._gateway.post(APPOINTMENTS_PATH, json_body=body)

    # ------------------------------------------------------------------
    # Bills and prescriptions
    # ------------------------------------------------------------------

    async def list_bills(self, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> Any:
        return await self.list_resource(ResourceType.BILLS, page, limit)

    async def get_bill(self, bill_id: Any) -> Any:
        return await self.get_resource(ResourceType.BILLS, bill_id)

    async def list_prescriptions(self, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> Any:
        return await self.list_resource(ResourceType.PRESCRIPTIONS, page, limit)

    async def get_prescription(self, prescription_id: Any) -> Any:
        return await self.get_resource(ResourceType.PRESCRIPTIONS, prescription_id)

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    async def get_patient_profiles(self) -> Any:
        return await self._gateway.get(PATIENT_PROFILES_PATH)

    async def switch_profile(self, profile: Optional[PatientProfile]) -> Optional[PatientProfile]:
        await self._store.set_active_profile(profile)
        return profile

