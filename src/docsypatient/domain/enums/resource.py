"""
List resources and appointment status values.
"""

from enum import Enum
from typing import Any, Dict

from ...core.constants import APPOINTMENTS_PATH, BILLING_PATH, PRESCRIPTIONS_PATH


class ResourceType(str, Enum):
    """Profile-scoped resources shown as paginated lists."""
    APPOINTMENTS = "appointments"
    BILLS = "bills"
    PRESCRIPTIONS = "prescriptions"

    @property
    def path(self) -> str:
        return _RESOURCE_PATHS[self]


_RESOURCE_PATHS = {
    ResourceType.APPOINTMENTS: APPOINTMENTS_PATH,
    ResourceType.BILLS: BILLING_PATH,
    ResourceType.PRESCRIPTIONS: PRESCRIPTIONS_PATH,
}


class AppointmentStatus(str, Enum):
    """Appointment status values reported by the backend."""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    REVIEW = "REVIEW"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    REJECTED = "REJECTED"


_FINAL_STATUSES = {AppointmentStatus.CANCELLED.value, AppointmentStatus.COMPLETED.value}


def is_cancellable(appointment: Dict[str, Any]) -> bool:
    """An appointment can be cancelled unless it is already cancelled or completed."""
    if not appointment:
        return False
    status = str(appointment.get("status") or "").upper()
    return status not in _FINAL_STATUSES
