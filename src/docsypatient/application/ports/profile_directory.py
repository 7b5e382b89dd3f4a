"""
Profile directory interface: where the session store fetches profiles from.
"""

from abc import ABC, abstractmethod
from typing import Any


class ProfileDirectory(ABC):
    """Source of the patient profiles linked to the logged-in account."""

    @abstractmethod
    async def get_patient_profiles(self) -> Any:
        """Return the normalized profile-listing payload.

        Expected shape: ``{"profiles": [...], "defaultProfileId": ...}``.
        """
        pass
