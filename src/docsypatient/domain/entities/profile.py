"""Patient profile entity: one patient identity reachable by the logged-in account."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..errors import InvalidProfileDataError

_KNOWN_KEYS = ("id", "name", "clinicId", "clinicName", "displayId")


@dataclass(frozen=True)
class PatientProfile:
    """Patient profile as returned by the profile-listing endpoint."""

    id: str
    name: str = ""
    clinic_id: Optional[str] = None
    clinic_name: Optional[str] = None
    display_id: Optional[str] = None
    # Server fields this client does not model, kept for storage round trips
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self) -> None:
        if self.id is None or str(self.id).strip() == "":
            raise InvalidProfileDataError("id", self.id)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PatientProfile":
        """Build a profile from the server's camelCase JSON."""
        if not isinstance(data, dict):
            raise InvalidProfileDataError("profile", data)
        return cls(
            id=_as_str(data.get("id")),
            name=data.get("name") or "",
            clinic_id=_as_optional_str(data.get("clinicId")),
            clinic_name=data.get("clinicName"),
            display_id=_as_optional_str(data.get("displayId")),
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the server's JSON shape."""
        data: Dict[str, Any] = dict(self.extra)
        data.update(
            {
                "id": self.id,
                "name": self.name,
                "clinicId": self.clinic_id,
                "clinicName": self.clinic_name,
                "displayId": self.display_id,
            }
        )
        return data

    @property
    def label(self) -> str:
        """Short text used by profile pickers."""
        parts = [self.name or self.id]
        if self.display_id:
            parts.append(f"#{self.display_id}")
        if self.clinic_name:
            parts.append(f"({self.clinic_name})")
        return " ".join(parts)


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


def _as_optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)
