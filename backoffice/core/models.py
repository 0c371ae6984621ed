"""Data models for the records held by the back-office store."""
from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Tuple, Type, TypeVar


class InmateStatus(str, Enum):
    ACTIVE = "active"
    RELEASED = "released"
    TRANSFERRED = "transferred"


class StaffStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Shift(str, Enum):
    DAY = "day"
    NIGHT = "night"
    ROTATING = "rotating"


class VisitorStatus(str, Enum):
    APPROVED = "approved"
    PENDING = "pending"
    DENIED = "denied"


class MedicalRecordType(str, Enum):
    CHECKUP = "checkup"
    TREATMENT = "treatment"
    EMERGENCY = "emergency"
    MEDICATION = "medication"


class IncidentType(str, Enum):
    FIGHT = "fight"
    CONTRABAND = "contraband"
    ESCAPE_ATTEMPT = "escape_attempt"
    OTHER = "other"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class IncidentStatus(str, Enum):
    OPEN = "open"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"


class ResourceCategory(str, Enum):
    EQUIPMENT = "equipment"
    SUPPLIES = "supplies"
    FOOD = "food"
    MEDICAL = "medical"
    SECURITY = "security"


class ResourceStatus(str, Enum):
    AVAILABLE = "available"
    IN_USE = "in_use"
    MAINTENANCE = "maintenance"
    DEPLETED = "depleted"


def _coerce_enum(enum_type: Type[Enum], value: Any, field_name: str) -> Enum:
    """Return ``value`` as a member of ``enum_type`` or raise a readable error."""

    if isinstance(value, enum_type):
        return value
    try:
        raw = value.value if isinstance(value, Enum) else value
        return enum_type(str(raw).strip().lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise ValueError(f"invalid {field_name} {value!r}; expected one of: {allowed}") from None


def _camel_to_snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def _to_plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    return value


R = TypeVar("R", bound="_Record")


class _Record:
    """Shared serialization helpers for every record dataclass."""

    _enum_fields: Dict[str, Type[Enum]] = {}

    def _set(self, name: str, value: Any) -> None:
        object.__setattr__(self, name, value)

    def _coerce_enums(self) -> None:
        for name, enum_type in self._enum_fields.items():
            self._set(name, _coerce_enum(enum_type, getattr(self, name), name))

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain dictionary representation for JSON or CSV serialization."""

        return _to_plain(asdict(self))

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(item.name for item in fields(cls))

    @classmethod
    def from_dict(cls: Type[R], data: Mapping[str, Any]) -> R:
        """Build a record from snake_case or camelCase keys, ignoring unknown keys."""

        known = set(cls.field_names())
        kwargs = {}
        for key, value in data.items():
            name = key if key in known else _camel_to_snake(key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)


@dataclass(frozen=True)
class EmergencyContact:
    name: str = ""
    relationship: str = ""
    phone: str = ""


@dataclass(frozen=True)
class ContactInfo:
    email: str = ""
    phone: str = ""


def _coerce_nested(value: Any, nested_type: type) -> Any:
    if isinstance(value, nested_type):
        return value
    if value is None:
        return nested_type()
    if isinstance(value, Mapping):
        allowed = {item.name for item in fields(nested_type)}
        return nested_type(**{key: val for key, val in value.items() if key in allowed})
    raise ValueError(f"expected a mapping for {nested_type.__name__}, got {type(value).__name__}")


def _coerce_str_tuple(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    return tuple(str(item) for item in value if str(item).strip())


@dataclass(frozen=True)
class Inmate(_Record):
    """A person held at the facility."""

    inmate_number: str
    first_name: str
    last_name: str
    date_of_birth: str = ""
    admission_date: str = ""
    # Informational; not checked against admission_date.
    expected_release_date: str = ""
    cell_number: str = ""
    block: str = ""
    status: InmateStatus = InmateStatus.ACTIVE
    crime_type: str = ""
    sentence: str = ""
    emergency_contact: EmergencyContact = field(default_factory=EmergencyContact)
    id: str = ""

    _enum_fields = {"status": InmateStatus}

    def __post_init__(self) -> None:
        self._coerce_enums()
        self._set("emergency_contact", _coerce_nested(self.emergency_contact, EmergencyContact))

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class Staff(_Record):
    """A facility employee."""

    employee_id: str
    first_name: str
    last_name: str
    position: str = ""
    department: str = ""
    hire_date: str = ""
    shift: Shift = Shift.DAY
    status: StaffStatus = StaffStatus.ACTIVE
    contact_info: ContactInfo = field(default_factory=ContactInfo)
    id: str = ""

    _enum_fields = {"shift": Shift, "status": StaffStatus}

    def __post_init__(self) -> None:
        self._coerce_enums()
        self._set("contact_info", _coerce_nested(self.contact_info, ContactInfo))

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class Visitor(_Record):
    """An approved (or pending) visitor linked to exactly one inmate."""

    first_name: str
    last_name: str
    inmate_id: str
    relationship: str = ""
    contact_info: ContactInfo = field(default_factory=ContactInfo)
    last_visit: str = ""
    status: VisitorStatus = VisitorStatus.PENDING
    id: str = ""

    _enum_fields = {"status": VisitorStatus}

    def __post_init__(self) -> None:
        self._coerce_enums()
        self._set("contact_info", _coerce_nested(self.contact_info, ContactInfo))

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class MedicalRecord(_Record):
    inmate_id: str
    date: str
    type: MedicalRecordType
    description: str = ""
    doctor: str = ""
    medications: Tuple[str, ...] = ()
    next_appointment: str | None = None
    id: str = ""

    _enum_fields = {"type": MedicalRecordType}

    def __post_init__(self) -> None:
        self._coerce_enums()
        self._set("medications", _coerce_str_tuple(self.medications))
        if not self.next_appointment:
            self._set("next_appointment", None)


@dataclass(frozen=True)
class SecurityIncident(_Record):
    type: IncidentType
    description: str
    location: str
    date: str
    time: str = ""
    severity: Severity = Severity.LOW
    status: IncidentStatus = IncidentStatus.OPEN
    reported_by: str = ""
    involved_inmates: Tuple[str, ...] = ()
    id: str = ""

    _enum_fields = {"type": IncidentType, "severity": Severity, "status": IncidentStatus}

    def __post_init__(self) -> None:
        self._coerce_enums()
        self._set("involved_inmates", _coerce_str_tuple(self.involved_inmates))


@dataclass(frozen=True)
class Resource(_Record):
    name: str
    category: ResourceCategory
    quantity: int = 0
    unit: str = ""
    location: str = ""
    status: ResourceStatus = ResourceStatus.AVAILABLE
    last_updated: str = ""
    id: str = ""

    _enum_fields = {"category": ResourceCategory, "status": ResourceStatus}

    def __post_init__(self) -> None:
        self._coerce_enums()
        try:
            quantity = int(self.quantity)
        except (TypeError, ValueError):
            raise ValueError(f"invalid quantity {self.quantity!r}") from None
        if quantity != self.quantity and not isinstance(self.quantity, str):
            raise ValueError(f"quantity must be a whole number, got {self.quantity!r}")
        if quantity < 0:
            raise ValueError("quantity cannot be negative")
        self._set("quantity", quantity)


def involved_inmate_names(incident: SecurityIncident, inmates: Iterable[Inmate]) -> list[str]:
    """Resolve involved inmate ids to their current names.

    Names are looked up against the live collection every time, so a renamed
    inmate shows up under the new name and a deleted one as unknown.
    """

    by_id = {inmate.id: inmate for inmate in inmates}
    names = []
    for inmate_id in incident.involved_inmates:
        inmate = by_id.get(inmate_id)
        names.append(inmate.full_name if inmate else f"Unknown inmate ({inmate_id})")
    return names
