"""Core building blocks for the backoffice package."""
from backoffice.core.access import Role, has_permission
from backoffice.core.logging import configure_logging
from backoffice.core.models import (
    ContactInfo,
    EmergencyContact,
    IncidentStatus,
    IncidentType,
    Inmate,
    InmateStatus,
    MedicalRecord,
    MedicalRecordType,
    Resource,
    ResourceCategory,
    ResourceStatus,
    SecurityIncident,
    Severity,
    Shift,
    Staff,
    StaffStatus,
    Visitor,
    VisitorStatus,
    involved_inmate_names,
)
from backoffice.core.store import RecordCollection, RecordStore, StoreSnapshot
from backoffice.core.utils import Settings, load_settings, parse_date

__all__ = [
    "ContactInfo",
    "EmergencyContact",
    "IncidentStatus",
    "IncidentType",
    "Inmate",
    "InmateStatus",
    "MedicalRecord",
    "MedicalRecordType",
    "RecordCollection",
    "RecordStore",
    "Resource",
    "ResourceCategory",
    "ResourceStatus",
    "Role",
    "SecurityIncident",
    "Settings",
    "Severity",
    "Shift",
    "Staff",
    "StaffStatus",
    "StoreSnapshot",
    "Visitor",
    "VisitorStatus",
    "configure_logging",
    "has_permission",
    "involved_inmate_names",
    "load_settings",
    "parse_date",
]
