"""Demo records used to seed a fresh store."""
from __future__ import annotations

from backoffice.core.models import (
    Inmate,
    MedicalRecord,
    Resource,
    SecurityIncident,
    Staff,
    Visitor,
)
from backoffice.core.store import RecordStore

SEED_INMATES = [
    Inmate(
        id="1",
        inmate_number="INM001",
        first_name="John",
        last_name="Doe",
        date_of_birth="1985-03-15",
        admission_date="2023-01-15",
        expected_release_date="2025-06-15",
        cell_number="A-101",
        block="A",
        status="active",
        crime_type="Theft",
        sentence="2 years",
        emergency_contact={"name": "Jane Doe", "relationship": "Sister", "phone": "+1234567890"},
    ),
    Inmate(
        id="2",
        inmate_number="INM002",
        first_name="Mike",
        last_name="Smith",
        date_of_birth="1990-07-22",
        admission_date="2023-06-10",
        expected_release_date="2026-12-10",
        cell_number="B-205",
        block="B",
        status="active",
        crime_type="Assault",
        sentence="3.5 years",
        emergency_contact={"name": "Sarah Smith", "relationship": "Mother", "phone": "+1987654321"},
    ),
    Inmate(
        id="3",
        inmate_number="INM003",
        first_name="Robert",
        last_name="Johnson",
        date_of_birth="1982-11-08",
        admission_date="2022-09-20",
        expected_release_date="2025-03-20",
        cell_number="C-312",
        block="C",
        status="active",
        crime_type="Drug Possession",
        sentence="2.5 years",
        emergency_contact={"name": "Lisa Johnson", "relationship": "Wife", "phone": "+1122334455"},
    ),
]

SEED_STAFF = [
    Staff(
        id="1",
        employee_id="EMP001",
        first_name="Sarah",
        last_name="Wilson",
        position="Security Officer",
        department="Security",
        hire_date="2020-03-15",
        shift="day",
        status="active",
        contact_info={"email": "sarah.wilson@prison.gov", "phone": "+1234567890"},
    ),
    Staff(
        id="2",
        employee_id="EMP002",
        first_name="David",
        last_name="Brown",
        position="Medical Officer",
        department="Medical",
        hire_date="2019-08-22",
        shift="day",
        status="active",
        contact_info={"email": "david.brown@prison.gov", "phone": "+1987654321"},
    ),
    Staff(
        id="3",
        employee_id="EMP003",
        first_name="Lisa",
        last_name="Davis",
        position="Warden",
        department="Administration",
        hire_date="2018-01-10",
        shift="day",
        status="active",
        contact_info={"email": "lisa.davis@prison.gov", "phone": "+1122334455"},
    ),
]

SEED_VISITORS = [
    Visitor(
        id="1",
        first_name="Jane",
        last_name="Doe",
        relationship="Sister",
        contact_info={"email": "jane.doe@email.com", "phone": "+1234567890"},
        last_visit="2024-01-15",
        inmate_id="1",
        status="approved",
    ),
]

SEED_MEDICAL_RECORDS = [
    MedicalRecord(
        id="1",
        inmate_id="1",
        date="2024-01-15",
        type="checkup",
        description="Routine health checkup",
        doctor="Dr. Brown",
        medications=["Vitamin D"],
        next_appointment="2024-04-15",
    ),
]

SEED_SECURITY_INCIDENTS = [
    SecurityIncident(
        id="1",
        type="fight",
        description="Altercation in cafeteria",
        location="Cafeteria",
        date="2024-01-10",
        time="14:30",
        severity="medium",
        status="resolved",
        reported_by="Officer Wilson",
        involved_inmates=["1", "2"],
    ),
]

SEED_RESOURCES = [
    Resource(
        id="1",
        name="Security Cameras",
        category="security",
        quantity=45,
        unit="units",
        location="Various",
        status="available",
        last_updated="2024-01-15",
    ),
]


def seed_store(store: RecordStore | None = None) -> RecordStore:
    """Populate ``store`` (or a new one) with the demo records."""

    store = store or RecordStore()
    store.inmates.load(SEED_INMATES)
    store.staff.load(SEED_STAFF)
    store.visitors.load(SEED_VISITORS)
    store.medical_records.load(SEED_MEDICAL_RECORDS)
    store.security_incidents.load(SEED_SECURITY_INCIDENTS)
    store.resources.load(SEED_RESOURCES)
    return store
