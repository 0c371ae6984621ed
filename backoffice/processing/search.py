"""Read-only search and filter predicates shared by every view.

All helpers are pure: they never mutate the records they are given, they
return new lists, and they never raise on missing matches.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, List, Optional

from backoffice.core.models import (
    Inmate,
    MedicalRecord,
    SecurityIncident,
    Staff,
    Visitor,
)

if TYPE_CHECKING:
    from backoffice.core.store import StoreSnapshot

SEARCH_CATEGORIES = ("all", "inmates", "staff", "visitors")


def _normalize(query: Optional[str]) -> str:
    return (query or "").strip().lower()


def _contains(needle: str, *haystacks: Any) -> bool:
    return any(needle in str(value or "").lower() for value in haystacks)


def _matches(value: Any, criterion: Optional[str]) -> bool:
    """Exact match for a supplied criterion; empty criteria always match."""

    if not criterion:
        return True
    return value == criterion


def search_inmates(inmates: Iterable[Inmate], query: Optional[str]) -> List[Inmate]:
    """Match inmates by full name or inmate number (case-insensitive).

    An empty query returns every inmate.
    """

    needle = _normalize(query)
    return [
        inmate
        for inmate in inmates
        if not needle or _contains(needle, inmate.full_name, inmate.inmate_number)
    ]


def filter_inmates(
    inmates: Iterable[Inmate], status: Optional[str] = None, block: Optional[str] = None
) -> List[Inmate]:
    return [
        inmate
        for inmate in inmates
        if _matches(inmate.status, status) and _matches(inmate.block, block)
    ]


def search_staff(staff: Iterable[Staff], query: Optional[str]) -> List[Staff]:
    needle = _normalize(query)
    return [
        member
        for member in staff
        if not needle or _contains(needle, member.full_name, member.employee_id, member.position)
    ]


def filter_staff(
    staff: Iterable[Staff],
    department: Optional[str] = None,
    shift: Optional[str] = None,
    status: Optional[str] = None,
) -> List[Staff]:
    return [
        member
        for member in staff
        if _matches(member.department, department)
        and _matches(member.shift, shift)
        and _matches(member.status, status)
    ]


def search_visitors(visitors: Iterable[Visitor], query: Optional[str]) -> List[Visitor]:
    needle = _normalize(query)
    return [
        visitor
        for visitor in visitors
        if not needle or _contains(needle, visitor.full_name, visitor.relationship)
    ]


def filter_visitors(visitors: Iterable[Visitor], status: Optional[str] = None) -> List[Visitor]:
    return [visitor for visitor in visitors if _matches(visitor.status, status)]


def search_incidents(
    incidents: Iterable[SecurityIncident], query: Optional[str]
) -> List[SecurityIncident]:
    needle = _normalize(query)
    return [
        incident
        for incident in incidents
        if not needle
        or _contains(needle, incident.description, incident.location, incident.reported_by)
    ]


def filter_incidents(
    incidents: Iterable[SecurityIncident],
    type: Optional[str] = None,
    status: Optional[str] = None,
    severity: Optional[str] = None,
) -> List[SecurityIncident]:
    return [
        incident
        for incident in incidents
        if _matches(incident.type, type)
        and _matches(incident.status, status)
        and _matches(incident.severity, severity)
    ]


def search_medical_records(
    records: Iterable[MedicalRecord], inmates: Iterable[Inmate], query: Optional[str]
) -> List[MedicalRecord]:
    """Match medical records by the inmate's current name, description or doctor."""

    needle = _normalize(query)
    names = {inmate.id: inmate.full_name for inmate in inmates}
    return [
        record
        for record in records
        if not needle
        or _contains(needle, names.get(record.inmate_id, ""), record.description, record.doctor)
    ]


def filter_medical_records(
    records: Iterable[MedicalRecord], type: Optional[str] = None
) -> List[MedicalRecord]:
    return [record for record in records if _matches(record.type, type)]


@dataclass
class SearchResults:
    inmates: List[Inmate] = field(default_factory=list)
    staff: List[Staff] = field(default_factory=list)
    visitors: List[Visitor] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.inmates) + len(self.staff) + len(self.visitors)


def search_all(snapshot: "StoreSnapshot", query: Optional[str]) -> SearchResults:
    """Run the per-kind searches independently; no cross-kind ranking."""

    return SearchResults(
        inmates=search_inmates(snapshot.inmates, query),
        staff=search_staff(snapshot.staff, query),
        visitors=search_visitors(snapshot.visitors, query),
    )


def advanced_search(
    snapshot: "StoreSnapshot",
    query: Optional[str],
    category: str = "all",
    status: Optional[str] = None,
    block: Optional[str] = None,
    department: Optional[str] = None,
) -> SearchResults:
    """Search everything, then narrow by category and per-kind filters."""

    if category not in SEARCH_CATEGORIES:
        raise ValueError(f"unknown search category {category!r}")

    results = search_all(snapshot, query)
    if category != "all":
        results = SearchResults(
            inmates=results.inmates if category == "inmates" else [],
            staff=results.staff if category == "staff" else [],
            visitors=results.visitors if category == "visitors" else [],
        )
    results.inmates = filter_inmates(results.inmates, status=status, block=block)
    results.staff = filter_staff(results.staff, department=department)
    return results
