"""Dashboard counters recomputed from the current store snapshot."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from backoffice.core.models import (
    IncidentStatus,
    InmateStatus,
    MedicalRecord,
    SecurityIncident,
    Severity,
    StaffStatus,
    VisitorStatus,
)
from backoffice.core.utils import days_from, in_range, parse_date
from backoffice.processing.analytics import count_by

if TYPE_CHECKING:
    from backoffice.core.store import StoreSnapshot

DEFAULT_CAPACITY = 500
DEFAULT_RELEASE_WINDOW_DAYS = 30
DEFAULT_RECENT_LIMIT = 5


@dataclass
class DashboardStats:
    total_inmates: int = 0
    total_staff: int = 0
    pending_visitors: int = 0
    critical_incidents: int = 0
    upcoming_releases: int = 0
    recent_incidents: List[SecurityIncident] = field(default_factory=list)
    capacity_by_block: Dict[str, int] = field(default_factory=dict)
    occupancy_rate: float = 0.0
    upcoming_appointments: List[MedicalRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_inmates": self.total_inmates,
            "total_staff": self.total_staff,
            "pending_visitors": self.pending_visitors,
            "critical_incidents": self.critical_incidents,
            "upcoming_releases": self.upcoming_releases,
            "occupancy_rate": self.occupancy_rate,
            "capacity_by_block": dict(self.capacity_by_block),
            "recent_incidents": [incident.to_dict() for incident in self.recent_incidents],
            "upcoming_appointments": [record.to_dict() for record in self.upcoming_appointments],
        }


def occupancy_rate(active_inmates: int, capacity: int) -> float:
    """Percentage of capacity in use, rounded to one decimal."""

    if capacity <= 0:
        return 0.0
    return round(active_inmates / capacity * 100, 1)


def recent_incidents(incidents: List[SecurityIncident], limit: int = DEFAULT_RECENT_LIMIT) -> List[SecurityIncident]:
    """Newest incidents first; equal dates keep collection order, bad dates go last."""

    # sorted() is stable under reverse=True, so ties keep their original order.
    ordered = sorted(incidents, key=lambda incident: parse_date(incident.date) or date.min, reverse=True)
    return ordered[: max(limit, 0)]


def dashboard_stats(
    snapshot: "StoreSnapshot",
    today: Optional[date] = None,
    window_days: int = DEFAULT_RELEASE_WINDOW_DAYS,
    recent_limit: int = DEFAULT_RECENT_LIMIT,
    capacity: int = DEFAULT_CAPACITY,
) -> DashboardStats:
    """Compute the dashboard snapshot in a single pass per collection."""

    today = today or date.today()
    window_end = days_from(today, window_days)

    active_inmates = [inmate for inmate in snapshot.inmates if inmate.status == InmateStatus.ACTIVE]
    upcoming_releases = sum(
        1 for inmate in active_inmates if in_range(inmate.expected_release_date, today, window_end)
    )
    critical = sum(
        1
        for incident in snapshot.security_incidents
        if incident.severity == Severity.CRITICAL and incident.status == IncidentStatus.OPEN
    )
    appointments = [
        record
        for record in snapshot.medical_records
        if record.next_appointment and in_range(record.next_appointment, today, None)
    ]

    return DashboardStats(
        total_inmates=len(active_inmates),
        total_staff=sum(1 for member in snapshot.staff if member.status == StaffStatus.ACTIVE),
        pending_visitors=sum(
            1 for visitor in snapshot.visitors if visitor.status == VisitorStatus.PENDING
        ),
        critical_incidents=critical,
        upcoming_releases=upcoming_releases,
        recent_incidents=recent_incidents(list(snapshot.security_incidents), recent_limit),
        capacity_by_block=count_by(active_inmates, lambda inmate: inmate.block, default="Unassigned"),
        occupancy_rate=occupancy_rate(len(active_inmates), capacity),
        upcoming_appointments=sorted(appointments, key=lambda record: parse_date(record.next_appointment)),
    )
