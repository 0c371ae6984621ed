"""Grouped counts (histograms) feeding the analytics charts and reports."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

from backoffice.core.utils import age_on

if TYPE_CHECKING:
    from backoffice.core.store import StoreSnapshot

T = TypeVar("T")

UNKNOWN = "Unknown"
UNASSIGNED = "Unassigned"

AGE_BUCKETS = ("Under 20", "20-29", "30-39", "40-49", "50-59", "60+")


def count_by(records: Iterable[T], key: Callable[[T], Any], default: str = UNKNOWN) -> Dict[str, int]:
    """Count records per key in one pass.

    Blank keys land in ``default`` so the counts always add up to the number
    of records.
    """

    counts: Dict[str, int] = {}
    for record in records:
        value = key(record)
        if isinstance(value, Enum):
            value = value.value
        label = str(value).strip() if value is not None else ""
        label = label or default
        counts[label] = counts.get(label, 0) + 1
    return counts


def age_bucket(date_of_birth: Any, today: date) -> str:
    """Map a date of birth onto a decade band."""

    age = age_on(date_of_birth, today)
    if age is None:
        return UNKNOWN
    if age < 20:
        return AGE_BUCKETS[0]
    if age >= 60:
        return AGE_BUCKETS[-1]
    return AGE_BUCKETS[age // 10 - 1]


def sorted_histogram(histogram: Dict[str, int], limit: Optional[int] = None) -> List[Tuple[str, int]]:
    """Buckets ordered by count (descending), then label."""

    ordered = sorted(histogram.items(), key=lambda item: (-item[1], item[0]))
    return ordered if limit is None else ordered[:limit]


@dataclass
class IncidentStats:
    by_severity: Dict[str, int] = field(default_factory=dict)
    by_type: Dict[str, int] = field(default_factory=dict)


@dataclass
class MedicalStats:
    by_type: Dict[str, int] = field(default_factory=dict)


@dataclass
class StaffStats:
    by_department: Dict[str, int] = field(default_factory=dict)
    by_shift: Dict[str, int] = field(default_factory=dict)


@dataclass
class ResourceStats:
    by_status: Dict[str, int] = field(default_factory=dict)
    by_category: Dict[str, int] = field(default_factory=dict)


@dataclass
class AdvancedAnalytics:
    crime_stats: Dict[str, int] = field(default_factory=dict)
    block_stats: Dict[str, int] = field(default_factory=dict)
    age_groups: Dict[str, int] = field(default_factory=dict)
    incident_stats: IncidentStats = field(default_factory=IncidentStats)
    medical_stats: MedicalStats = field(default_factory=MedicalStats)
    staff_stats: StaffStats = field(default_factory=StaffStats)
    resource_stats: ResourceStats = field(default_factory=ResourceStats)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "crime_stats": dict(self.crime_stats),
            "block_stats": dict(self.block_stats),
            "age_groups": dict(self.age_groups),
            "incident_stats": {
                "by_severity": dict(self.incident_stats.by_severity),
                "by_type": dict(self.incident_stats.by_type),
            },
            "medical_stats": {"by_type": dict(self.medical_stats.by_type)},
            "staff_stats": {
                "by_department": dict(self.staff_stats.by_department),
                "by_shift": dict(self.staff_stats.by_shift),
            },
            "resource_stats": {
                "by_status": dict(self.resource_stats.by_status),
                "by_category": dict(self.resource_stats.by_category),
            },
        }


def advanced_analytics(snapshot: "StoreSnapshot", today: Optional[date] = None) -> AdvancedAnalytics:
    today = today or date.today()
    return AdvancedAnalytics(
        crime_stats=count_by(snapshot.inmates, lambda inmate: inmate.crime_type),
        block_stats=count_by(snapshot.inmates, lambda inmate: inmate.block, default=UNASSIGNED),
        age_groups=count_by(snapshot.inmates, lambda inmate: age_bucket(inmate.date_of_birth, today)),
        incident_stats=IncidentStats(
            by_severity=count_by(snapshot.security_incidents, lambda incident: incident.severity),
            by_type=count_by(snapshot.security_incidents, lambda incident: incident.type),
        ),
        medical_stats=MedicalStats(
            by_type=count_by(snapshot.medical_records, lambda record: record.type),
        ),
        staff_stats=StaffStats(
            by_department=count_by(snapshot.staff, lambda member: member.department),
            by_shift=count_by(snapshot.staff, lambda member: member.shift),
        ),
        resource_stats=ResourceStats(
            by_status=count_by(snapshot.resources, lambda resource: resource.status),
            by_category=count_by(snapshot.resources, lambda resource: resource.category),
        ),
    )
