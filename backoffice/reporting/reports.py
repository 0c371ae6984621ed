"""On-demand reports composed from date filters and grouped counts."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from backoffice.core.models import (
    IncidentStatus,
    InmateStatus,
    Severity,
    StaffStatus,
    VisitorStatus,
    involved_inmate_names,
)
from backoffice.core.utils import in_range, parse_date
from backoffice.processing.analytics import UNASSIGNED, advanced_analytics, count_by, sorted_histogram
from backoffice.processing.stats import DEFAULT_CAPACITY, dashboard_stats, occupancy_rate

if TYPE_CHECKING:
    from backoffice.core.store import StoreSnapshot

logger = logging.getLogger(__name__)


class ReportType(str, Enum):
    INMATE_POPULATION = "inmate_population"
    SECURITY_INCIDENTS = "security_incidents"
    VISITOR_STATISTICS = "visitor_statistics"
    MEDICAL_OVERVIEW = "medical_overview"
    DAILY_OPERATIONS = "daily_operations"


REPORT_TITLES = {
    ReportType.INMATE_POPULATION: "Inmate Population Report",
    ReportType.SECURITY_INCIDENTS: "Security Incidents Report",
    ReportType.VISITOR_STATISTICS: "Visitor Statistics Report",
    ReportType.MEDICAL_OVERVIEW: "Medical Overview Report",
    ReportType.DAILY_OPERATIONS: "Daily Operations Report",
}


@dataclass(frozen=True)
class DateRange:
    """Inclusive ``[start, end]`` window over record dates."""

    start: date
    end: date

    @classmethod
    def last_days(cls, days: int = 30, today: Optional[date] = None) -> "DateRange":
        today = today or date.today()
        return cls(start=today - timedelta(days=days), end=today)

    @classmethod
    def parse(cls, start: Any, end: Any) -> "DateRange":
        parsed_start, parsed_end = parse_date(start), parse_date(end)
        if parsed_start is None or parsed_end is None:
            raise ValueError(f"invalid date range {start!r} - {end!r}")
        return cls(parsed_start, parsed_end)

    def contains(self, raw: Any) -> bool:
        return in_range(raw, self.start, self.end)

    def to_dict(self) -> Dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


def _inmate_population(snapshot: "StoreSnapshot", capacity: int) -> Dict[str, Any]:
    statuses = count_by(snapshot.inmates, lambda inmate: inmate.status)
    active = statuses.get(InmateStatus.ACTIVE.value, 0)
    return {
        "summary": {
            "total_inmates": len(snapshot.inmates),
            "active_inmates": active,
            "released_inmates": statuses.get(InmateStatus.RELEASED.value, 0),
            "transferred_inmates": statuses.get(InmateStatus.TRANSFERRED.value, 0),
            "occupancy_rate": occupancy_rate(active, capacity),
        },
        "cell_blocks": count_by(snapshot.inmates, lambda inmate: inmate.block, default=UNASSIGNED),
        "crime_types": count_by(snapshot.inmates, lambda inmate: inmate.crime_type),
    }


def _security_incidents(snapshot: "StoreSnapshot", window: DateRange) -> Dict[str, Any]:
    incidents = [incident for incident in snapshot.security_incidents if window.contains(incident.date)]
    statuses = count_by(incidents, lambda incident: incident.status)
    return {
        "summary": {
            "total_incidents": len(incidents),
            "open_incidents": statuses.get(IncidentStatus.OPEN.value, 0),
            "resolved_incidents": statuses.get(IncidentStatus.RESOLVED.value, 0),
            "critical_incidents": sum(1 for incident in incidents if incident.severity == Severity.CRITICAL),
        },
        "incident_types": count_by(incidents, lambda incident: incident.type),
        "severity_levels": count_by(incidents, lambda incident: incident.severity),
        "date_range": window.to_dict(),
    }


def _visitor_statistics(snapshot: "StoreSnapshot", window: DateRange) -> Dict[str, Any]:
    visitors = [visitor for visitor in snapshot.visitors if window.contains(visitor.last_visit)]
    statuses = count_by(visitors, lambda visitor: visitor.status)
    return {
        "summary": {
            "total_visitors": len(visitors),
            "approved_visitors": statuses.get(VisitorStatus.APPROVED.value, 0),
            "pending_visitors": statuses.get(VisitorStatus.PENDING.value, 0),
            "denied_visitors": statuses.get(VisitorStatus.DENIED.value, 0),
        },
        "visitor_types": count_by(visitors, lambda visitor: visitor.relationship),
        "date_range": window.to_dict(),
    }


def _medical_overview(snapshot: "StoreSnapshot", window: DateRange, today: date) -> Dict[str, Any]:
    records = [record for record in snapshot.medical_records if window.contains(record.date)]
    return {
        "summary": {
            "total_records": len(records),
            "inmates_seen": len({record.inmate_id for record in records}),
            "upcoming_appointments": sum(
                1 for record in snapshot.medical_records if in_range(record.next_appointment, today, None)
            ),
        },
        "record_types": count_by(records, lambda record: record.type),
        "doctors": count_by(records, lambda record: record.doctor),
        "date_range": window.to_dict(),
    }


def _daily_operations(snapshot: "StoreSnapshot", today: date, capacity: int) -> Dict[str, Any]:
    stats = dashboard_stats(snapshot, today=today, capacity=capacity)
    on_duty = [member for member in snapshot.staff if member.status == StaffStatus.ACTIVE]
    return {
        "summary": {
            "active_inmates": stats.total_inmates,
            "active_staff": stats.total_staff,
            "pending_visitors": stats.pending_visitors,
            "critical_incidents": stats.critical_incidents,
            "upcoming_releases": stats.upcoming_releases,
            "occupancy_rate": stats.occupancy_rate,
        },
        "staff_by_shift": count_by(on_duty, lambda member: member.shift),
        "resource_statuses": count_by(snapshot.resources, lambda resource: resource.status),
        "capacity_by_block": stats.capacity_by_block,
    }


def generate_report(
    snapshot: "StoreSnapshot",
    report_type: ReportType | str,
    date_range: Optional[DateRange] = None,
    today: Optional[date] = None,
    capacity: int = DEFAULT_CAPACITY,
) -> Dict[str, Any]:
    """Build one report as a plain nested mapping of strings and numbers."""

    report_type = ReportType(report_type)
    today = today or date.today()
    window = date_range or DateRange.last_days(30, today)

    if report_type is ReportType.INMATE_POPULATION:
        body = _inmate_population(snapshot, capacity)
    elif report_type is ReportType.SECURITY_INCIDENTS:
        body = _security_incidents(snapshot, window)
    elif report_type is ReportType.VISITOR_STATISTICS:
        body = _visitor_statistics(snapshot, window)
    elif report_type is ReportType.MEDICAL_OVERVIEW:
        body = _medical_overview(snapshot, window, today)
    else:
        body = _daily_operations(snapshot, today, capacity)

    logger.info("Generated %s report", report_type.value)
    return {
        "report_type": report_type.value,
        "title": REPORT_TITLES[report_type],
        "generated_at": datetime.now().isoformat(timespec="seconds"),
        **body,
    }


def _section(title: str, lines: List[str]) -> List[str]:
    return [title, "=" * len(title), *(lines or ["(none)"]), ""]


def render_text_report(snapshot: "StoreSnapshot", today: Optional[date] = None) -> str:
    """Plain-text comprehensive report for download or printing."""

    today = today or date.today()
    stats = dashboard_stats(snapshot, today=today)
    analytics = advanced_analytics(snapshot, today=today)
    names_by_incident = {
        incident.id: involved_inmate_names(incident, snapshot.inmates)
        for incident in stats.recent_incidents
    }

    lines = [
        "PRISON MANAGEMENT SYSTEM - COMPREHENSIVE REPORT",
        f"Generated on: {datetime.now():%Y-%m-%d %H:%M:%S}",
        "",
    ]
    lines += _section(
        "EXECUTIVE SUMMARY",
        [
            f"- Total Active Inmates: {stats.total_inmates}",
            f"- Active Staff Members: {stats.total_staff}",
            f"- Pending Visitor Applications: {stats.pending_visitors}",
            f"- Critical Security Incidents: {stats.critical_incidents}",
            f"- Upcoming Releases (30 days): {stats.upcoming_releases}",
        ],
    )
    lines += _section(
        "FACILITY CAPACITY",
        [f"Block {block}: {count} inmates" for block, count in sorted(analytics.block_stats.items())],
    )
    lines += _section(
        "CRIME TYPE DISTRIBUTION",
        [f"{crime}: {count} cases" for crime, count in sorted_histogram(analytics.crime_stats, limit=10)],
    )
    lines += _section(
        "AGE DEMOGRAPHICS",
        [f"{group} years: {count} inmates" for group, count in analytics.age_groups.items()],
    )
    lines += _section(
        "SECURITY INCIDENTS ANALYSIS",
        ["By Severity:"]
        + [f"{severity.upper()}: {count} incidents" for severity, count in analytics.incident_stats.by_severity.items()]
        + ["By Type:"]
        + [
            f"{kind.replace('_', ' ').upper()}: {count} incidents"
            for kind, count in analytics.incident_stats.by_type.items()
        ],
    )
    lines += _section(
        "MEDICAL ACTIVITY",
        [f"{kind.capitalize()}: {count} records" for kind, count in analytics.medical_stats.by_type.items()],
    )
    lines += _section(
        "STAFF DISTRIBUTION",
        ["By Department:"]
        + [f"{dept}: {count} staff members" for dept, count in analytics.staff_stats.by_department.items()]
        + ["By Shift:"]
        + [f"{shift.capitalize()}: {count} staff members" for shift, count in analytics.staff_stats.by_shift.items()],
    )
    lines += _section(
        "RECENT SECURITY INCIDENTS",
        [
            f"- {incident.date} - {incident.type.value.replace('_', ' ').upper()} at {incident.location} "
            f"({incident.severity.value.upper()})"
            + (f" involving {', '.join(names_by_incident[incident.id])}" if incident.involved_inmates else "")
            for incident in stats.recent_incidents
        ],
    )
    return "\n".join(lines).rstrip() + "\n"
