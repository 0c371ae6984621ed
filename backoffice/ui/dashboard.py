"""Streamlit dashboard for the facility back office."""
import csv
import io
import json
from datetime import date
from pathlib import Path
from typing import Callable, Dict, List

import streamlit as st

# Allow running via "streamlit run backoffice/ui/dashboard.py" without installing the package
# by ensuring the repository root is on ``sys.path``.
if __package__ in {None, ""}:
    import sys

    sys.path.append(str(Path(__file__).resolve().parents[2]))

from backoffice.core.access import Role, has_permission
from backoffice.core.logging import configure_logging
from backoffice.core.models import (
    IncidentStatus,
    IncidentType,
    Inmate,
    InmateStatus,
    MedicalRecord,
    MedicalRecordType,
    Resource,
    ResourceCategory,
    ResourceStatus,
    Severity,
    Shift,
    Staff,
    StaffStatus,
    Visitor,
    VisitorStatus,
    involved_inmate_names,
)
from backoffice.core.store import RecordStore
from backoffice.core.utils import load_settings
from backoffice.processing import search
from backoffice.processing.analytics import advanced_analytics, sorted_histogram
from backoffice.processing.pipeline import load_store
from backoffice.processing.stats import dashboard_stats
from backoffice.reporting.export import export_dataset
from backoffice.reporting.reports import DateRange, ReportType, REPORT_TITLES, generate_report, render_text_report
from backoffice.reporting.templates import records_to_rows, report_to_rows
from backoffice.ui.forms import apply_edits, build_incident, form_updates, mark_status, split_list, status_badge


def _get_store() -> RecordStore:
    """Load the store once per session so edits survive reruns."""

    if "store" not in st.session_state:
        st.session_state.store = load_store(load_settings().data_file)
    return st.session_state.store


def _rerun_app() -> None:
    """Trigger a Streamlit rerun, compatible with newer and older APIs."""

    rerun = getattr(st, "rerun", None) or getattr(st, "experimental_rerun", None)
    if not rerun:
        raise RuntimeError("Streamlit does not expose a rerun helper.")
    rerun()


def _table(records, empty_message: str) -> None:
    rows = records_to_rows(records)
    for row, record in zip(rows, records):
        if hasattr(record, "status"):
            row["status"] = status_badge(record.status)
    if rows:
        st.dataframe(rows, use_container_width=True, hide_index=True)
    else:
        st.info(empty_message)


def _options(enum_type) -> List[str]:
    return [member.value for member in enum_type]


def _record_actions(collection, records, label: Callable, statuses: List[str], key: str) -> None:
    """Status change and delete controls for one selected record."""

    if not records:
        return
    by_id = {record.id: record for record in records}
    selected = st.selectbox("Select record", options=list(by_id), format_func=lambda rid: label(by_id[rid]), key=f"{key}_select")
    cols = st.columns([2, 1, 1])
    with cols[0]:
        new_status = st.selectbox("New status", options=statuses, key=f"{key}_status")
    with cols[1]:
        if st.button("Update status", key=f"{key}_update"):
            mark_status(collection, selected, new_status)
            _rerun_app()
    with cols[2]:
        if st.button("🗑️ Delete", key=f"{key}_delete"):
            collection.delete(selected)
            _rerun_app()


def _dashboard_page(store: RecordStore) -> None:
    settings = load_settings()
    stats = dashboard_stats(
        store.snapshot(),
        window_days=settings.release_window_days,
        recent_limit=settings.recent_incident_limit,
        capacity=settings.facility_capacity,
    )
    row1 = st.columns(3)
    row1[0].metric("Active inmates", stats.total_inmates)
    row1[1].metric("Active staff", stats.total_staff)
    row1[2].metric("Pending visitors", stats.pending_visitors)
    row2 = st.columns(3)
    row2[0].metric("Critical open incidents", stats.critical_incidents)
    row2[1].metric(f"Releases in {settings.release_window_days} days", stats.upcoming_releases)
    row2[2].metric("Occupancy", f"{stats.occupancy_rate}%")
    st.progress(min(stats.occupancy_rate / 100, 1.0))

    if stats.upcoming_releases:
        st.warning(
            f"{stats.upcoming_releases} inmate(s) scheduled for release within "
            f"{settings.release_window_days} days."
        )
    st.subheader("Active inmates by block")
    if stats.capacity_by_block:
        st.bar_chart(stats.capacity_by_block)
    st.subheader("Recent incidents")
    _table(stats.recent_incidents, "No incidents recorded.")
    st.subheader("Upcoming medical appointments")
    _table(stats.upcoming_appointments, "No upcoming appointments.")


def _inmates_page(store: RecordStore) -> None:
    filter_cols = st.columns([2, 1, 1])
    with filter_cols[0]:
        query = st.text_input("Search name or inmate number")
    with filter_cols[1]:
        status = st.selectbox("Status", options=[""] + _options(InmateStatus))
    with filter_cols[2]:
        blocks = sorted({inmate.block for inmate in store.inmates if inmate.block})
        block = st.selectbox("Block", options=[""] + blocks)

    matches = search.filter_inmates(store.search_inmates(query), status=status, block=block)
    _table(matches, "No inmates match the current filters.")
    _record_actions(
        store.inmates,
        matches,
        lambda inmate: f"{inmate.inmate_number} {inmate.full_name}",
        _options(InmateStatus),
        "inmates",
    )

    with st.expander("Edit selected fields"):
        if matches:
            by_id = {inmate.id: inmate for inmate in matches}
            target = st.selectbox("Inmate", options=list(by_id), format_func=lambda rid: by_id[rid].full_name, key="inmate_edit")
            with st.form("edit_inmate"):
                values = {
                    "cell_number": st.text_input("Cell number"),
                    "block": st.text_input("Block"),
                    "expected_release_date": st.text_input("Expected release (YYYY-MM-DD)"),
                    "sentence": st.text_input("Sentence"),
                }
                if st.form_submit_button("Save changes"):
                    apply_edits(store.inmates, target, values)
                    _rerun_app()

    with st.expander("➕ Add inmate"):
        with st.form("add_inmate", clear_on_submit=True):
            cols = st.columns(2)
            values = {
                "inmate_number": cols[0].text_input("Inmate number"),
                "first_name": cols[0].text_input("First name"),
                "last_name": cols[1].text_input("Last name"),
                "date_of_birth": str(cols[1].date_input("Date of birth", value=date(1990, 1, 1))),
                "admission_date": str(cols[0].date_input("Admission date")),
                "expected_release_date": str(cols[1].date_input("Expected release")),
                "cell_number": cols[0].text_input("Cell number"),
                "block": cols[1].text_input("Block"),
                "crime_type": cols[0].text_input("Crime type"),
                "sentence": cols[1].text_input("Sentence"),
                "status": cols[0].selectbox("Status", options=_options(InmateStatus)),
            }
            contact = {
                "name": cols[1].text_input("Emergency contact name"),
                "relationship": cols[0].text_input("Emergency contact relationship"),
                "phone": cols[1].text_input("Emergency contact phone"),
            }
            if st.form_submit_button("Add inmate", type="primary"):
                _submit(lambda: store.inmates.add(Inmate(emergency_contact=contact, **form_updates(values))))


def _submit(action: Callable) -> None:
    """Run a form action, surfacing model validation errors inline."""

    try:
        action()
    except (TypeError, ValueError) as exc:
        st.error(f"Could not save: {exc}")
        return
    _rerun_app()


def _staff_page(store: RecordStore) -> None:
    cols = st.columns([2, 1, 1])
    query = cols[0].text_input("Search name, employee id or position")
    departments = sorted({member.department for member in store.staff if member.department})
    department = cols[1].selectbox("Department", options=[""] + departments)
    shift = cols[2].selectbox("Shift", options=[""] + _options(Shift))
    matches = search.filter_staff(search.search_staff(store.staff.all(), query), department=department, shift=shift)
    _table(matches, "No staff match the current filters.")
    _record_actions(store.staff, matches, lambda member: f"{member.employee_id} {member.full_name}", _options(StaffStatus), "staff")

    with st.expander("➕ Add staff member"):
        with st.form("add_staff", clear_on_submit=True):
            cols = st.columns(2)
            values = {
                "employee_id": cols[0].text_input("Employee id"),
                "first_name": cols[0].text_input("First name"),
                "last_name": cols[1].text_input("Last name"),
                "position": cols[1].text_input("Position"),
                "department": cols[0].text_input("Department"),
                "hire_date": str(cols[1].date_input("Hire date")),
                "shift": cols[0].selectbox("Shift", options=_options(Shift)),
            }
            contact = {"email": cols[1].text_input("Email"), "phone": cols[0].text_input("Phone")}
            if st.form_submit_button("Add staff member", type="primary"):
                _submit(lambda: store.staff.add(Staff(contact_info=contact, **form_updates(values))))


def _visitors_page(store: RecordStore) -> None:
    cols = st.columns([2, 1])
    query = cols[0].text_input("Search visitor name or relationship")
    status = cols[1].selectbox("Status", options=[""] + _options(VisitorStatus))
    matches = search.filter_visitors(search.search_visitors(store.visitors.all(), query), status=status)
    _table(matches, "No visitors match the current filters.")
    _record_actions(store.visitors, matches, lambda visitor: visitor.full_name, _options(VisitorStatus), "visitors")

    active = search.filter_inmates(store.inmates.all(), status=InmateStatus.ACTIVE.value)
    with st.expander("➕ Register visitor"):
        if not active:
            st.info("Visitors can only be registered for active inmates.")
            return
        names = {inmate.id: inmate.full_name for inmate in active}
        with st.form("add_visitor", clear_on_submit=True):
            cols = st.columns(2)
            values = {
                "first_name": cols[0].text_input("First name"),
                "last_name": cols[1].text_input("Last name"),
                "relationship": cols[0].text_input("Relationship"),
                "inmate_id": cols[1].selectbox("Inmate", options=list(names), format_func=names.get),
                "last_visit": str(cols[0].date_input("Last visit")),
            }
            contact = {"email": cols[1].text_input("Email"), "phone": cols[0].text_input("Phone")}
            if st.form_submit_button("Register", type="primary"):
                _submit(lambda: store.visitors.add(Visitor(contact_info=contact, **form_updates(values))))


def _medical_page(store: RecordStore) -> None:
    cols = st.columns([2, 1])
    query = cols[0].text_input("Search inmate, description or doctor")
    record_type = cols[1].selectbox("Type", options=[""] + _options(MedicalRecordType))
    matches = search.filter_medical_records(
        search.search_medical_records(store.medical_records.all(), store.inmates.all(), query),
        type=record_type,
    )
    _table(matches, "No medical records match the current filters.")

    names = {inmate.id: inmate.full_name for inmate in store.inmates}
    with st.expander("➕ Add medical record"):
        if not names:
            st.info("Add an inmate first.")
            return
        with st.form("add_medical", clear_on_submit=True):
            cols = st.columns(2)
            values = {
                "inmate_id": cols[0].selectbox("Inmate", options=list(names), format_func=names.get),
                "date": str(cols[1].date_input("Visit date")),
                "type": cols[0].selectbox("Type", options=_options(MedicalRecordType)),
                "doctor": cols[1].text_input("Doctor"),
                "description": st.text_area("Description"),
                "next_appointment": cols[0].text_input("Next appointment (YYYY-MM-DD, optional)"),
            }
            medications = split_list(st.text_input("Medications (comma separated)"))
            if st.form_submit_button("Add record", type="primary"):
                _submit(lambda: store.medical_records.add(MedicalRecord(medications=medications, **form_updates(values))))


def _security_page(store: RecordStore) -> None:
    incidents = store.security_incidents.all()
    counts = st.columns(4)
    counts[0].metric("Open", len(search.filter_incidents(incidents, status="open")))
    counts[1].metric("Investigating", len(search.filter_incidents(incidents, status="investigating")))
    counts[2].metric("Critical", len(search.filter_incidents(incidents, severity="critical")))
    counts[3].metric("Resolved", len(search.filter_incidents(incidents, status="resolved")))

    cols = st.columns([2, 1, 1])
    query = cols[0].text_input("Search description, location or reporter")
    incident_type = cols[1].selectbox("Type", options=[""] + _options(IncidentType))
    status = cols[2].selectbox("Status", options=[""] + _options(IncidentStatus))
    matches = search.filter_incidents(search.search_incidents(incidents, query), type=incident_type, status=status)
    rows = records_to_rows(matches)
    for row, incident in zip(rows, matches):
        row["involved_inmates"] = ", ".join(involved_inmate_names(incident, store.inmates.all()))
    if rows:
        st.dataframe(rows, use_container_width=True, hide_index=True)
    else:
        st.info("No incidents match the current filters.")
    _record_actions(
        store.security_incidents,
        matches,
        lambda incident: f"{incident.date} {incident.type.value} @ {incident.location}",
        _options(IncidentStatus),
        "incidents",
    )

    active = search.filter_inmates(store.inmates.all(), status=InmateStatus.ACTIVE.value)
    names = {inmate.id: inmate.full_name for inmate in active}
    with st.expander("➕ Report incident"):
        with st.form("add_incident", clear_on_submit=True):
            cols = st.columns(2)
            values = {
                "type": cols[0].selectbox("Type", options=_options(IncidentType)),
                "severity": cols[1].selectbox("Severity", options=_options(Severity)),
                "location": cols[0].text_input("Location"),
                "reported_by": cols[1].text_input("Reported by"),
                "date": str(cols[0].date_input("Date")),
                "time": str(cols[1].time_input("Time"))[:5],
                "description": st.text_area("Description"),
                "involved_inmates": st.multiselect("Involved inmates", options=list(names), format_func=names.get),
            }
            if st.form_submit_button("Report", type="primary"):
                _submit(lambda: store.security_incidents.add(build_incident(values, store.inmates.all())))


def _resources_page(store: RecordStore) -> None:
    _table(store.resources.all(), "No resources tracked yet.")
    _record_actions(store.resources, store.resources.all(), lambda resource: resource.name, _options(ResourceStatus), "resources")
    with st.expander("➕ Add resource"):
        with st.form("add_resource", clear_on_submit=True):
            cols = st.columns(2)
            values = {
                "name": cols[0].text_input("Name"),
                "category": cols[1].selectbox("Category", options=_options(ResourceCategory)),
                "quantity": cols[0].number_input("Quantity", min_value=0, step=1),
                "unit": cols[1].text_input("Unit"),
                "location": cols[0].text_input("Location"),
                "last_updated": str(date.today()),
            }
            if st.form_submit_button("Add resource", type="primary"):
                _submit(lambda: store.resources.add(Resource(**form_updates(values))))


def _search_page(store: RecordStore) -> None:
    cols = st.columns([2, 1])
    query = cols[0].text_input("Search inmates, staff and visitors")
    category = cols[1].selectbox("Category", options=list(search.SEARCH_CATEGORIES))
    if not query.strip():
        st.caption("Type a name, number, position or relationship to search.")
        return
    results = search.advanced_search(store.snapshot(), query, category=category)
    st.caption(f"{results.total} result(s)")
    for title, records in (("Inmates", results.inmates), ("Staff", results.staff), ("Visitors", results.visitors)):
        if records:
            st.subheader(title)
            _table(records, "")


def _analytics_page(store: RecordStore) -> None:
    analytics = advanced_analytics(store.snapshot())
    charts: Dict[str, Dict[str, int]] = {
        "Crime types (top 10)": dict(sorted_histogram(analytics.crime_stats, limit=10)),
        "Cell blocks": analytics.block_stats,
        "Age groups": analytics.age_groups,
        "Incidents by severity": analytics.incident_stats.by_severity,
        "Incidents by type": analytics.incident_stats.by_type,
        "Medical records by type": analytics.medical_stats.by_type,
        "Staff by department": analytics.staff_stats.by_department,
        "Staff by shift": analytics.staff_stats.by_shift,
        "Resources by status": analytics.resource_stats.by_status,
    }
    cols = st.columns(2)
    for index, (title, histogram) in enumerate(charts.items()):
        with cols[index % 2]:
            st.markdown(f"**{title}**")
            if histogram:
                st.bar_chart(histogram)
            else:
                st.caption("No data yet.")


def _reports_page(store: RecordStore) -> None:
    report_type = st.selectbox("Report", options=list(ReportType), format_func=lambda item: REPORT_TITLES[item])
    default = DateRange.last_days(30)
    cols = st.columns(2)
    start = cols[0].date_input("From", value=default.start)
    end = cols[1].date_input("To", value=default.end)
    report = generate_report(
        store.snapshot(),
        report_type,
        date_range=DateRange(start, end),
        capacity=load_settings().facility_capacity,
    )
    st.dataframe(report_to_rows(report), use_container_width=True, hide_index=True)

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=["Section", "Metric", "Value"])
    writer.writeheader()
    writer.writerows(report_to_rows(report))
    stamp = date.today().isoformat()
    dl = st.columns(2)
    dl[0].download_button("Download JSON", json.dumps(report, indent=2), file_name=f"{report_type.value}_{stamp}.json")
    dl[1].download_button("Download CSV", buffer.getvalue(), file_name=f"{report_type.value}_{stamp}.csv")


def _data_page(store: RecordStore) -> None:
    snapshot = store.snapshot()
    counts = st.columns(3)
    for index, kind in enumerate(("inmates", "staff", "visitors", "medical_records", "security_incidents", "resources")):
        counts[index % 3].metric(kind.replace("_", " ").title(), len(getattr(snapshot, kind)))

    include_inactive = st.checkbox("Include released/inactive records")
    dataset = export_dataset(snapshot, include_inactive=include_inactive)
    stamp = date.today().isoformat()
    st.download_button(
        "Export dataset (JSON)",
        json.dumps(dataset, indent=2),
        file_name=f"prison_data_export_{stamp}.json",
        type="primary",
    )
    st.download_button(
        "Download comprehensive report (TXT)",
        render_text_report(snapshot),
        file_name=f"prison_report_{stamp}.txt",
    )
    if st.button("Reset to demo data", type="secondary"):
        st.session_state.pop("store", None)
        _rerun_app()


PAGES = {
    "Dashboard": (None, _dashboard_page),
    "Inmates": ("inmates", _inmates_page),
    "Staff": ("staff", _staff_page),
    "Visitors": ("visitors", _visitors_page),
    "Medical": ("medical", _medical_page),
    "Security": ("security", _security_page),
    "Resources": ("resources", _resources_page),
    "Search": (None, _search_page),
    "Analytics": ("reports", _analytics_page),
    "Reports": ("reports", _reports_page),
    "Data": ("data", _data_page),
}


def main() -> None:
    """Launch the back-office dashboard."""

    configure_logging()
    st.set_page_config(page_title="Facility Back Office", layout="wide", initial_sidebar_state="expanded")
    store = _get_store()

    with st.sidebar:
        st.title("Facility Back Office")
        role = st.selectbox("Viewing as", options=list(Role), format_func=lambda item: item.value.title())
        visible = [name for name, (permission, _) in PAGES.items() if permission is None or has_permission(role, permission)]
        page = st.radio("Page", options=visible)
        st.caption(f"Store version {store.version}")

    st.header(page)
    PAGES[page][1](store)


if __name__ == "__main__":
    main()
