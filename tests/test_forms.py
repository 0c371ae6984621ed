"""Dashboard form helpers and role-based visibility."""
import pytest

from backoffice.core.access import Role, has_permission
from backoffice.core.models import InmateStatus, VisitorStatus
from backoffice.ui.forms import apply_edits, build_incident, form_updates, mark_status, split_list, status_badge


def test_split_list() -> None:
    assert split_list("Vitamin D, Ibuprofen\nInsulin,, ") == ["Vitamin D", "Ibuprofen", "Insulin"]
    assert split_list("") == []
    assert split_list(None) == []


def test_form_updates_drop_blank_values() -> None:
    assert form_updates({"block": " D ", "cell_number": "", "sentence": None, "quantity": 0}) == {
        "block": "D",
        "quantity": 0,
    }


def test_apply_edits_ignores_blank_fields(store) -> None:
    updated = apply_edits(store.inmates, "1", {"cell_number": "A-110", "block": "", "sentence": None})

    assert updated.cell_number == "A-110"
    assert updated.block == "A"
    assert updated.sentence == "2 years"


def test_apply_edits_on_deleted_record_returns_none(store) -> None:
    store.inmates.delete("1")

    assert apply_edits(store.inmates, "1", {"cell_number": "A-110"}) is None


def test_mark_status(store) -> None:
    assert mark_status(store.visitors, "1", "denied").status is VisitorStatus.DENIED
    assert mark_status(store.inmates, "3", InmateStatus.TRANSFERRED).status is InmateStatus.TRANSFERRED


def test_build_incident_checks_involved_inmates(store) -> None:
    values = {
        "type": "contraband",
        "description": "Phone in cell",
        "location": "B-205",
        "date": "2026-10-18",
        "time": "09:15",
        "severity": "high",
        "reportedBy": "Officer Wilson",
        "involved_inmates": ["2"],
    }

    incident = build_incident(values, store.inmates.all())

    assert incident.involved_inmates == ("2",)
    assert incident.reported_by == "Officer Wilson"
    with pytest.raises(ValueError, match="unknown inmate"):
        build_incident({**values, "involved_inmates": ["2", "99"]}, store.inmates.all())


def test_status_badge() -> None:
    assert status_badge(InmateStatus.ACTIVE) == "🟢 Active"
    assert status_badge("open") == "🔴 Open"
    assert status_badge("archived") == "⚪ archived"


def test_role_permissions() -> None:
    assert has_permission(Role.ADMIN, "data")
    assert has_permission("warden", "reports")
    assert not has_permission(Role.OFFICER, "medical")
    assert has_permission(Role.MEDICAL, "medical")
    assert not has_permission("janitor", "inmates")
