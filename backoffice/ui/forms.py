"""Form helpers used by the Streamlit dashboard and other surfaces."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from backoffice.core.models import Inmate, SecurityIncident
from backoffice.core.store import RecordCollection


def split_list(raw: str | None) -> List[str]:
    """Split comma or newline separated input into trimmed, non-empty items."""

    if not raw:
        return []
    parts = raw.replace("\n", ",").split(",")
    return [part.strip() for part in parts if part.strip()]


def form_updates(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep only the fields a user actually filled in.

    Blank text inputs come back as ``""`` or ``None``; both mean "leave as is".
    """

    updates = {}
    for key, value in values.items():
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        updates[key] = value.strip() if isinstance(value, str) else value
    return updates


def apply_edits(collection: RecordCollection, record_id: str, values: Mapping[str, Any]):
    """Apply user-provided form values to a stored record.

    Returns the updated record, or ``None`` if it was deleted meanwhile.
    """

    return collection.update(record_id, form_updates(values))


def mark_status(collection: RecordCollection, record_id: str, status: str):
    """Move a record to a new lifecycle status."""

    return collection.update(record_id, status=status)


def build_incident(values: Mapping[str, Any], inmates: Iterable[Inmate]) -> SecurityIncident:
    """Build an incident from form values, checking involved inmates exist."""

    known = {inmate.id for inmate in inmates}
    involved = list(values.get("involved_inmates") or [])
    missing = [inmate_id for inmate_id in involved if inmate_id not in known]
    if missing:
        raise ValueError(f"unknown inmate id(s): {', '.join(missing)}")
    data = dict(values)
    data["involved_inmates"] = involved
    return SecurityIncident.from_dict(data)


def status_badge(status: Any) -> str:
    """Return a color-coded label for table previews."""

    value = getattr(status, "value", status)
    mapping = {
        "active": "🟢 Active",
        "approved": "🟢 Approved",
        "available": "🟢 Available",
        "resolved": "🟢 Resolved",
        "pending": "🟡 Pending",
        "investigating": "🟡 Investigating",
        "in_use": "🟡 In use",
        "maintenance": "🟠 Maintenance",
        "transferred": "🟠 Transferred",
        "open": "🔴 Open",
        "denied": "🔴 Denied",
        "depleted": "🔴 Depleted",
        "released": "⚪ Released",
        "inactive": "⚪ Inactive",
    }
    return mapping.get(str(value), f"⚪ {value}")
