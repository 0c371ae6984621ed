"""Streamlit dashboard and the form helpers behind it."""
from backoffice.ui.forms import apply_edits, build_incident, form_updates, mark_status, split_list, status_badge

__all__ = [
    "apply_edits",
    "build_incident",
    "form_updates",
    "mark_status",
    "split_list",
    "status_badge",
]
