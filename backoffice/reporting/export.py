"""Full dataset export in the same shape the loader reads back."""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional

from backoffice.core.models import InmateStatus, StaffStatus
from backoffice.core.store import COLLECTION_KINDS

if TYPE_CHECKING:
    from backoffice.core.store import StoreSnapshot

EXPORT_VERSION = "1.0"


def export_dataset(
    snapshot: "StoreSnapshot",
    kinds: Optional[Iterable[str]] = None,
    include_inactive: bool = False,
    exported_by: str = "System Admin",
) -> Dict[str, Any]:
    """Serialize the selected collections plus export metadata.

    Without ``include_inactive`` only active inmates and staff are written;
    the other collections have no active/inactive notion and go out whole.
    """

    selected = list(kinds) if kinds is not None else list(COLLECTION_KINDS)
    unknown = [kind for kind in selected if kind not in COLLECTION_KINDS]
    if unknown:
        raise ValueError(f"unknown collection(s): {', '.join(unknown)}")

    data: Dict[str, Any] = {}
    for kind in selected:
        records = getattr(snapshot, kind)
        if not include_inactive and kind == "inmates":
            records = [record for record in records if record.status == InmateStatus.ACTIVE]
        elif not include_inactive and kind == "staff":
            records = [record for record in records if record.status == StaffStatus.ACTIVE]
        data[kind] = [record.to_dict() for record in records]

    data["metadata"] = {
        "export_date": datetime.now().isoformat(timespec="seconds"),
        "total_records": sum(len(rows) for rows in data.values()),
        "exported_by": exported_by,
        "version": EXPORT_VERSION,
    }
    return data
