"""Load a JSON dataset export back into a record store."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping

from backoffice.core.store import COLLECTION_KINDS, RecordStore

logger = logging.getLogger(__name__)

_INGESTION_ALERTS: list[str] = []

# camelCase collection names written by older exports.
_KIND_ALIASES = {
    "medicalRecords": "medical_records",
    "securityIncidents": "security_incidents",
}


def _collections(payload: Mapping[str, Any]) -> Dict[str, List[Any]]:
    found: Dict[str, List[Any]] = {}
    for key, rows in payload.items():
        kind = _KIND_ALIASES.get(key, key)
        if kind not in COLLECTION_KINDS:
            continue
        if not isinstance(rows, list):
            _INGESTION_ALERTS.append(f"Section {key} is not a list; skipped")
            logger.warning("Section %s in dataset is not a list; skipping", key)
            continue
        found[kind] = rows
    return found


def load_records(path: Path, store: RecordStore | None = None) -> RecordStore:
    """Parse a dataset file into ``store`` (or a new store).

    Rows that cannot be turned into records are logged and recorded as
    ingestion alerts instead of aborting the load.
    """

    global _INGESTION_ALERTS
    _INGESTION_ALERTS = []

    logger.info("Loading records from %s", path)
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"{path} does not contain a JSON object of record collections")

    store = store or RecordStore()
    loaded = 0
    for kind, rows in _collections(payload).items():
        record_type = COLLECTION_KINDS[kind]
        records = []
        seen_ids = set()
        for index, row in enumerate(rows):
            try:
                record = record_type.from_dict(row)
            except (TypeError, ValueError, AttributeError) as exc:
                logger.exception("Failed to parse %s row %d in %s", kind, index, path.name)
                _INGESTION_ALERTS.append(f"Failed to parse {kind} row {index}: {exc}")
                continue
            if record.id and record.id in seen_ids:
                _INGESTION_ALERTS.append(f"Duplicate {kind} id {record.id} in row {index}; assigned a new id")
            seen_ids.add(record.id)
            records.append(record)
        store.collection(kind).load(records)
        loaded += len(records)

    logger.info("Loaded %d records", loaded)
    return store


def get_ingestion_alerts() -> List[str]:
    """Return a copy of the ingestion alerts recorded during ``load_records``."""

    return list(_INGESTION_ALERTS)
