"""Flatten reports and records into spreadsheet-friendly rows."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

REPORT_HEADERS = ["Section", "Metric", "Value"]
METADATA_SECTION = "report"


def _clean_text(value: Any) -> Any:
    if isinstance(value, str):
        return " ".join(value.split())
    return value


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(_clean_text(item)) for item in value)
    return _clean_text(value)


def flatten_row(data: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten nested mappings into dotted columns (``contact_info.email``)."""

    row: Dict[str, Any] = {}
    for key, value in data.items():
        column = f"{prefix}{key}"
        if isinstance(value, Mapping):
            row.update(flatten_row(value, prefix=f"{column}."))
        else:
            row[column] = _cell(value)
    return row


def records_to_rows(records: Iterable[Any]) -> List[Dict[str, Any]]:
    """Convert records (or their ``to_dict`` output) into flat table rows."""

    rows = []
    for record in records:
        data = record if isinstance(record, Mapping) else record.to_dict()
        rows.append(flatten_row(data))
    return rows


def report_to_rows(report: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Turn a nested report into ``Section / Metric / Value`` rows.

    Scalar top-level keys go under the ``report`` section; each nested
    mapping becomes its own section, with deeper levels joined by dots.
    """

    rows: List[Dict[str, Any]] = []
    for key, value in report.items():
        if isinstance(value, Mapping):
            for metric, metric_value in flatten_row(value).items():
                rows.append({"Section": key, "Metric": metric, "Value": metric_value})
        elif isinstance(value, (list, tuple)):
            rows.append({"Section": METADATA_SECTION, "Metric": key, "Value": len(value)})
        else:
            rows.append({"Section": METADATA_SECTION, "Metric": key, "Value": _cell(value)})
    return rows


def rows_by_section(rows: Iterable[Mapping[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """Group ``report_to_rows`` output by section, keeping first-seen order."""

    sections: Dict[str, List[Dict[str, Any]]] = {}
    for row in rows:
        sections.setdefault(str(row["Section"]), []).append(
            {"Metric": row["Metric"], "Value": row["Value"]}
        )
    return sections


def dataset_sections(dataset: Mapping[str, Any]) -> Dict[str, List[Dict[str, Any]]]:
    """One table per exported collection, plus a metadata table."""

    sections: Dict[str, List[Dict[str, Any]]] = {}
    for key, value in dataset.items():
        if isinstance(value, list):
            sections[key] = records_to_rows(value)
        elif isinstance(value, Mapping):
            sections[key] = [{"Metric": metric, "Value": item} for metric, item in flatten_row(value).items()]
    return sections
