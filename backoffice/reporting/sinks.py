"""Sinks for writing reports and dataset exports to files or Google Sheets."""
from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Sequence

# Excel caps sheet titles at 31 characters.
_MAX_SHEET_TITLE = 31


def ensure_output_dir(output_path: Path) -> None:
    """Create parent folders for sink outputs when missing."""

    output_path.parent.mkdir(parents=True, exist_ok=True)


def _headers(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    headers: List[str] = []
    for row in rows:
        for key in row:
            if key not in headers:
                headers.append(key)
    return headers


def write_json(payload: Mapping[str, Any], output_path: Path) -> None:
    """Write a report or dataset export as indented JSON."""

    ensure_output_dir(output_path)
    output_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def write_text(content: str, output_path: Path) -> None:
    ensure_output_dir(output_path)
    output_path.write_text(content, encoding="utf-8")


def write_csv(
    rows: Iterable[Dict[str, Any]], output_path: Path, headers: Sequence[str] | None = None
) -> None:
    """Write rows to a CSV file; headers default to the union of row keys."""

    rows = list(rows)
    ensure_output_dir(output_path)
    fieldnames = list(headers) if headers else _headers(rows)
    if not fieldnames:
        return

    with output_path.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=fieldnames, restval="")
        writer.writeheader()
        writer.writerows(rows)


def write_excel(sections: Mapping[str, Iterable[Dict[str, Any]]], output_path: Path) -> None:
    """Write each section to its own worksheet using openpyxl."""

    sections = {title: list(rows) for title, rows in sections.items()}
    if not sections:
        return

    try:
        from openpyxl import Workbook
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise ImportError("openpyxl is required for Excel sinks") from exc

    ensure_output_dir(output_path)
    workbook = Workbook()
    workbook.remove(workbook.active)
    for title, rows in sections.items():
        sheet = workbook.create_sheet(title=title[:_MAX_SHEET_TITLE])
        headers = _headers(rows)
        if not headers:
            continue
        sheet.append(headers)
        for row in rows:
            sheet.append([row.get(header, "") for header in headers])
    workbook.save(output_path)


def push_to_google_sheets(
    rows: Iterable[Dict[str, Any]],
    spreadsheet_id: str,
    worksheet_title: str = "Sheet1",
    service_account_path: Path | None = None,
) -> None:
    """Upload rows to a Google Sheets worksheet using a service account."""

    rows = list(rows)
    if not rows:
        return

    try:
        import gspread
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise ImportError("gspread is required for Google Sheets sinks") from exc

    client = (
        gspread.service_account(filename=str(service_account_path))
        if service_account_path
        else gspread.service_account()
    )
    worksheet = client.open_by_key(spreadsheet_id).worksheet(worksheet_title)
    worksheet.clear()
    headers = _headers(rows)
    worksheet.append_rows([headers] + [[row.get(h, "") for h in headers] for row in rows])
