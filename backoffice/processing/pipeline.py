"""Pipeline orchestration: load records, derive a report, write it to a sink."""
import logging
import os
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from backoffice.core.store import RecordStore
from backoffice.core.utils import Settings, load_env_file, load_settings
from backoffice.ingestion.loader import get_ingestion_alerts, load_records
from backoffice.ingestion.seed import seed_store
from backoffice.reporting.export import export_dataset
from backoffice.reporting.reports import DateRange, ReportType, generate_report, render_text_report
from backoffice.reporting.sinks import (
    push_to_google_sheets,
    write_csv,
    write_excel,
    write_json,
    write_text,
)
from backoffice.reporting.templates import (
    REPORT_HEADERS,
    dataset_sections,
    report_to_rows,
    rows_by_section,
)

DATASET = "dataset"
COMPREHENSIVE = "comprehensive"
REPORT_CHOICES = [report_type.value for report_type in ReportType] + [DATASET, COMPREHENSIVE]
SINK_CHOICES = ["json", "csv", "text", "excel", "sheets"]

DEFAULT_SERVICE_ACCOUNT_PATHS = [
    Path("secrets/service_account.json"),
    Path("credentials/service_account.json"),
]
DEFAULT_SHEETS_ENV_FILE = Path("secrets/sheets.env")
_SHEETS_ENV_LOADED = False


logger = logging.getLogger(__name__)


def _ensure_sheets_env() -> None:
    """Populate Google Sheets env vars from secrets/sheets.env."""

    global _SHEETS_ENV_LOADED
    if _SHEETS_ENV_LOADED:
        return
    _SHEETS_ENV_LOADED = True

    env_path = Path(os.getenv("GOOGLE_SHEETS_ENV_FILE", DEFAULT_SHEETS_ENV_FILE))
    load_env_file(env_path)


def _default_service_account_path() -> Optional[Path]:
    for candidate in DEFAULT_SERVICE_ACCOUNT_PATHS:
        if candidate.exists():
            return candidate
    return None


def _resolve_sheets_target(
    spreadsheet_id: Optional[str],
    worksheet_title: str,
    explicit_account_path: Optional[Path],
) -> Dict[str, Any]:
    _ensure_sheets_env()
    spreadsheet_id = spreadsheet_id or os.getenv("GOOGLE_SHEETS_SPREADSHEET_ID")
    if not spreadsheet_id:
        raise ValueError("spreadsheet_id is required when sink='sheets'")

    account_path = explicit_account_path or _default_service_account_path()
    if not account_path:
        raise ValueError(
            "Provide --service-account pointing to your Google credentials or place a file at "
            f"{DEFAULT_SERVICE_ACCOUNT_PATHS[0]}"
        )

    return {
        "spreadsheet_id": spreadsheet_id,
        "worksheet_title": worksheet_title,
        "service_account_path": account_path,
    }


def auto_sheets_target() -> Optional[Dict[str, Any]]:
    """Return the Sheets target for automatic report sync, if one is configured."""

    _ensure_sheets_env()
    if os.getenv("GOOGLE_SHEETS_AUTO_SYNC", "0") != "1":
        return None

    spreadsheet_id = os.getenv("GOOGLE_SHEETS_SPREADSHEET_ID")
    if not spreadsheet_id:
        logger.warning("Auto Sheets sync is enabled but GOOGLE_SHEETS_SPREADSHEET_ID is missing.")
        return None

    worksheet = os.getenv("GOOGLE_SHEETS_WORKSHEET", "Sheet1")
    account_env = os.getenv("GOOGLE_SHEETS_SERVICE_ACCOUNT")
    account_path = Path(account_env) if account_env else _default_service_account_path()
    if not account_path:
        logger.warning("Auto Sheets sync is enabled but no service account JSON was found.")
        return None

    return {
        "spreadsheet_id": spreadsheet_id,
        "worksheet_title": worksheet,
        "service_account_path": account_path,
    }


def load_store(data_path: Optional[Path] = None) -> RecordStore:
    """Load a dataset file, or fall back to the demo seed records."""

    if data_path is None:
        logger.info("No dataset file given; using demo seed records")
        return seed_store()

    store = load_records(data_path)
    alerts = get_ingestion_alerts()
    if alerts:
        logger.warning("Encountered %d ingestion alerts during loading", len(alerts))
        for alert in alerts:
            logger.warning("Alert: %s", alert)
    return store


def run_report(
    output_path: Path,
    report_type: str = ReportType.INMATE_POPULATION.value,
    data_path: Path | None = None,
    sink: str = "json",
    date_range: DateRange | None = None,
    include_inactive: bool = False,
    spreadsheet_id: str | None = None,
    worksheet_title: str = "Sheet1",
    service_account_path: Path | None = None,
    today: date | None = None,
    settings: Settings | None = None,
) -> Path:
    """Load records, build the requested report, and write it to ``sink``."""

    if report_type not in REPORT_CHOICES:
        raise ValueError(f"Unknown report {report_type!r}; choose one of {', '.join(REPORT_CHOICES)}")
    if sink not in SINK_CHOICES:
        raise ValueError(f"Unknown sink {sink!r}; choose one of {', '.join(SINK_CHOICES)}")
    if (report_type == COMPREHENSIVE) != (sink == "text"):
        raise ValueError("The comprehensive report is plain text; use it with sink='text' only")
    if report_type == DATASET and sink == "sheets":
        raise ValueError("Dataset exports span several tables; use the json, csv or excel sink")

    settings = settings or load_settings()
    data_path = data_path or settings.data_file

    logger.info("Report run starting: %s -> %s (%s)", report_type, output_path, sink)
    snapshot = load_store(data_path).snapshot()
    if not snapshot.total_records():
        message = (
            f"No records found in {data_path}. "
            "Verify the file is a dataset export with at least one collection."
        )
        logger.error(message)
        raise ValueError(message)
    logger.info("Loaded %d records", snapshot.total_records())

    if report_type == COMPREHENSIVE:
        write_text(render_text_report(snapshot, today=today), output_path)
        logger.info("Wrote text report to %s", output_path)
        return output_path

    if report_type == DATASET:
        dataset = export_dataset(snapshot, include_inactive=include_inactive)
        _write_dataset(dataset, output_path, sink)
        return output_path

    payload = generate_report(
        snapshot,
        report_type,
        date_range=date_range,
        today=today,
        capacity=settings.facility_capacity,
    )
    rows = report_to_rows(payload)

    if sink == "csv":
        write_csv(rows, output_path, headers=REPORT_HEADERS)
        logger.info("Wrote CSV report to %s", output_path)
    elif sink == "excel":
        write_excel(rows_by_section(rows), output_path)
        logger.info("Wrote Excel report to %s", output_path)
    else:
        write_json(payload, output_path)
        logger.info("Wrote JSON report to %s", output_path)

    if sink == "sheets":
        sheets_target = _resolve_sheets_target(
            spreadsheet_id=spreadsheet_id,
            worksheet_title=worksheet_title,
            explicit_account_path=service_account_path,
        )
        _push_rows_to_sheets(rows, sheets_target)
    else:
        _maybe_auto_sync(rows)
    return output_path


def _write_dataset(dataset: Dict[str, Any], output_path: Path, sink: str) -> None:
    sections = dataset_sections(dataset)
    if sink == "excel":
        write_excel(sections, output_path)
        logger.info("Wrote Excel dataset export to %s", output_path)
    elif sink == "csv":
        for kind, rows in sections.items():
            target = output_path.with_name(f"{output_path.stem}_{kind}{output_path.suffix or '.csv'}")
            write_csv(rows, target)
            logger.info("Wrote %d %s rows to %s", len(rows), kind, target)
    else:
        write_json(dataset, output_path)
        logger.info(
            "Wrote dataset export (%d records) to %s", dataset["metadata"]["total_records"], output_path
        )


def _push_rows_to_sheets(rows: Iterable[Dict[str, Any]], target: Dict[str, Any]) -> None:
    push_to_google_sheets(
        rows,
        spreadsheet_id=target["spreadsheet_id"],
        worksheet_title=target["worksheet_title"],
        service_account_path=target["service_account_path"],
    )


def _maybe_auto_sync(rows: List[Dict[str, Any]]) -> None:
    target = auto_sheets_target()
    if not target:
        return
    _push_rows_to_sheets(rows, target)
    logger.info(
        "Pushed %d rows to Google Sheets document %s (worksheet %s)",
        len(rows),
        target["spreadsheet_id"],
        target["worksheet_title"],
    )
