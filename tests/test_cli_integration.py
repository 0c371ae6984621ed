"""Integration-style tests that exercise the CLI report entrypoint."""
import csv
import json
import sys
from pathlib import Path

import pytest
from openpyxl import load_workbook

from backoffice.processing import pipeline


@pytest.fixture(autouse=True)
def _reset_argv(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure sys.argv starts clean for each CLI invocation."""

    monkeypatch.setattr(sys, "argv", ["backoffice"])


def test_cli_writes_json_report_from_seed_data(tmp_path: Path, run_cli, capsys) -> None:
    output = tmp_path / "report.json"

    run_cli(["--output", str(output)])

    report = json.loads(output.read_text(encoding="utf-8"))
    assert report["report_type"] == "inmate_population"
    assert report["summary"]["active_inmates"] == 3
    assert f"Wrote {output}" in capsys.readouterr().out


def test_cli_writes_csv_report(tmp_path: Path, dataset_file: Path, run_cli) -> None:
    output = tmp_path / "incidents.csv"

    run_cli(
        [
            "--report",
            "security_incidents",
            "--data",
            str(dataset_file),
            "--output",
            str(output),
            "--sink",
            "csv",
            "--start",
            "2024-01-01",
            "--end",
            "2024-01-31",
        ]
    )

    with output.open(encoding="utf-8") as fh:
        rows = list(csv.DictReader(fh))

    assert list(rows[0]) == ["Section", "Metric", "Value"]
    summary = {row["Metric"]: row["Value"] for row in rows if row["Section"] == "summary"}
    assert summary["total_incidents"] == "1"
    assert {"Section": "date_range", "Metric": "start", "Value": "2024-01-01"} in rows


def test_cli_writes_excel_report(tmp_path: Path, run_cli) -> None:
    output = tmp_path / "ops.xlsx"

    run_cli(["--report", "daily_operations", "--output", str(output), "--sink", "excel"])

    workbook = load_workbook(output)
    assert workbook.sheetnames == ["report", "summary", "staff_by_shift", "resource_statuses", "capacity_by_block"]
    sheet = workbook["staff_by_shift"]
    assert [cell.value for cell in sheet[2]] == ["day", 3]


def test_cli_dataset_export_to_csv_tables(tmp_path: Path, run_cli) -> None:
    output = tmp_path / "export.csv"

    run_cli(["--report", "dataset", "--output", str(output), "--sink", "csv"])

    with (tmp_path / "export_inmates.csv").open(encoding="utf-8") as fh:
        inmates = list(csv.DictReader(fh))
    assert [row["inmate_number"] for row in inmates] == ["INM001", "INM002", "INM003"]
    assert (tmp_path / "export_security_incidents.csv").exists()
    assert (tmp_path / "export_metadata.csv").exists()


def test_cli_dataset_export_round_trips_through_data_flag(tmp_path: Path, run_cli) -> None:
    exported = tmp_path / "export.json"
    report = tmp_path / "report.json"

    run_cli(["--report", "dataset", "--output", str(exported)])
    run_cli(["--data", str(exported), "--output", str(report)])

    assert json.loads(exported.read_text(encoding="utf-8"))["metadata"]["total_records"] == 10
    assert json.loads(report.read_text(encoding="utf-8"))["summary"]["total_inmates"] == 3


def test_cli_comprehensive_text_report(tmp_path: Path, run_cli) -> None:
    output = tmp_path / "report.txt"

    run_cli(["--report", "comprehensive", "--output", str(output), "--sink", "text"])

    assert "EXECUTIVE SUMMARY" in output.read_text(encoding="utf-8")


def test_cli_pushes_to_sheets(
    tmp_path: Path, run_cli, monkeypatch: pytest.MonkeyPatch, fake_service_account_file: Path
) -> None:
    captured = {}

    def fake_push(rows, spreadsheet_id, worksheet_title, service_account_path):
        captured["rows"] = list(rows)
        captured["spreadsheet_id"] = spreadsheet_id
        captured["worksheet_title"] = worksheet_title
        captured["service_account_path"] = service_account_path

    monkeypatch.setattr(pipeline, "push_to_google_sheets", fake_push)
    output = tmp_path / "report.json"

    run_cli(
        [
            "--output",
            str(output),
            "--sink",
            "sheets",
            "--spreadsheet-id",
            "sheet-123",
            "--worksheet",
            "Population",
            "--service-account",
            str(fake_service_account_file),
        ]
    )

    assert output.exists()
    assert captured["spreadsheet_id"] == "sheet-123"
    assert captured["worksheet_title"] == "Population"
    assert captured["service_account_path"] == fake_service_account_file
    assert {"Section": "summary", "Metric": "total_inmates", "Value": 3} in captured["rows"]


def test_auto_sync_pushes_when_enabled(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, fake_service_account_file: Path
) -> None:
    pushed = []
    monkeypatch.setattr(pipeline, "push_to_google_sheets", lambda rows, **kwargs: pushed.append(kwargs))
    monkeypatch.setenv("GOOGLE_SHEETS_AUTO_SYNC", "1")
    monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "auto-sheet")
    monkeypatch.setenv("GOOGLE_SHEETS_SERVICE_ACCOUNT", str(fake_service_account_file))

    pipeline.run_report(tmp_path / "report.csv", sink="csv")

    assert pushed == [
        {
            "spreadsheet_id": "auto-sheet",
            "worksheet_title": "Sheet1",
            "service_account_path": fake_service_account_file,
        }
    ]


def test_sheets_sink_requires_spreadsheet_id(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="spreadsheet_id"):
        pipeline.run_report(tmp_path / "report.json", sink="sheets")


@pytest.mark.parametrize(
    ("report", "sink"),
    [("comprehensive", "json"), ("inmate_population", "text"), ("dataset", "sheets"), ("bogus", "json"), ("dataset", "xml")],
)
def test_run_report_rejects_bad_combinations(tmp_path: Path, report: str, sink: str) -> None:
    with pytest.raises(ValueError):
        pipeline.run_report(tmp_path / "out", report_type=report, sink=sink)


def test_run_report_without_records_fails(tmp_path: Path) -> None:
    data = tmp_path / "empty.json"
    data.write_text(json.dumps({"inmates": [], "metadata": {}}), encoding="utf-8")

    with pytest.raises(ValueError, match="No records found"):
        pipeline.run_report(tmp_path / "report.json", data_path=data)
    assert not (tmp_path / "report.json").exists()
