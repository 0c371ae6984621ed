"""Dataset export, import and demo seeding."""
import json
import logging
from pathlib import Path

import pytest

from backoffice.core.models import Inmate, InmateStatus
from backoffice.ingestion.loader import get_ingestion_alerts, load_records
from backoffice.ingestion.seed import seed_store
from backoffice.reporting.export import export_dataset


def test_seed_store_uses_stable_ids() -> None:
    store = seed_store()

    assert [inmate.id for inmate in store.inmates] == ["1", "2", "3"]
    assert store.security_incidents.get("1").involved_inmates == ("1", "2")
    assert store.snapshot().total_records() == 10


def test_export_skips_inactive_by_default(store) -> None:
    store.inmates.update("3", status="released")
    store.staff.update("2", status="inactive")

    dataset = export_dataset(store.snapshot())
    everything = export_dataset(store.snapshot(), include_inactive=True)

    assert [row["id"] for row in dataset["inmates"]] == ["1", "2"]
    assert len(dataset["staff"]) == 2
    assert len(everything["inmates"]) == 3
    assert dataset["metadata"]["total_records"] == 8
    assert dataset["metadata"]["version"] == "1.0"
    assert dataset["metadata"]["exported_by"] == "System Admin"


def test_export_selected_kinds(store) -> None:
    dataset = export_dataset(store.snapshot(), kinds=["resources"])

    assert set(dataset) == {"resources", "metadata"}
    with pytest.raises(ValueError):
        export_dataset(store.snapshot(), kinds=["cells"])


def test_dataset_round_trip(dataset_file: Path, store) -> None:
    loaded = load_records(dataset_file)

    assert loaded.snapshot().total_records() == store.snapshot().total_records()
    assert loaded.inmates.get("2") == store.inmates.get("2")
    assert loaded.medical_records.all() == store.medical_records.all()
    assert get_ingestion_alerts() == []


def test_loader_accepts_camel_case_and_reports_bad_rows(tmp_path: Path, caplog) -> None:
    path = tmp_path / "legacy.json"
    path.write_text(
        json.dumps(
            {
                "inmates": [
                    {"id": "7", "inmateNumber": "INM007", "firstName": "Ada", "lastName": "Byron", "status": "transferred"},
                    {"firstName": "Missing number"},
                    {"inmateNumber": "INM008", "firstName": "Bad", "lastName": "Status", "status": "paroled"},
                ],
                "medicalRecords": [{"inmateId": "7", "date": "2024-03-01", "type": "treatment"}],
                "securityIncidents": "not a list",
                "metadata": {"version": "1.0"},
            }
        ),
        encoding="utf-8",
    )
    caplog.set_level(logging.ERROR)

    store = load_records(path)

    assert [inmate.id for inmate in store.inmates] == ["7"]
    assert store.inmates.get("7").status is InmateStatus.TRANSFERRED
    assert len(store.medical_records) == 1
    alerts = get_ingestion_alerts()
    assert len(alerts) == 3
    assert any("inmates row 1" in alert for alert in alerts)
    assert any("securityIncidents" in alert for alert in alerts)
    assert "Failed to parse inmates row 2" in caplog.text


def test_loader_into_existing_store(tmp_path: Path, empty_store) -> None:
    path = tmp_path / "one.json"
    path.write_text(
        json.dumps({"inmates": [Inmate(inmate_number="X", first_name="A", last_name="B").to_dict()]}),
        encoding="utf-8",
    )

    store = load_records(path, store=empty_store)

    assert store is empty_store
    assert len(store.inmates) == 1
    assert store.inmates.all()[0].id


def test_loader_rejects_non_object_payload(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(ValueError):
        load_records(path)


def test_loader_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_records(tmp_path / "absent.json")


def test_loader_reassigns_repeated_ids(tmp_path: Path) -> None:
    path = tmp_path / "dupes.json"
    rows = [
        {"id": "7", "inmateNumber": "INM007", "firstName": "A", "lastName": "Same"},
        {"id": "7", "inmateNumber": "INM008", "firstName": "B", "lastName": "Same"},
    ]
    path.write_text(json.dumps({"inmates": rows}), encoding="utf-8")

    store = load_records(path)

    ids = [inmate.id for inmate in store.inmates]
    assert len(set(ids)) == len(ids) == 2
    assert store.inmates.get("7").first_name == "A"
    assert any("Duplicate inmates id 7" in alert for alert in get_ingestion_alerts())

    store.inmates.delete("7")

    assert [inmate.first_name for inmate in store.inmates] == ["B"]
    assert store.inmates.get("7") is None
