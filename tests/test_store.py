"""Record store mutations, snapshots and change notification."""
import logging

import pytest

from backoffice.core.models import Inmate, InmateStatus, Staff, Visitor


def _inmate(**overrides) -> Inmate:
    values = {
        "inmate_number": "INM100",
        "first_name": "Tom",
        "last_name": "Hale",
        "date_of_birth": "1980-05-05",
        "block": "D",
        "cell_number": "D-1",
        "crime_type": "Fraud",
    }
    values.update(overrides)
    return Inmate(**values)


def test_add_assigns_fresh_id_and_round_trips_fields(empty_store) -> None:
    original = _inmate(id="caller-chosen")

    stored = empty_store.inmates.add(original)

    assert stored.id and stored.id != "caller-chosen"
    fetched = empty_store.inmates.get(stored.id)
    expected = original.to_dict()
    actual = fetched.to_dict()
    expected.pop("id")
    actual.pop("id")
    assert actual == expected


def test_ids_are_unique(empty_store) -> None:
    ids = {empty_store.inmates.add(_inmate()).id for _ in range(20)}

    assert len(ids) == 20


def test_update_merges_fields(store) -> None:
    updated = store.inmates.update("1", {"cell_number": "A-999"}, status="released")

    assert updated.cell_number == "A-999"
    assert updated.status is InmateStatus.RELEASED
    assert updated.first_name == "John"
    assert store.inmates.get("1") == updated


def test_empty_patch_is_idempotent(store) -> None:
    before = store.inmates.get("1")
    version = store.version

    assert store.inmates.update("1", {}) == before
    assert store.inmates.get("1") == before
    assert store.version == version


def test_update_missing_id_returns_none_and_warns(store, caplog) -> None:
    caplog.set_level(logging.WARNING)
    before = store.snapshot()

    assert store.inmates.update("nope", cell_number="X") is None

    assert store.snapshot().inmates == before.inmates
    assert "no inmates record with id nope" in caplog.text


def test_update_rejects_id_and_unknown_fields(store) -> None:
    with pytest.raises(ValueError):
        store.inmates.update("1", id="2")
    with pytest.raises(ValueError, match="unknown Inmate field"):
        store.inmates.update("1", nickname="JD")
    with pytest.raises(ValueError):
        store.inmates.update("1", status="missing")


def test_double_delete_is_safe(store) -> None:
    removed = store.visitors.delete("1")

    assert isinstance(removed, Visitor)
    assert store.visitors.delete("1") is None
    assert len(store.visitors) == 0


def test_collections_are_copy_on_write(store) -> None:
    snapshot = store.snapshot()
    held = store.inmates.all()

    store.inmates.add(_inmate())
    store.inmates.delete("1")

    assert len(snapshot.inmates) == 3
    assert held == snapshot.inmates
    assert len(store.snapshot().inmates) == 3
    assert store.snapshot().version > snapshot.version


def test_add_rejects_wrong_record_type(store) -> None:
    staff = Staff(employee_id="EMP9", first_name="A", last_name="B")

    with pytest.raises(TypeError):
        store.inmates.add(staff)


def test_subscribers_receive_new_snapshots(empty_store) -> None:
    seen = []
    unsubscribe = empty_store.subscribe(seen.append)

    empty_store.inmates.add(_inmate())
    unsubscribe()
    empty_store.inmates.add(_inmate())

    assert len(seen) == 1
    assert seen[0].version == 1
    assert len(seen[0].inmates) == 1


def test_load_keeps_supplied_ids(empty_store) -> None:
    empty_store.inmates.load([_inmate(id="keep-me"), _inmate()])

    ids = [inmate.id for inmate in empty_store.inmates]
    assert ids[0] == "keep-me"
    assert ids[1]


def test_unknown_collection_kind(store) -> None:
    with pytest.raises(KeyError):
        store.collection("parolees")
    assert store.collection("staff") is store.staff


def test_store_convenience_reads(store, today) -> None:
    assert [inmate.id for inmate in store.search_inmates("mike")] == ["2"]
    assert len(store.filter_inmates(block="C")) == 1
    assert store.search_all("doe").total == 2
    assert store.dashboard_stats(today=today).total_inmates == 3
    assert store.advanced_analytics(today=today).crime_stats["Theft"] == 1


def test_load_gives_repeated_ids_fresh_ones(empty_store, caplog) -> None:
    caplog.set_level(logging.WARNING)

    empty_store.inmates.load([_inmate(id="dup"), _inmate(id="dup", first_name="Second")])

    ids = [inmate.id for inmate in empty_store.inmates]
    assert ids[0] == "dup"
    assert ids[1] != "dup"
    assert "Duplicate inmates id dup" in caplog.text
