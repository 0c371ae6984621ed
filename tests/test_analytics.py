"""Grouped counts and age bands."""
from backoffice.core.models import Inmate
from backoffice.processing.analytics import advanced_analytics, age_bucket, count_by, sorted_histogram


def test_count_by_sums_to_input_size() -> None:
    inmates = [
        Inmate(inmate_number="1", first_name="A", last_name="A", block="A", crime_type="Theft"),
        Inmate(inmate_number="2", first_name="B", last_name="B", block="", crime_type=""),
        Inmate(inmate_number="3", first_name="C", last_name="C", block="A", crime_type="  "),
    ]

    blocks = count_by(inmates, lambda inmate: inmate.block, default="Unassigned")
    crimes = count_by(inmates, lambda inmate: inmate.crime_type)

    assert blocks == {"A": 2, "Unassigned": 1}
    assert crimes == {"Theft": 1, "Unknown": 2}
    assert sum(blocks.values()) == sum(crimes.values()) == len(inmates)


def test_count_by_uses_enum_values() -> None:
    inmates = [
        Inmate(inmate_number="1", first_name="A", last_name="A", status="active"),
        Inmate(inmate_number="2", first_name="B", last_name="B", status="released"),
    ]

    assert count_by(inmates, lambda inmate: inmate.status) == {"active": 1, "released": 1}


def test_age_bucket_boundaries(today) -> None:
    assert age_bucket("2007-10-20", today) == "Under 20"
    assert age_bucket("2006-10-19", today) == "20-29"
    assert age_bucket("1985-03-15", today) == "40-49"
    assert age_bucket("1966-10-19", today) == "60+"
    assert age_bucket("1982-11-08", today) == "40-49"
    assert age_bucket("not a date", today) == "Unknown"
    assert age_bucket("2030-01-01", today) == "Unknown"


def test_seeded_analytics(store, today) -> None:
    analytics = advanced_analytics(store.snapshot(), today=today)

    assert analytics.crime_stats == {"Theft": 1, "Assault": 1, "Drug Possession": 1}
    assert analytics.block_stats == {"A": 1, "B": 1, "C": 1}
    assert analytics.age_groups == {"40-49": 2, "30-39": 1}
    assert analytics.incident_stats.by_severity == {"medium": 1}
    assert analytics.incident_stats.by_type == {"fight": 1}
    assert analytics.medical_stats.by_type == {"checkup": 1}
    assert analytics.staff_stats.by_shift == {"day": 3}
    assert analytics.resource_stats.by_category == {"security": 1}


def test_every_histogram_sums_to_collection_size(store, today) -> None:
    snapshot = store.snapshot()
    data = advanced_analytics(snapshot, today=today).to_dict()

    for key in ("crime_stats", "block_stats", "age_groups"):
        assert sum(data[key].values()) == len(snapshot.inmates)
    for histogram in data["incident_stats"].values():
        assert sum(histogram.values()) == len(snapshot.security_incidents)
    assert sum(data["medical_stats"]["by_type"].values()) == len(snapshot.medical_records)
    for histogram in data["staff_stats"].values():
        assert sum(histogram.values()) == len(snapshot.staff)
    for histogram in data["resource_stats"].values():
        assert sum(histogram.values()) == len(snapshot.resources)


def test_empty_store_analytics(empty_store, today) -> None:
    data = advanced_analytics(empty_store.snapshot(), today=today).to_dict()

    assert data["crime_stats"] == {}
    assert data["incident_stats"] == {"by_severity": {}, "by_type": {}}


def test_sorted_histogram_orders_by_count_then_label() -> None:
    histogram = {"b": 2, "a": 2, "c": 5, "d": 1}

    assert sorted_histogram(histogram) == [("c", 5), ("a", 2), ("b", 2), ("d", 1)]
    assert sorted_histogram(histogram, limit=2) == [("c", 5), ("a", 2)]
