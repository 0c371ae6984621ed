"""Data ingestion: demo seed records and JSON dataset imports."""
from backoffice.ingestion.loader import get_ingestion_alerts, load_records
from backoffice.ingestion.seed import seed_store

__all__ = [
    "get_ingestion_alerts",
    "load_records",
    "seed_store",
]
