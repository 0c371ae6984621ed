"""Back-office record keeping for a correctional facility."""
from backoffice.core import (
    RecordStore,
    StoreSnapshot,
    configure_logging,
    load_settings,
)
from backoffice.ingestion import get_ingestion_alerts, load_records, seed_store
from backoffice.processing.analytics import advanced_analytics
from backoffice.processing.pipeline import run_report
from backoffice.processing.search import advanced_search, search_all
from backoffice.processing.stats import dashboard_stats
from backoffice.reporting import (
    DateRange,
    ReportType,
    export_dataset,
    generate_report,
    render_text_report,
)

__all__ = [
    "DateRange",
    "RecordStore",
    "ReportType",
    "StoreSnapshot",
    "advanced_analytics",
    "advanced_search",
    "configure_logging",
    "dashboard_stats",
    "export_dataset",
    "generate_report",
    "get_ingestion_alerts",
    "load_records",
    "load_settings",
    "render_text_report",
    "run_report",
    "search_all",
    "seed_store",
]
