"""Reports, dataset exports and the sinks that write them out."""
from backoffice.reporting.export import export_dataset
from backoffice.reporting.reports import DateRange, ReportType, generate_report, render_text_report
from backoffice.reporting.sinks import (
    ensure_output_dir,
    push_to_google_sheets,
    write_csv,
    write_excel,
    write_json,
    write_text,
)
from backoffice.reporting.templates import (
    REPORT_HEADERS,
    dataset_sections,
    records_to_rows,
    report_to_rows,
    rows_by_section,
)

__all__ = [
    "DateRange",
    "REPORT_HEADERS",
    "ReportType",
    "dataset_sections",
    "ensure_output_dir",
    "export_dataset",
    "generate_report",
    "push_to_google_sheets",
    "records_to_rows",
    "render_text_report",
    "report_to_rows",
    "rows_by_section",
    "write_csv",
    "write_excel",
    "write_json",
    "write_text",
]
