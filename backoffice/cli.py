"""Command-line entry point for generating reports and dataset exports."""
import argparse
from datetime import date
from pathlib import Path

from backoffice.core.logging import configure_logging
from backoffice.processing.pipeline import REPORT_CHOICES, SINK_CHOICES, run_report
from backoffice.reporting.reports import DateRange


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI entry point."""

    parser = argparse.ArgumentParser(description="Generate facility reports and data exports")
    parser.add_argument(
        "--report",
        choices=REPORT_CHOICES,
        default="inmate_population",
        help="Report to generate; 'dataset' exports raw records, 'comprehensive' writes a text summary",
    )
    parser.add_argument(
        "--data",
        type=Path,
        help="JSON dataset export to load (defaults to the built-in demo records)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("output/report.json"),
        help="File to write the report to",
    )
    parser.add_argument(
        "--sink",
        choices=SINK_CHOICES,
        default="json",
        help="Output format, or 'sheets' to also push report rows to Google Sheets",
    )
    parser.add_argument(
        "--start",
        type=date.fromisoformat,
        help="First day (YYYY-MM-DD) of the report window; defaults to 30 days ago",
    )
    parser.add_argument(
        "--end",
        type=date.fromisoformat,
        help="Last day (YYYY-MM-DD) of the report window; defaults to today",
    )
    parser.add_argument(
        "--include-inactive",
        action="store_true",
        help="Keep released/transferred inmates and inactive staff in dataset exports",
    )
    parser.add_argument(
        "--spreadsheet-id",
        help="Google Sheets spreadsheet ID for the sheets sink",
    )
    parser.add_argument(
        "--worksheet",
        default="Sheet1",
        help="Worksheet title inside the Google Sheets document",
    )
    parser.add_argument(
        "--service-account",
        type=Path,
        help="Path to a Google service account JSON key used for Sheets pushes",
    )
    return parser


def _date_range(args: argparse.Namespace) -> DateRange | None:
    if args.start is None and args.end is None:
        return None
    default = DateRange.last_days(30)
    return DateRange(start=args.start or default.start, end=args.end or default.end)


def main() -> None:
    """Entrypoint for running reports from the command line."""

    configure_logging()
    args = build_parser().parse_args()
    output_path = run_report(
        args.output,
        report_type=args.report,
        data_path=args.data,
        sink=args.sink,
        date_range=_date_range(args),
        include_inactive=args.include_inactive,
        spreadsheet_id=args.spreadsheet_id,
        worksheet_title=args.worksheet,
        service_account_path=args.service_account,
    )
    print(f"Wrote {output_path}")


if __name__ == "__main__":
    main()
