"""Shared utility functions for the backoffice package."""
import logging
import os
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M",
]


def get_config_value(key: str, default: str = "") -> str:
    """Get configuration value from Streamlit secrets or environment variables.

    Checks Streamlit secrets first (for cloud deployment), then falls back
    to environment variables (for local development).
    """
    try:
        import streamlit as st
        if hasattr(st, "secrets") and key in st.secrets:
            return str(st.secrets[key])
    except (ImportError, FileNotFoundError, KeyError):
        pass

    return os.getenv(key, default)


def load_env_file(path: Path) -> None:
    """Load environment variables from a file if it exists."""
    if not path.exists():
        return

    try:
        with path.open(encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                if not key or key in os.environ:
                    continue
                os.environ[key] = value.strip().strip('"').strip("'")
    except OSError as exc:
        logger.debug("Could not load env file %s: %s", path, exc)


def _int_setting(key: str, default: int) -> int:
    raw = get_config_value(key, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r; using %d", key, raw, default)
        return default


@dataclass(frozen=True)
class Settings:
    """Runtime knobs for derived statistics and data loading."""

    facility_capacity: int = 500
    release_window_days: int = 30
    recent_incident_limit: int = 5
    data_file: Optional[Path] = None


def load_settings() -> Settings:
    """Read settings from Streamlit secrets or the environment."""

    data_file = get_config_value("BACKOFFICE_DATA_FILE")
    return Settings(
        facility_capacity=_int_setting("FACILITY_CAPACITY", 500),
        release_window_days=_int_setting("RELEASE_WINDOW_DAYS", 30),
        recent_incident_limit=_int_setting("RECENT_INCIDENT_LIMIT", 5),
        data_file=Path(data_file) if data_file else None,
    )


def parse_date(raw: Any) -> Optional[date]:
    """Parse a record date leniently, returning ``None`` instead of raising."""

    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if not text:
        return None
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def in_range(raw: Any, start: Optional[date], end: Optional[date]) -> bool:
    """Return True when ``raw`` parses to a date inside ``[start, end]``.

    Open bounds are unbounded; unparseable dates are never in range.
    """

    parsed = parse_date(raw)
    if parsed is None:
        return False
    if start is not None and parsed < start:
        return False
    if end is not None and parsed > end:
        return False
    return True


def age_on(date_of_birth: Any, today: date) -> Optional[int]:
    """Return the age in whole years on ``today``, or None for a bad/future DOB."""

    born = parse_date(date_of_birth)
    if born is None or born > today:
        return None
    had_birthday = (today.month, today.day) >= (born.month, born.day)
    return today.year - born.year - (0 if had_birthday else 1)


def days_from(today: date, days: int) -> date:
    return today + timedelta(days=days)
