"""Cell value helpers shared by the flatteners."""

import json
import logging
from datetime import date, datetime, timezone
from typing import Any, Iterable, Optional, Union

logger = logging.getLogger(__name__)

# Formats the order API uses for its ISO-ish timestamps
TIMESTAMP_FORMATS = [
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
]

# Epoch values above this are milliseconds (year 3000 in seconds)
MAX_EPOCH_SECONDS = 32503680000


def yes_no(value: Any) -> str:
    """Render a flag as the literal "Yes" or "No"."""
    return "Yes" if value else "No"


def _to_naive_utc(dt: datetime) -> datetime:
    # Workbook cells cannot hold timezone-aware datetimes
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.replace(tzinfo=None)


def epoch_to_datetime(value: Any) -> Optional[datetime]:
    """Convert epoch seconds to a naive UTC datetime.

    Absent, zero, and non-numeric values give None rather than the epoch.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not value:
        return None

    if value > MAX_EPOCH_SECONDS:
        value = value / 1000

    try:
        return _to_naive_utc(datetime.fromtimestamp(value, tz=timezone.utc))
    except (OverflowError, OSError, ValueError):
        logger.warning(f"Epoch value out of range: {value}")
        return None


def parse_timestamp(value: Any) -> Union[datetime, str, None]:
    """Parse an ISO-ish timestamp into a naive UTC datetime.

    Text that matches none of the known formats is returned unchanged so
    the sheet still shows what the API sent.
    """
    if value is None or value == "":
        return None

    if not isinstance(value, str):
        return epoch_to_datetime(value)

    for fmt in TIMESTAMP_FORMATS:
        try:
            return _to_naive_utc(datetime.strptime(value, fmt))
        except ValueError:
            continue

    logger.warning(f"Could not parse timestamp: {value}")
    return value


def parse_business_date(value: Any) -> Union[date, str, int, None]:
    """Turn a yyyyMMdd business date (int or text) into a date."""
    if value is None or value == "":
        return None

    text = str(value)
    if len(text) == 8 and text.isdigit():
        try:
            return datetime.strptime(text, "%Y%m%d").date()
        except ValueError:
            pass

    logger.warning(f"Could not parse business date: {value}")
    return value


def to_json_text(value: Any) -> str:
    """Serialize to compact JSON text for a single cell."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def format_quantity(value: Union[int, float]) -> str:
    """Render a quantity without a trailing ".0" when it is integral."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def join_text(values: Iterable[Any], separator: str = ", ") -> str:
    """Join the non-empty values of a list into one cell."""
    return separator.join(str(v) for v in values if v is not None and v != "")
