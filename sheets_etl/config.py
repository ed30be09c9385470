"""Run-level settings for the sheets ETL.

API credentials are read by each client from its own environment variables;
this module only holds what the entry operations need to run.
"""

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from sheets_etl.exceptions import ConfigError

DEFAULT_WORKBOOK_PATH = "pos_sheets.xlsx"
BUSINESS_DATE_FORMAT = "%Y%m%d"

# Worksheet names are part of the output contract
PRODUCTS_SHEET = "Products"
PRODUCTS_DETAILED_SHEET = "Products Detailed"
ORDERS_SHEET = "Orders"
ORDERS_DETAILED_SHEET = "Orders Detailed"

# Row 1 of every sheet holds the column headers; data starts right below
HEADER_ROW = 1
FIRST_DATA_ROW = HEADER_ROW + 1


@dataclass
class Settings:
    """Settings shared by all import operations.

    Attributes:
        workbook_path: Path of the .xlsx workbook the sheets live in
        log_level: Root log level name
        request_timeout: Per-request HTTP timeout in seconds
    """

    workbook_path: Path
    log_level: str = "INFO"
    request_timeout: int = 30

    @classmethod
    def from_env(cls, workbook_path: Optional[str] = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            workbook_path: Overrides SHEETS_WORKBOOK_PATH when given

        Raises:
            ConfigError: If REQUEST_TIMEOUT is not an integer
        """
        path = workbook_path or os.getenv("SHEETS_WORKBOOK_PATH", DEFAULT_WORKBOOK_PATH)

        timeout_raw = os.getenv("REQUEST_TIMEOUT", "30")
        try:
            timeout = int(timeout_raw)
        except ValueError:
            raise ConfigError(f"REQUEST_TIMEOUT must be an integer, got {timeout_raw!r}")

        return cls(
            workbook_path=Path(path),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            request_timeout=timeout,
        )


def validate_business_date(value: str) -> str:
    """Check that a business date is a real calendar date in yyyyMMdd form.

    Returns:
        The value unchanged

    Raises:
        ConfigError: If the value is not a valid yyyyMMdd date
    """
    if not isinstance(value, str) or len(value) != 8 or not value.isdigit():
        raise ConfigError(f"Business date must be yyyyMMdd, got {value!r}")
    try:
        datetime.strptime(value, BUSINESS_DATE_FORMAT)
    except ValueError:
        raise ConfigError(f"Business date is not a valid date: {value!r}")
    return value


def today_business_date() -> str:
    """Today's local date as a yyyyMMdd business date."""
    return datetime.now().strftime(BUSINESS_DATE_FORMAT)
