"""Exceptions raised by the sheets ETL.

All exceptions inherit from SheetsETLError so entry operations can catch
any pipeline failure in one place.
"""

from typing import Optional


class SheetsETLError(Exception):
    """Base exception for all sheets ETL errors."""

    pass


class ConfigError(SheetsETLError):
    """Raised when required configuration is missing or invalid.

    This exception is raised when:
    - A required environment variable or constructor argument is missing
    - A business date is not in yyyyMMdd form
    """

    pass


class FetchError(SheetsETLError):
    """Raised when fetching from an upstream API fails.

    This exception is raised when:
    - The request fails at the transport level
    - The API answers with a non-200 status
    - The response body cannot be decoded as JSON
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
