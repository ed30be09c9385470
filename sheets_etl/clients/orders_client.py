"""Order management client - machine-client login with page-based pagination."""

import logging
import os
from typing import Generator, Optional

import requests

from sheets_etl.auth.oauth2 import MachineClientAuth
from sheets_etl.clients.base import BaseAPIClient
from sheets_etl.config import validate_business_date
from sheets_etl.exceptions import ConfigError, FetchError

logger = logging.getLogger(__name__)

LOGIN_PATH = "authentication/v1/authentication/login"
ORDERS_BULK_PATH = "orders/v2/ordersBulk"
RESTAURANT_HEADER = "Toast-Restaurant-External-ID"


class OrdersClient(BaseAPIClient):
    """Client for the restaurant order management API.

    Features:
    - Machine-client login with cached bearer token
    - Restaurant selection through a request header
    - Page-based pagination over the bulk orders endpoint
    """

    DEFAULT_PAGE_SIZE = 100

    def __init__(
        self,
        base_url: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        restaurant_guid: Optional[str] = None,
        auth_url: Optional[str] = None,
        page_size: Optional[int] = None,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the orders client.

        Args:
            base_url: API base URL (or from env: ORDERS_API_BASE_URL)
            client_id: Client ID (or from env: ORDERS_CLIENT_ID)
            client_secret: Client secret (or from env: ORDERS_CLIENT_SECRET)
            restaurant_guid: Restaurant GUID (or from env: ORDERS_RESTAURANT_GUID)
            auth_url: Login URL (or from env: ORDERS_AUTH_URL, defaulting to
                the login path under base_url)
            page_size: Orders per page (or from env: ORDERS_PAGE_SIZE)
            timeout: Request timeout in seconds
            session: Optional preconfigured session

        Raises:
            ConfigError: If a required setting is missing
        """
        base_url = base_url or os.getenv("ORDERS_API_BASE_URL")
        if not base_url:
            raise ConfigError("ORDERS_API_BASE_URL is required")

        super().__init__(base_url=base_url, timeout=timeout, session=session)

        client_id = client_id or os.getenv("ORDERS_CLIENT_ID")
        client_secret = client_secret or os.getenv("ORDERS_CLIENT_SECRET")
        if not client_id or not client_secret:
            raise ConfigError("ORDERS_CLIENT_ID and ORDERS_CLIENT_SECRET are required")

        self.restaurant_guid = restaurant_guid or os.getenv("ORDERS_RESTAURANT_GUID")
        if not self.restaurant_guid:
            raise ConfigError("ORDERS_RESTAURANT_GUID is required")

        if page_size is None:
            page_size = os.getenv("ORDERS_PAGE_SIZE") or self.DEFAULT_PAGE_SIZE
        try:
            self.page_size = int(page_size)
        except ValueError:
            raise ConfigError(f"ORDERS_PAGE_SIZE must be an integer, got {page_size!r}")
        # A short page ends pagination, so the size must be at least 1
        if self.page_size < 1:
            raise ConfigError(f"ORDERS_PAGE_SIZE must be at least 1, got {self.page_size}")

        self.auth = MachineClientAuth(
            client_id=client_id,
            client_secret=client_secret,
            auth_url=auth_url or os.getenv("ORDERS_AUTH_URL") or f"{self.base_url}/{LOGIN_PATH}",
            timeout=timeout,
            session=self.session,
        )

    def get_auth_headers(self) -> dict:
        """Bearer token plus the restaurant selector header."""
        headers = self.auth.get_auth_header()
        headers[RESTAURANT_HEADER] = self.restaurant_guid
        return headers

    def paginate(
        self,
        endpoint: str,
        params: Optional[dict] = None,
    ) -> Generator[dict, None, None]:
        """Page through a list endpoint.

        The endpoint returns a bare JSON array per page. A page shorter than
        ``page_size`` is the last one.

        Yields:
            Individual records from each page

        Raises:
            FetchError: If a page body is not a JSON array
        """
        params = params or {}
        page = 0
        total_fetched = 0

        while True:
            page += 1
            request_params = {**params, "page": page, "pageSize": self.page_size}

            logger.debug(f"Fetching page {page}", extra={"page_size": self.page_size})

            items = self.get(endpoint, params=request_params)
            if not isinstance(items, list):
                raise FetchError(f"Expected a JSON array from {endpoint}, got {type(items).__name__}")

            for record in items:
                yield record

            total_fetched += len(items)

            if len(items) < self.page_size:
                break

        logger.info(f"Pagination complete: {total_fetched} records in {page} pages")

    def fetch(self, business_date: str) -> list[dict]:
        """Fetch all orders for one business date.

        Args:
            business_date: Business date in yyyyMMdd form

        Returns:
            List of raw order records

        Raises:
            ConfigError: If the business date is malformed
            FetchError: If any request fails
        """
        validate_business_date(business_date)

        logger.info(f"Fetching orders for business date {business_date}")

        records = list(self.paginate(ORDERS_BULK_PATH, {"businessDate": business_date}))

        logger.info(
            f"Fetched {len(records)} orders",
            extra={
                "source": "orders",
                "record_count": len(records),
                "business_date": business_date,
            }
        )

        return records
