"""Product catalog client - API key authentication."""

import logging
import os
from typing import Optional

import requests

from sheets_etl.auth.api_key import APIKeyAuth, APIKeyLocation
from sheets_etl.clients.base import BaseAPIClient
from sheets_etl.exceptions import ConfigError

logger = logging.getLogger(__name__)


class ProductsClient(BaseAPIClient):
    """Client for the POS product catalog.

    The products endpoint answers with ``{"response": {"products": [...]}}``
    and returns the whole catalog in one call.
    """

    DEFAULT_ENDPOINT = "products"

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        key_header: Optional[str] = None,
        key_location: Optional[str] = None,
        key_scheme: Optional[str] = None,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the products client.

        Args:
            base_url: API base URL (or from env: PRODUCTS_API_BASE_URL)
            api_key: API key (or from env: PRODUCTS_API_KEY)
            key_header: Header or query parameter carrying the key (or from env:
                PRODUCTS_API_KEY_HEADER, default X-API-Key)
            key_location: "header" or "query" (or from env:
                PRODUCTS_API_KEY_LOCATION, default header)
            key_scheme: Prefix for the header value such as "Bearer" (or from
                env: PRODUCTS_API_KEY_SCHEME, default none)
            endpoint: Products endpoint path
            timeout: Request timeout in seconds
            session: Optional preconfigured session

        Raises:
            ConfigError: If the base URL or API key is missing, or the key
                location is not header or query
        """
        base_url = base_url or os.getenv("PRODUCTS_API_BASE_URL")
        if not base_url:
            raise ConfigError("PRODUCTS_API_BASE_URL is required")

        super().__init__(base_url=base_url, timeout=timeout, session=session)

        api_key_value = api_key or os.getenv("PRODUCTS_API_KEY")
        if not api_key_value:
            raise ConfigError("PRODUCTS_API_KEY is required")

        location_name = (key_location or os.getenv("PRODUCTS_API_KEY_LOCATION") or "header").lower()
        try:
            location = APIKeyLocation(location_name)
        except ValueError:
            raise ConfigError(
                f"PRODUCTS_API_KEY_LOCATION must be header or query, got {location_name!r}"
            )

        self.endpoint = endpoint
        self.api_key_auth = APIKeyAuth(
            api_key=api_key_value,
            key_name=key_header or os.getenv("PRODUCTS_API_KEY_HEADER", "X-API-Key"),
            location=location,
            scheme=key_scheme or os.getenv("PRODUCTS_API_KEY_SCHEME") or None,
        )

    def get_auth_headers(self) -> dict:
        """Get API key authorization headers."""
        return self.api_key_auth.get_auth_header()

    def get_auth_params(self) -> dict:
        return self.api_key_auth.get_auth_params()

    def fetch(self) -> list[dict]:
        """Fetch every product in the catalog.

        A body without the ``response.products`` path yields an empty list.

        Returns:
            List of raw product records
        """
        logger.info("Fetching product catalog")

        body = self.get(self.endpoint)

        response = body.get("response") if isinstance(body, dict) else None
        products = response.get("products") if isinstance(response, dict) else None
        if not isinstance(products, list):
            logger.warning(
                "Products response had no product list",
                extra={"source": "products"}
            )
            products = []

        logger.info(
            f"Fetched {len(products)} products",
            extra={"source": "products", "record_count": len(products)}
        )

        return products
