"""Base API client with common request handling."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

import requests

from sheets_etl.exceptions import FetchError

logger = logging.getLogger(__name__)


class BaseAPIClient(ABC):
    """Base class for the upstream API clients.

    Requests are sent once: there is no retry or backoff. Anything other
    than a 200 response is a fetch failure.
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        """Initialize base API client.

        Args:
            base_url: Base URL for the API
            timeout: Request timeout in seconds
            session: Optional preconfigured session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @abstractmethod
    def get_auth_headers(self) -> dict:
        """Get authentication headers for requests."""
        pass

    def get_auth_params(self) -> dict:
        """Get authentication query parameters for requests."""
        return {}

    def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> requests.Response:
        """Make HTTP request with timing and logging.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (will be joined with base_url)
            params: Query parameters
            headers: Additional headers

        Returns:
            Response object with status 200

        Raises:
            FetchError: On transport errors or any non-200 response
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"

        request_headers = self.get_auth_headers()
        if headers:
            request_headers.update(headers)

        request_params = {**(params or {}), **self.get_auth_params()}

        start_time = time.time()

        logger.debug(
            f"Making {method} request",
            extra={"url": url, "params": params}
        )

        try:
            response = self.session.request(
                method=method,
                url=url,
                params=request_params,
                headers=request_headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                "API request failed",
                extra={
                    "method": method,
                    "endpoint": endpoint,
                    "error": str(e),
                    "duration_ms": round(duration_ms, 2),
                }
            )
            raise FetchError(f"{method} {endpoint} failed: {e}") from e

        duration_ms = (time.time() - start_time) * 1000

        logger.info(
            "API request completed",
            extra={
                "method": method,
                "endpoint": endpoint,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "response_size_bytes": len(response.content),
            }
        )

        if response.status_code != 200:
            raise FetchError(
                f"{method} {endpoint} returned status {response.status_code}",
                status_code=response.status_code,
            )

        return response

    def get(
        self,
        endpoint: str,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> Any:
        """Make GET request and return the decoded JSON body.

        Raises:
            FetchError: If the request fails or the body is not JSON
        """
        response = self._make_request("GET", endpoint, params=params, headers=headers)
        try:
            return response.json()
        except ValueError as e:
            raise FetchError(f"GET {endpoint} returned a body that is not JSON") from e

    @abstractmethod
    def fetch(self, *args, **kwargs) -> list[dict]:
        """Fetch the full snapshot of records for one run."""
        pass
