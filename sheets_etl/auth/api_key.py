"""API key authentication for the product catalog API."""

import logging
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class APIKeyLocation(Enum):
    """Where the API key goes on a request."""

    HEADER = "header"
    QUERY = "query"


class APIKeyAuth:
    """Static API key placed in a header or a query parameter.

    The catalog API expects the key in a header; query placement is kept
    for catalog deployments that only accept ``?api_key=``.
    """

    def __init__(
        self,
        api_key: str,
        key_name: str = "X-API-Key",
        location: APIKeyLocation = APIKeyLocation.HEADER,
        scheme: Optional[str] = None,
    ):
        """Initialize API key auth.

        Args:
            api_key: The API key value
            key_name: Name of the header or query parameter
            location: Where to place the key (header or query)
            scheme: Optional prefix such as "Bearer" for header placement
        """
        self.api_key = api_key
        self.key_name = key_name
        self.location = location
        self.scheme = scheme

        logger.debug(
            "APIKeyAuth initialized",
            extra={"key_name": key_name, "location": location.value}
        )

    @property
    def _key_value(self) -> str:
        if self.scheme:
            return f"{self.scheme} {self.api_key}"
        return self.api_key

    def get_auth_header(self) -> dict:
        """Header dict for requests; empty when the key goes in the query."""
        if self.location == APIKeyLocation.HEADER:
            return {self.key_name: self._key_value}
        return {}

    def get_auth_params(self) -> dict:
        """Query parameter dict for requests; empty for header placement."""
        if self.location == APIKeyLocation.QUERY:
            return {self.key_name: self.api_key}
        return {}
