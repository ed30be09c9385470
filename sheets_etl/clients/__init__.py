"""API clients for the upstream data sources.

Each client handles:
- Authentication
- Endpoint layout and response unwrapping
- Mapping HTTP failures to FetchError
"""

from .base import BaseAPIClient
from .orders_client import OrdersClient
from .products_client import ProductsClient

__all__ = ["BaseAPIClient", "OrdersClient", "ProductsClient"]
