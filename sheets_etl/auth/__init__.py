"""Authentication for the upstream APIs.

Supports:
- API key authentication (product catalog)
- Machine-client token login (order management)
"""

from .api_key import APIKeyAuth, APIKeyLocation
from .oauth2 import MachineClientAuth

__all__ = ["APIKeyAuth", "APIKeyLocation", "MachineClientAuth"]
