"""Machine-client token authentication for the order management API."""

import logging
import math
import time
from dataclasses import dataclass
from typing import Optional

import requests

from sheets_etl.exceptions import FetchError

logger = logging.getLogger(__name__)

MACHINE_CLIENT_ACCESS_TYPE = "TOAST_MACHINE_CLIENT"
DEFAULT_TOKEN_LIFETIME = 3600


@dataclass
class TokenInfo:
    """Access token returned by the login endpoint."""

    access_token: str
    token_type: str
    expires_at: float


class MachineClientAuth:
    """Logs in with client credentials and caches the bearer token.

    The login endpoint takes a JSON body and answers with
    ``{"token": {"accessToken": ..., "tokenType": ..., "expiresIn": ...}}``.
    A new token is requested once the cached one is within
    ``token_expiry_buffer`` seconds of expiring.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        auth_url: str,
        token_expiry_buffer: int = 60,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        """Initialize machine-client auth.

        Args:
            client_id: API client ID
            client_secret: API client secret
            auth_url: Full URL of the login endpoint
            token_expiry_buffer: Seconds before expiry to trigger a new login
            timeout: Login request timeout in seconds
            session: Optional session to send the login request with
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.auth_url = auth_url
        self.token_expiry_buffer = token_expiry_buffer
        self.timeout = timeout
        self.session = session or requests.Session()
        self._token_info: Optional[TokenInfo] = None

    def get_access_token(self) -> str:
        """Get a valid access token, logging in again if necessary."""
        if self._is_token_expired():
            self._login()
        return self._token_info.access_token

    def _is_token_expired(self) -> bool:
        if self._token_info is None:
            return True
        return time.time() >= (self._token_info.expires_at - self.token_expiry_buffer)

    def _login(self) -> None:
        """Request a new token and store it.

        Raises:
            FetchError: If the login call fails or returns no token
        """
        logger.info("Requesting new access token", extra={"auth_url": self.auth_url})

        payload = {
            "clientId": self.client_id,
            "clientSecret": self.client_secret,
            "userAccessType": MACHINE_CLIENT_ACCESS_TYPE,
        }

        try:
            response = self.session.post(self.auth_url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Login request failed: {e}") from e

        if response.status_code != 200:
            raise FetchError(
                f"Login failed with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise FetchError("Login response is not valid JSON") from e

        token = body.get("token") if isinstance(body, dict) else None
        if not isinstance(token, dict):
            token = {}

        access_token = token.get("accessToken")
        if not access_token:
            raise FetchError("Login response did not contain an access token")

        expires_in = token.get("expiresIn")
        if (
            isinstance(expires_in, bool)
            or not isinstance(expires_in, (int, float))
            or not math.isfinite(expires_in)
            or expires_in <= 0
        ):
            logger.warning(
                "Login response had no usable expiresIn, assuming default lifetime",
                extra={"expires_in": expires_in, "default_seconds": DEFAULT_TOKEN_LIFETIME}
            )
            expires_in = DEFAULT_TOKEN_LIFETIME

        self._token_info = TokenInfo(
            access_token=access_token,
            token_type=token.get("tokenType") or "Bearer",
            expires_at=time.time() + expires_in,
        )

        logger.info(
            "Token obtained successfully",
            extra={
                "token_type": self._token_info.token_type,
                "expires_in": expires_in,
            }
        )

    def get_auth_header(self) -> dict:
        """Get authorization header dict for requests."""
        token = self.get_access_token()
        return {"Authorization": f"{self._token_info.token_type} {token}"}
