"""HTTP client for the LTO bridge API."""

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from ltobridge.errors import BridgeAPIError
from ltobridge.models import BridgeStats
from ltobridge.tokens import TokenType

logger = logging.getLogger(__name__)


class BridgeClient:
    """Thin async wrapper around the bridge REST endpoints.

    Endpoints:
    - POST /bridge/address  generate a bridge address
    - GET  /stats           burn and volume statistics
    - POST /waves/faucet    request faucet tokens

    Every failure is raised as BridgeAPIError; nothing is retried here.
    """

    def __init__(
        self,
        host: str,
        timeout: float = 15.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize bridge client.

        Args:
            host: Bridge API base URL
            timeout: Request timeout in seconds
            http_client: Optional preconfigured client (tests, shared pools)
        """
        self.host = host.rstrip("/")
        self.timeout = timeout
        self._client = http_client
        self._owns_client = http_client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        client = await self._get_client()
        url = f"{self.host}{path}"

        try:
            response = await client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Bridge API {method} {path} returned {e.response.status_code}")
            raise BridgeAPIError(
                f"Bridge API error: {e.response.status_code} for {method} {path}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"Bridge API {method} {path} failed: {e}")
            raise BridgeAPIError(f"Bridge API request failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise BridgeAPIError(
                f"Bridge API returned invalid JSON for {method} {path}",
                status_code=response.status_code,
            ) from e

    async def create_bridge_address(
        self,
        from_token: TokenType,
        to_token: TokenType,
        to_address: str,
        captcha_response: str,
    ) -> str:
        """Ask the bridge for a new conversion address.

        Args:
            from_token: Canonical source token
            to_token: Canonical target token
            to_address: Account receiving the converted tokens
            captcha_response: Captcha token (consumed by the server)

        Returns:
            The bridge address to send tokens to
        """
        data = await self._request(
            "POST",
            "/bridge/address",
            json={
                "from_token": from_token.value,
                "to_token": to_token.value,
                "to_address": to_address,
                "captcha_response": captcha_response,
            },
        )

        address = data.get("address") if isinstance(data, dict) else None
        if not isinstance(address, str) or not address:
            raise BridgeAPIError("Bridge API response has no address")

        logger.info(f"Generated bridge address {from_token.value}->{to_token.value} for {to_address}")
        return address

    async def get_stats(self) -> BridgeStats:
        """Fetch aggregate bridge statistics."""
        data = await self._request("GET", "/stats")
        try:
            return BridgeStats.model_validate(data)
        except ValidationError as e:
            raise BridgeAPIError(f"Bridge stats response is malformed: {e}") from e

    async def faucet(self, recipient: str, captcha_response: str) -> Any:
        """Request faucet tokens for a recipient."""
        return await self._request(
            "POST",
            "/waves/faucet",
            json={"recipient": recipient, "captcha_response": captcha_response},
        )

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "BridgeClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False
