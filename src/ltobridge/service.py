"""Bridge service facade.

Wires settings, storage, the address cache, the HTTP client and the stats
feed together behind one object.
"""

import asyncio
import logging
from typing import Any, Optional, Union

from ltobridge.cache import AddressCache
from ltobridge.client import BridgeClient
from ltobridge.config import Settings, get_settings
from ltobridge.resolver import BridgeAddressResolver
from ltobridge.stats import BurnFees, StatsFeed
from ltobridge.storage import JsonFileStorage, KeyValueStorage
from ltobridge.tokens import DEFAULT_WRAPPED_TOKEN, NATIVE_TOKEN, AnyTokenType

logger = logging.getLogger(__name__)


class BridgeService:
    """Client-side access to the LTO bridge."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        storage: Optional[KeyValueStorage] = None,
        client: Optional[BridgeClient] = None,
    ):
        """Initialize bridge service.

        Args:
            settings: Settings, defaults to ``get_settings()``
            storage: Cache storage, defaults to a JSON file at ``cache_path``
            client: Bridge API client, defaults to one for ``settings.host``
        """
        self.settings = settings or get_settings()
        self.storage = storage or JsonFileStorage(self.settings.cache_path)
        self.client = client or BridgeClient(
            self.settings.base_url, timeout=self.settings.http_timeout
        )

        # Restore bridge addresses from storage
        self.cache = AddressCache.load(self.storage, self.settings.storage_key)
        self.resolver = BridgeAddressResolver(self.cache, self.client)
        self.stats = StatsFeed(self.client)
        self._poll_task: Optional[asyncio.Task] = None

    def start(self) -> None:
        """Start polling stats in the background."""
        if self._poll_task is None or self._poll_task.done():
            self._poll_task = asyncio.create_task(
                self.stats.poll(self.settings.stats_poll_interval)
            )

    async def close(self) -> None:
        """Stop polling and release the HTTP client."""
        if self._poll_task is not None:
            self._poll_task.cancel()
            await asyncio.gather(self._poll_task, return_exceptions=True)
            self._poll_task = None
        await self.client.aclose()

    async def deposit_to(
        self,
        address: str,
        captcha: str,
        token_type: AnyTokenType = DEFAULT_WRAPPED_TOKEN,
        to_token_type: AnyTokenType = NATIVE_TOKEN,
    ) -> str:
        """Generate a bridge address converting wrapped tokens to LTO.

        Args:
            address: Your account address
            captcha: Captcha response
            token_type: Token converted from
            to_token_type: Token converted to
        """
        return await self.resolver.resolve_deposit(address, captcha, token_type, to_token_type)

    async def withdraw_to(
        self,
        recipient: str,
        captcha: str,
        token_type: AnyTokenType = DEFAULT_WRAPPED_TOKEN,
    ) -> str:
        """Generate a bridge address converting LTO to a wrapped token.

        Args:
            recipient: Recipient address
            captcha: Captcha response
            token_type: Token converted to
        """
        return await self.resolver.resolve_withdraw(recipient, captcha, token_type)

    async def faucet(self, recipient: str, captcha: str) -> Any:
        return await self.client.faucet(recipient, captcha)

    async def burn_rate(self) -> Union[int, float]:
        return await self.stats.burn_rate()

    async def burned_tokens(self) -> Union[int, float]:
        return await self.stats.burned_tokens()

    async def burn_fees(self) -> BurnFees:
        return await self.stats.burn_fees()


# Singleton instance
_service_instance: Optional[BridgeService] = None


def get_bridge_service() -> BridgeService:
    """Get the process-wide bridge service built from settings."""
    global _service_instance

    if _service_instance is None:
        _service_instance = BridgeService()

    return _service_instance


def reset_bridge_service() -> None:
    """Reset service instance (useful for testing)."""
    global _service_instance
    _service_instance = None
