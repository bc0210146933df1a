"""Bridge address resolution backed by the address cache.

Resolve flow:
1. Normalize token types to canonical tags
2. Build the namespace cache key
3. Return the cached address if present (no request, captcha untouched)
4. Otherwise join an in-flight request for the same key, or start one
5. Store the generated address, then return it

Failures propagate and leave the cache untouched.
"""

import asyncio
import logging

from ltobridge.cache import (
    AddressCache,
    CacheNamespace,
    deposit_cache_key,
    withdraw_cache_key,
)
from ltobridge.client import BridgeClient
from ltobridge.models import ConversionRequest, Direction
from ltobridge.tokens import (
    DEFAULT_WRAPPED_TOKEN,
    NATIVE_TOKEN,
    AnyTokenType,
    TokenType,
    normalize_token_type,
)

logger = logging.getLogger(__name__)


class BridgeAddressResolver:
    """Resolves deposit and withdraw bridge addresses, once per cache key."""

    def __init__(self, cache: AddressCache, client: BridgeClient):
        self.cache = cache
        self.client = client
        self._in_flight: dict[tuple[CacheNamespace, str], asyncio.Task] = {}

    async def resolve_deposit(
        self,
        address: str,
        captcha: str,
        from_token: AnyTokenType = DEFAULT_WRAPPED_TOKEN,
        to_token: AnyTokenType = NATIVE_TOKEN,
    ) -> str:
        """Get a bridge address converting ``from_token`` into ``to_token``.

        Args:
            address: Account receiving the converted tokens
            captcha: Captcha response, only used on a cache miss
            from_token: Token sent to the bridge (either vocabulary)
            to_token: Token received (either vocabulary)

        Returns:
            Bridge address to send ``from_token`` to
        """
        from_type = normalize_token_type(from_token)
        to_type = normalize_token_type(to_token)
        key = deposit_cache_key(address, from_type, to_type)

        return await self._resolve(
            CacheNamespace.DEPOSIT, key, from_type, to_type, address, captcha
        )

    async def resolve_withdraw(
        self,
        recipient: str,
        captcha: str,
        to_token: AnyTokenType = DEFAULT_WRAPPED_TOKEN,
    ) -> str:
        """Get a bridge address converting native tokens into ``to_token``.

        Args:
            recipient: Account receiving the wrapped tokens
            captcha: Captcha response, only used on a cache miss
            to_token: Target wrapped token (either vocabulary)

        Returns:
            Bridge address to send native tokens to
        """
        to_type = normalize_token_type(to_token)
        key = withdraw_cache_key(recipient, to_type)

        return await self._resolve(
            CacheNamespace.WITHDRAW, key, NATIVE_TOKEN, to_type, recipient, captcha
        )

    async def resolve(self, request: ConversionRequest) -> str:
        """Resolve a ConversionRequest by its direction."""
        if request.direction == Direction.WITHDRAW:
            return await self.resolve_withdraw(
                request.external_address, request.captcha_response, request.to_token
            )
        return await self.resolve_deposit(
            request.external_address,
            request.captcha_response,
            request.from_token,
            request.to_token,
        )

    async def _resolve(
        self,
        namespace: CacheNamespace,
        key: str,
        from_type: TokenType,
        to_type: TokenType,
        to_address: str,
        captcha: str,
    ) -> str:
        cached = self.cache.lookup(namespace, key)
        if cached:
            logger.debug(f"Bridge cache hit [{namespace.value}] {key}")
            return cached

        slot = (namespace, key)
        task = self._in_flight.get(slot)
        if task is None:
            logger.debug(f"Bridge cache miss [{namespace.value}] {key}")
            task = asyncio.ensure_future(
                self._generate(namespace, key, from_type, to_type, to_address, captcha)
            )
            self._in_flight[slot] = task
            task.add_done_callback(lambda t: self._forget(slot, t))
        else:
            logger.debug(f"Joining in-flight request [{namespace.value}] {key}")

        # Callers going away must not cancel the request or its cache write
        return await asyncio.shield(task)

    async def _generate(
        self,
        namespace: CacheNamespace,
        key: str,
        from_type: TokenType,
        to_type: TokenType,
        to_address: str,
        captcha: str,
    ) -> str:
        address = await self.client.create_bridge_address(
            from_type, to_type, to_address, captcha
        )
        self.cache.store(namespace, key, address)
        return address

    def _forget(self, slot: tuple[CacheNamespace, str], task: asyncio.Task) -> None:
        if self._in_flight.get(slot) is task:
            del self._in_flight[slot]
        if not task.cancelled() and task.exception() is not None:
            logger.warning(f"Bridge address request failed [{slot[0].value}] {slot[1]}: {task.exception()}")

    @property
    def pending(self) -> int:
        """Number of address requests currently in flight."""
        return len(self._in_flight)
