"""Bridge statistics feed.

Fetches ``/stats`` once and shares the result between all readers, like a
replayed stream. ``poll`` keeps refreshing in the background and pushes
each new snapshot to subscribers.
"""

import asyncio
import logging
from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal
from typing import Awaitable, Callable, Optional, Union

from ltobridge.client import BridgeClient
from ltobridge.errors import BridgeError
from ltobridge.models import BridgeStats

logger = logging.getLogger(__name__)

# Burn fees are reported in 1e-8 units
FEE_UNIT = Decimal("100000000")

StatsCallback = Callable[[BridgeStats], Union[None, Awaitable[None]]]


@dataclass
class BurnFees:
    """Burn fee per token bucket, in whole tokens."""

    lto: int
    lto20: int
    binance: int


def _to_whole_tokens(amount: Union[int, float]) -> int:
    # Halves round toward +inf, so -2.5 -> -2
    value = Decimal(str(amount)) / FEE_UNIT
    return int((value + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))


def burn_fees_from_stats(stats: BridgeStats) -> BurnFees:
    """Derive display burn fees from a stats snapshot."""
    return BurnFees(
        lto=_to_whole_tokens(stats.volume.lto.burn_fee),
        lto20=_to_whole_tokens(stats.volume.lto20.burn_fee),
        binance=_to_whole_tokens(stats.volume.binance.burn_fee),
    )


class StatsFeed:
    """Shared, refreshable view of the bridge statistics."""

    def __init__(self, client: BridgeClient):
        self.client = client
        self._latest: Optional[BridgeStats] = None
        self._pending: Optional[asyncio.Task] = None
        self._subscribers: list[StatsCallback] = []
        self._callback_tasks: set[asyncio.Task] = set()

    @property
    def latest(self) -> Optional[BridgeStats]:
        """Last fetched snapshot, if any."""
        return self._latest

    def subscribe(self, callback: StatsCallback) -> Callable[[], None]:
        """Register a callback for new snapshots.

        The callback is invoked right away if a snapshot is already known.

        Returns:
            Function that removes the subscription
        """
        self._subscribers.append(callback)
        if self._latest is not None:
            self._schedule(callback, self._latest)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _schedule(self, callback: StatsCallback, stats: BridgeStats) -> None:
        result = callback(stats)
        if asyncio.iscoroutine(result):
            task = asyncio.ensure_future(result)
            self._callback_tasks.add(task)
            task.add_done_callback(self._callback_done)

    def _callback_done(self, task: asyncio.Task) -> None:
        self._callback_tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Stats subscriber failed: {task.exception()}")

    async def refresh(self) -> BridgeStats:
        """Fetch a new snapshot and notify subscribers.

        Concurrent calls share one request.
        """
        if self._pending is None:
            task = asyncio.ensure_future(self._fetch())
            task.add_done_callback(self._clear_pending)
            self._pending = task
        return await asyncio.shield(self._pending)

    def _clear_pending(self, task: asyncio.Task) -> None:
        if self._pending is task:
            self._pending = None
        if not task.cancelled() and task.exception() is not None:
            logger.debug(f"Bridge stats fetch failed: {task.exception()}")

    async def _fetch(self) -> BridgeStats:
        stats = await self.client.get_stats()
        self._latest = stats
        logger.debug(f"Bridge stats updated: burn_rate={stats.burn_rate} burned={stats.burned}")
        for callback in list(self._subscribers):
            try:
                self._schedule(callback, stats)
            except Exception as e:
                logger.error(f"Stats subscriber failed: {e}")
        return stats

    async def get(self) -> BridgeStats:
        """Return the known snapshot, fetching it on first use."""
        if self._latest is not None:
            return self._latest
        return await self.refresh()

    async def burn_rate(self) -> Union[int, float]:
        """Current burn rate."""
        return (await self.get()).burn_rate

    async def burned_tokens(self) -> Union[int, float]:
        """Total tokens burned so far."""
        return (await self.get()).burned

    async def burn_fees(self) -> BurnFees:
        """Burn fee per token bucket, in whole tokens."""
        return burn_fees_from_stats(await self.get())

    async def poll(self, interval: float) -> None:
        """Refresh forever, every ``interval`` seconds.

        Failed refreshes are logged and retried on the next tick.
        """
        logger.info(f"Polling bridge stats every {interval}s")
        while True:
            try:
                await self.refresh()
            except BridgeError as e:
                logger.warning(f"Bridge stats refresh failed: {e}")
            await asyncio.sleep(interval)
