"""Tests for the bridge statistics feed."""

import asyncio
import gc
import logging

import httpx
import pytest

from ltobridge.models import BridgeStats
from ltobridge.stats import BurnFees, StatsFeed, burn_fees_from_stats

from conftest import DEFAULT_STATS


class TestBurnFees:
    """Tests for burn fee derivation."""

    def test_fees_divided_and_rounded(self):
        fees = burn_fees_from_stats(BridgeStats.model_validate(DEFAULT_STATS))

        # 2.5 rounds up
        assert fees == BurnFees(lto=15, lto20=3, binance=0)

    def test_rounds_down_below_half(self):
        stats = BridgeStats.model_validate(
            {
                "burn_rate": 0,
                "burned": 0,
                "volume": {
                    "lto": {"burn_fee": 149999999},
                    "lto20": {"burn_fee": 50000000},
                    "binance": {"burn_fee": 49999999},
                },
            }
        )

        assert burn_fees_from_stats(stats) == BurnFees(lto=1, lto20=1, binance=0)

    def test_negative_halves_round_toward_positive(self):
        stats = BridgeStats.model_validate(
            {
                "burn_rate": 0,
                "burned": 0,
                "volume": {
                    "lto": {"burn_fee": -250000000},
                    "lto20": {"burn_fee": -250000001},
                    "binance": {"burn_fee": -49999999},
                },
            }
        )

        assert burn_fees_from_stats(stats) == BurnFees(lto=-2, lto20=-3, binance=0)

    def test_integer_totals_stay_integers(self):
        stats = BridgeStats.model_validate(DEFAULT_STATS)

        assert isinstance(stats.burned, int)
        assert stats.burn_rate == 0.5


class TestStatsFeed:
    """Tests for shared fetching, subscriptions and polling."""

    @pytest.mark.asyncio
    async def test_derived_values(self, bridge_client):
        feed = StatsFeed(bridge_client)

        assert await feed.burn_rate() == 0.5
        assert await feed.burned_tokens() == 1234567
        assert await feed.burn_fees() == BurnFees(lto=15, lto20=3, binance=0)

    @pytest.mark.asyncio
    async def test_first_fetch_is_shared(self, bridge_client, fake_api):
        fake_api.delay = 0.02
        feed = StatsFeed(bridge_client)

        await asyncio.gather(feed.burn_rate(), feed.burned_tokens(), feed.burn_fees())
        await feed.burn_rate()

        assert fake_api.stats_calls == 1

    @pytest.mark.asyncio
    async def test_refresh_fetches_again(self, bridge_client, fake_api):
        feed = StatsFeed(bridge_client)
        await feed.get()

        fake_api.stats = {**DEFAULT_STATS, "burn_rate": 0.75}
        await feed.refresh()

        assert feed.latest.burn_rate == 0.75
        assert fake_api.stats_calls == 2

    @pytest.mark.asyncio
    async def test_subscribers_receive_snapshots(self, bridge_client):
        feed = StatsFeed(bridge_client)
        seen = []

        unsubscribe = feed.subscribe(lambda stats: seen.append(stats.burn_rate))
        await feed.refresh()
        unsubscribe()
        await feed.refresh()

        assert seen == [0.5]

    @pytest.mark.asyncio
    async def test_late_subscriber_gets_latest(self, bridge_client):
        feed = StatsFeed(bridge_client)
        await feed.refresh()
        seen = []

        feed.subscribe(lambda stats: seen.append(stats.burned))

        assert seen == [1234567]

    @pytest.mark.asyncio
    async def test_async_subscriber(self, bridge_client):
        feed = StatsFeed(bridge_client)
        seen = []

        async def on_stats(stats):
            seen.append(stats.burn_rate)

        feed.subscribe(on_stats)
        await feed.refresh()
        await asyncio.sleep(0)

        assert seen == [0.5]

    @pytest.mark.asyncio
    async def test_poll_survives_errors(self, bridge_client, fake_api):
        fake_api.stats_response = httpx.Response(502)
        feed = StatsFeed(bridge_client)

        task = asyncio.create_task(feed.poll(0.01))
        await asyncio.sleep(0.05)
        fake_api.stats_response = None
        await asyncio.sleep(0.05)
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)

        assert fake_api.stats_calls >= 3
        assert feed.latest is not None

    @pytest.mark.asyncio
    async def test_failing_async_subscriber_is_logged(self, bridge_client, caplog):
        loop = asyncio.get_running_loop()
        unhandled = []
        loop.set_exception_handler(lambda _loop, context: unhandled.append(context["message"]))
        feed = StatsFeed(bridge_client)

        async def broken(stats):
            raise RuntimeError("subscriber bug")

        feed.subscribe(broken)
        try:
            with caplog.at_level(logging.ERROR, logger="ltobridge.stats"):
                await feed.refresh()
                await asyncio.sleep(0.01)
            gc.collect()
        finally:
            loop.set_exception_handler(None)

        assert "subscriber bug" in caplog.text
        assert unhandled == []
        assert not feed._callback_tasks
