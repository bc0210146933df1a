"""Pytest configuration and fixtures."""

import asyncio
import json
import os
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio

# Set test environment
os.environ["LTO_BRIDGE_ENVIRONMENT"] = "test"
os.environ["LTO_BRIDGE_HOST"] = "http://bridge.test"
os.environ["LTO_BRIDGE_DEBUG"] = "true"

from ltobridge.cache import AddressCache
from ltobridge.client import BridgeClient
from ltobridge.resolver import BridgeAddressResolver
from ltobridge.storage import MemoryStorage

BRIDGE_HOST = "http://bridge.test"

DEFAULT_STATS = {
    "burn_rate": 0.5,
    "burned": 1234567,
    "volume": {
        "lto": {"burn_fee": 1500000000, "volume": 10},
        "lto20": {"burn_fee": 250000000},
        "binance": {"burn_fee": 0},
    },
}


class FakeBridgeAPI:
    """In-process stand-in for the bridge HTTP API.

    Records every request and answers address requests with
    ``bridge-1``, ``bridge-2``... unless ``address_response`` is overridden.
    """

    def __init__(self):
        self.address_requests: list[dict] = []
        self.faucet_requests: list[dict] = []
        self.stats_calls = 0
        self.stats = DEFAULT_STATS
        self.delay = 0.0
        self.address_response = None
        self.stats_response = None

    async def handler(self, request: httpx.Request) -> httpx.Response:
        if self.delay:
            await asyncio.sleep(self.delay)

        if request.url.path == "/bridge/address" and request.method == "POST":
            payload = json.loads(request.content)
            self.address_requests.append(payload)
            if self.address_response is not None:
                return self.address_response
            return httpx.Response(200, json={"address": f"bridge-{len(self.address_requests)}"})

        if request.url.path == "/stats" and request.method == "GET":
            self.stats_calls += 1
            if self.stats_response is not None:
                return self.stats_response
            return httpx.Response(200, json=self.stats)

        if request.url.path == "/waves/faucet" and request.method == "POST":
            self.faucet_requests.append(json.loads(request.content))
            return httpx.Response(200, json={"status": "ok"})

        return httpx.Response(404, json={"error": "not found"})


@pytest.fixture
def fake_api() -> FakeBridgeAPI:
    return FakeBridgeAPI()


@pytest_asyncio.fixture
async def bridge_client(fake_api) -> AsyncGenerator[BridgeClient, None]:
    """Bridge client talking to the fake API."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler))
    yield BridgeClient(BRIDGE_HOST, http_client=http_client)
    await http_client.aclose()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def address_cache(storage) -> AddressCache:
    return AddressCache.load(storage)


@pytest.fixture
def resolver(address_cache, bridge_client) -> BridgeAddressResolver:
    return BridgeAddressResolver(address_cache, bridge_client)
