"""LTO bridge client: bridge address generation, caching and statistics."""

from ltobridge.cache import AddressCache, CacheNamespace
from ltobridge.client import BridgeClient
from ltobridge.errors import BridgeAPIError, BridgeError, InvalidTokenTypeError
from ltobridge.models import BridgeStats, ConversionRequest, Direction
from ltobridge.resolver import BridgeAddressResolver
from ltobridge.service import BridgeService, get_bridge_service
from ltobridge.stats import BurnFees, StatsFeed
from ltobridge.storage import JsonFileStorage, MemoryStorage
from ltobridge.tokens import SwapTokenType, TokenType, normalize_token_type

__version__ = "0.1.0"

__all__ = [
    "AddressCache",
    "BridgeAPIError",
    "BridgeAddressResolver",
    "BridgeClient",
    "BridgeError",
    "BridgeService",
    "BridgeStats",
    "BurnFees",
    "CacheNamespace",
    "ConversionRequest",
    "Direction",
    "InvalidTokenTypeError",
    "JsonFileStorage",
    "MemoryStorage",
    "StatsFeed",
    "SwapTokenType",
    "TokenType",
    "get_bridge_service",
    "normalize_token_type",
]
