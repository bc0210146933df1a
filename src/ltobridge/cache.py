"""Persisted cache of generated bridge addresses.

The bridge hands out one address per (address, token pair) and every request
burns a captcha response, so addresses are remembered forever. Two namespaces
are kept apart:

- deposit: ``"{address}:{from}:{to}"`` -> bridge address
- withdraw: ``"{recipient}{to}"`` -> bridge address

The key formats differ between namespaces and must stay as they are, since
previously saved caches are read back with them.
"""

import json
import logging
from enum import Enum
from typing import Optional

from ltobridge.storage import KeyValueStorage
from ltobridge.tokens import TokenType

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "__bridge__"


class CacheNamespace(str, Enum):
    """Independent key spaces of the address cache."""
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"


def deposit_cache_key(address: str, from_token: TokenType, to_token: TokenType) -> str:
    """Build the deposit namespace key."""
    return f"{address}:{from_token.value}:{to_token.value}"


def withdraw_cache_key(recipient: str, to_token: TokenType) -> str:
    """Build the withdraw namespace key (plain concatenation)."""
    return recipient + to_token.value


def _empty() -> dict[str, dict[str, str]]:
    return {ns.value: {} for ns in CacheNamespace}


def _parse(raw: str) -> Optional[dict[str, dict[str, str]]]:
    """Parse persisted content, returning None if it is not a valid cache."""
    try:
        data = json.loads(raw)
    except ValueError:
        return None

    if not isinstance(data, dict):
        return None

    entries = _empty()
    for ns in CacheNamespace:
        section = data.get(ns.value, {})
        if not isinstance(section, dict):
            return None
        for key, value in section.items():
            if not isinstance(value, str):
                return None
            entries[ns.value][key] = value
    return entries


class AddressCache:
    """Bridge address cache with write-through persistence.

    Use ``AddressCache.load(storage)`` to create one. Each ``store`` saves
    the whole structure before returning. Entries never expire.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        storage_key: str = DEFAULT_STORAGE_KEY,
        entries: Optional[dict[str, dict[str, str]]] = None,
    ):
        self.storage = storage
        self.storage_key = storage_key
        self._entries = entries if entries is not None else _empty()

    @classmethod
    def load(
        cls, storage: KeyValueStorage, storage_key: str = DEFAULT_STORAGE_KEY
    ) -> "AddressCache":
        """Restore the cache from storage.

        Missing or malformed content yields an empty cache, which is saved
        right away so the next read finds a well-formed document.
        """
        raw = storage.get_item(storage_key)
        entries = _parse(raw) if raw else None

        if entries is None:
            if raw:
                logger.warning(f"Discarding malformed bridge cache under {storage_key!r}")
            cache = cls(storage, storage_key)
            cache.save()
            return cache

        logger.debug(
            f"Restored bridge cache: {len(entries['deposit'])} deposit, "
            f"{len(entries['withdraw'])} withdraw entries"
        )
        return cls(storage, storage_key, entries)

    def lookup(self, namespace: CacheNamespace | str, key: str) -> Optional[str]:
        """Get a cached bridge address, or None."""
        return self._entries[CacheNamespace(namespace).value].get(key)

    def store(self, namespace: CacheNamespace | str, key: str, address: str) -> None:
        """Insert or overwrite an entry and persist immediately.

        The entry only becomes visible once storage accepted the write.
        """
        entries = self.to_dict()
        entries[CacheNamespace(namespace).value][key] = address
        self._write(entries)
        self._entries = entries

    def save(self) -> None:
        """Write the full cache to storage."""
        self._write(self._entries)

    def _write(self, entries: dict[str, dict[str, str]]) -> None:
        self.storage.set_item(self.storage_key, json.dumps(entries))

    def to_dict(self) -> dict[str, dict[str, str]]:
        """Return a copy of all entries."""
        return {ns: dict(section) for ns, section in self._entries.items()}

    def __len__(self) -> int:
        return sum(len(section) for section in self._entries.values())
