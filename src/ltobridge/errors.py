"""Exceptions raised by the bridge client."""

from typing import Optional


class BridgeError(Exception):
    """Base exception for bridge client failures."""
    pass


class BridgeAPIError(BridgeError):
    """Exception raised when the bridge API call fails.

    Covers transport errors, non-2xx responses and malformed payloads.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidTokenTypeError(BridgeError, ValueError):
    """Exception raised for a token type neither vocabulary knows."""

    def __init__(self, value: object):
        super().__init__(f"Unknown token type: {value!r}")
        self.value = value
