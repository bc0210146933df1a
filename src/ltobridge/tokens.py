"""Token types accepted by the bridge and normalization of legacy tags.

Two vocabularies describe the same token kinds:

- ``TokenType`` is what the bridge API speaks (``LTO``, ``LTO20``, ``BSC``...)
- ``SwapTokenType`` is the network-oriented naming used by the swap screen
  (``MAINNET``, ``ERC20``, ``BEP20``)

Everything is converted to ``TokenType`` at the edge, before it is used in a
cache key or a request payload.
"""

from enum import Enum
from typing import Union

from ltobridge.errors import InvalidTokenTypeError


class TokenType(str, Enum):
    """Canonical token tags understood by the bridge API."""
    LTO = "LTO"           # Native mainnet token
    LTO20 = "LTO20"       # ERC20 on Ethereum
    BSC = "BSC"           # BEP20 on Binance Smart Chain
    BINANCE = "BINANCE"   # BEP2 on Binance Chain
    WAVES = "WAVES"       # Legacy Waves token


class SwapTokenType(str, Enum):
    """Legacy network names for the same token kinds."""
    MAINNET = "MAINNET"
    ERC20 = "ERC20"
    BEP20 = "BEP20"


NATIVE_TOKEN = TokenType.LTO
DEFAULT_WRAPPED_TOKEN = TokenType.LTO20

AnyTokenType = Union[TokenType, SwapTokenType, str]

_SWAP_TO_TOKEN: dict[SwapTokenType, TokenType] = {
    SwapTokenType.MAINNET: TokenType.LTO,
    SwapTokenType.ERC20: TokenType.LTO20,
    SwapTokenType.BEP20: TokenType.BSC,
}


def normalize_token_type(value: AnyTokenType) -> TokenType:
    """Map a token type from either vocabulary to its canonical tag.

    Plain strings are accepted if they spell a member of either enum.

    Raises:
        InvalidTokenTypeError: if the value is not a known token type
    """
    if isinstance(value, TokenType):
        return value
    if isinstance(value, SwapTokenType):
        return _SWAP_TO_TOKEN[value]

    if isinstance(value, str):
        tag = value.strip().upper()
        if tag in TokenType.__members__:
            return TokenType(tag)
        if tag in SwapTokenType.__members__:
            return _SWAP_TO_TOKEN[SwapTokenType(tag)]

    raise InvalidTokenTypeError(value)
