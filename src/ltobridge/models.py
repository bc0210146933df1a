"""Request and response models for the bridge API."""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from ltobridge.tokens import DEFAULT_WRAPPED_TOKEN, NATIVE_TOKEN, AnyTokenType


class Direction(str, Enum):
    """Which way a conversion goes relative to the native chain."""
    DEPOSIT = "deposit"     # wrapped -> native
    WITHDRAW = "withdraw"   # native -> wrapped


@dataclass
class ConversionRequest:
    """A request for a bridge address.

    Attributes:
        direction: deposit or withdraw
        external_address: account that receives the converted tokens
        captcha_response: single-use captcha token
        from_token: source token (ignored for withdraw, always native)
        to_token: target token
    """
    direction: Direction
    external_address: str
    captcha_response: str
    from_token: AnyTokenType = DEFAULT_WRAPPED_TOKEN
    to_token: AnyTokenType = NATIVE_TOKEN

    @classmethod
    def deposit(
        cls,
        address: str,
        captcha: str,
        from_token: AnyTokenType = DEFAULT_WRAPPED_TOKEN,
        to_token: AnyTokenType = NATIVE_TOKEN,
    ) -> "ConversionRequest":
        return cls(Direction.DEPOSIT, address, captcha, from_token, to_token)

    @classmethod
    def withdraw(
        cls,
        recipient: str,
        captcha: str,
        to_token: AnyTokenType = DEFAULT_WRAPPED_TOKEN,
    ) -> "ConversionRequest":
        return cls(Direction.WITHDRAW, recipient, captcha, NATIVE_TOKEN, to_token)


class VolumeBucket(BaseModel):
    """Per-token volume figures; only the burn fee is used."""

    model_config = ConfigDict(extra="allow")

    burn_fee: Union[int, float] = Field(..., description="Burn fee in minor units (1e-8)")


class BridgeVolume(BaseModel):
    """Volume section of the stats response."""

    model_config = ConfigDict(extra="allow")

    lto: VolumeBucket
    lto20: VolumeBucket
    binance: VolumeBucket


class BridgeStats(BaseModel):
    """Aggregate statistics published by the bridge."""

    model_config = ConfigDict(extra="allow")

    burn_rate: Union[int, float] = Field(..., description="Current burn rate")
    burned: Union[int, float] = Field(..., description="Total tokens burned")
    volume: BridgeVolume
