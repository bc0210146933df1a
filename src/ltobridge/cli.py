"""Command line interface for the bridge client."""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from typing import Optional

from ltobridge.config import get_settings
from ltobridge.errors import BridgeError
from ltobridge.service import BridgeService, get_bridge_service
from ltobridge.tokens import SwapTokenType, TokenType

logger = logging.getLogger(__name__)

TOKEN_CHOICES = [t.value for t in TokenType] + [t.value for t in SwapTokenType]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ltobridge", description="LTO bridge client")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    deposit = sub.add_parser("deposit", help="Get a bridge address converting to LTO")
    deposit.add_argument("address", help="Your LTO account address")
    deposit.add_argument("--captcha", required=True, help="Captcha response")
    deposit.add_argument("--from", dest="from_token", default=TokenType.LTO20.value,
                         type=str.upper, choices=TOKEN_CHOICES, help="Token converted from")
    deposit.add_argument("--to", dest="to_token", default=TokenType.LTO.value,
                         type=str.upper, choices=TOKEN_CHOICES, help="Token converted to")

    withdraw = sub.add_parser("withdraw", help="Get a bridge address converting from LTO")
    withdraw.add_argument("recipient", help="Recipient address")
    withdraw.add_argument("--captcha", required=True, help="Captcha response")
    withdraw.add_argument("--to", dest="to_token", default=TokenType.LTO20.value,
                          type=str.upper, choices=TOKEN_CHOICES, help="Token converted to")

    faucet = sub.add_parser("faucet", help="Request faucet tokens")
    faucet.add_argument("recipient", help="Recipient address")
    faucet.add_argument("--captcha", required=True, help="Captcha response")

    sub.add_parser("stats", help="Show burn statistics")
    sub.add_parser("cache", help="Show cached bridge addresses")

    return parser


async def run(args: argparse.Namespace, service: BridgeService) -> int:
    try:
        if args.command == "deposit":
            print(await service.deposit_to(args.address, args.captcha, args.from_token, args.to_token))
        elif args.command == "withdraw":
            print(await service.withdraw_to(args.recipient, args.captcha, args.to_token))
        elif args.command == "faucet":
            print(json.dumps(await service.faucet(args.recipient, args.captcha), indent=2))
        elif args.command == "stats":
            print(f"Burn rate:     {await service.burn_rate()}")
            print(f"Burned tokens: {await service.burned_tokens()}")
            fees = asdict(await service.burn_fees())
            print("Burn fees:     " + ", ".join(f"{k}={v}" for k, v in fees.items()))
        elif args.command == "cache":
            print(json.dumps(service.cache.to_dict(), indent=2))
    except BridgeError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        await service.close()

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    log_level = logging.DEBUG if (args.debug or settings.debug) else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.debug(f"Settings: {settings.get_safe_dict()}")

    return asyncio.run(run(args, get_bridge_service()))
