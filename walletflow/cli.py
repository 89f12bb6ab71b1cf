"""Diagnostic CLI for the Sepolia RPC client and the transfer checks"""

import argparse
import asyncio
import sys
import uuid
from decimal import Decimal
from typing import Optional, Sequence

import structlog
from eth_utils import from_wei

from .config import settings
from .core.errors import classify_send_error
from .core.transfer import validate_transfer
from .logging_config import setup_logging
from .providers import SepoliaRpcProvider
from .services.evm import format_eth


async def cli_balance(address: str, rpc_url: Optional[str] = None) -> int:
    """Print the Sepolia ETH balance of an address"""
    provider = SepoliaRpcProvider(rpc_url=rpc_url)
    try:
        balance = await provider.get_balance(address)
    except Exception as e:
        print(f"❌ Error: {e}")
        return 1
    finally:
        await provider.close()

    print(f"Address: {address}")
    print(f"Network: {settings.network_label}")
    print(f"Balance: {format_eth(balance)} ETH")
    return 0


async def cli_gas_price(rpc_url: Optional[str] = None) -> int:
    """Print the current gas price and the fee caps a transfer would use"""
    provider = SepoliaRpcProvider(rpc_url=rpc_url)
    try:
        gas_price = await provider.get_gas_price()
    except Exception as e:
        print(f"❌ Error: {e}")
        return 1
    finally:
        await provider.close()

    print(f"Gas price: {gas_price} wei ({format_eth(Decimal(from_wei(gas_price, 'gwei')))} gwei)")
    print(f"maxFeePerGas: {gas_price * settings.max_fee_multiplier} wei")
    print(f"maxPriorityFeePerGas: {gas_price} wei")
    print(f"Gas limit: {settings.transfer_gas_limit}")
    return 0


async def cli_health(rpc_url: Optional[str] = None) -> int:
    provider = SepoliaRpcProvider(rpc_url=rpc_url)
    try:
        result = await provider.health_check()
    finally:
        await provider.close()

    status = result.get("status")
    icon = "✅" if status == "healthy" else "❌"
    print(f"{icon} {provider.rpc_url}: {status}")
    for key, value in result.items():
        if key != "status":
            print(f"   {key}: {value}")
    return 0 if status == "healthy" else 1


def cli_check_transfer(recipient: str, amount: str) -> int:
    error = validate_transfer(recipient, amount)
    if error:
        print(f"❌ {error}")
        return 1
    print("✅ Transfer input is valid")
    return 0


def cli_classify_error(raw_message: str) -> int:
    category, text = classify_send_error(Exception(raw_message))
    print(f"{category.value}: {text}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="walletflow diagnostics")
    parser.add_argument("--rpc-url", help=f"RPC endpoint (default: {settings.sepolia_rpc_url})")
    parser.add_argument("--log-level", help="Override LOG_LEVEL")
    parser.add_argument("--json-logs", action="store_true", default=None, help="Render logs as JSON (default: LOG_JSON)")
    subparsers = parser.add_subparsers(dest="command")

    balance_parser = subparsers.add_parser("balance", help="Show the ETH balance of an address")
    balance_parser.add_argument("address", help="Wallet address")

    subparsers.add_parser("gas-price", help="Show the current gas price and fee caps")
    subparsers.add_parser("health", help="Check the RPC endpoint")

    check_parser = subparsers.add_parser("check-transfer", help="Validate a recipient and amount")
    check_parser.add_argument("recipient", help="Recipient address")
    check_parser.add_argument("amount", help="Amount in ETH")

    classify_parser = subparsers.add_parser("classify-error", help="Show how a send failure would be reported")
    classify_parser.add_argument("message", help="Raw error message")

    return parser


async def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    setup_logging(args.log_level, json_logs=args.json_logs)

    # Bind run context for all downstream logs
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(run_id=str(uuid.uuid4())[:8], command=args.command)

    if args.command == "balance":
        return await cli_balance(args.address, args.rpc_url)
    if args.command == "gas-price":
        return await cli_gas_price(args.rpc_url)
    if args.command == "health":
        return await cli_health(args.rpc_url)
    if args.command == "check-transfer":
        return cli_check_transfer(args.recipient, args.amount)
    if args.command == "classify-error":
        return cli_classify_error(args.message)

    print(f"❌ Unknown command: {args.command}")
    parser.print_help()
    return 2


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
