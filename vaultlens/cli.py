"""Command-line interface for the vault risk inspector."""
from __future__ import annotations

import argparse
import asyncio
import logging
import re
import sys

from .config import load_config
from .errors import VaultLensError
from .logging_setup import configure_logging
from .services import VaultInspector
from .sources import FileSnapshotSource

logger = logging.getLogger(__name__)

ETH_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


def _address(value: str) -> str:
    if not ETH_ADDRESS_RE.match(value):
        raise argparse.ArgumentTypeError(f"Invalid Ethereum address format: {value}")
    return value


def _price_override(value: str) -> tuple[str, float]:
    """Parse ``ASSET=USD`` into ``(asset, price)``."""
    asset, sep, price = value.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"Expected ASSET=USD, got {value!r}")
    asset = _address(asset.strip())
    try:
        parsed = float(price)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid price {price!r}") from e
    if parsed < 0:
        raise argparse.ArgumentTypeError(f"Price must not be negative: {price}")
    return asset, parsed


def _non_negative(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid number {value!r}") from e
    if parsed < 0:
        raise argparse.ArgumentTypeError(f"Value must not be negative: {value}")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="vaultlens",
        description="ether.fi Cash vault risk inspector and what-if simulator",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    inspect_parser = sub.add_parser("inspect", help="Show a vault's current risk")
    simulate_parser = sub.add_parser("simulate", help="What-if simulation of a vault")

    for p in (inspect_parser, simulate_parser):
        p.add_argument("address", type=_address, help="Vault (Safe) address")
        p.add_argument(
            "--snapshot",
            default=None,
            help="Read the vault from a YAML snapshot file instead of RPC",
        )

    simulate_parser.add_argument(
        "--price",
        dest="prices",
        action="append",
        type=_price_override,
        default=[],
        metavar="ASSET=USD",
        help="Override an asset's unit price (repeatable)",
    )
    debt_group = simulate_parser.add_mutually_exclusive_group()
    debt_group.add_argument(
        "--debt", type=_non_negative, default=None, help="Simulated total debt in USD"
    )
    debt_group.add_argument(
        "--target-hf",
        type=_non_negative,
        default=None,
        help="Simulate the debt that yields this health factor (e.g. 0.8)",
    )

    return parser


async def _run(args: argparse.Namespace) -> None:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)

    if args.snapshot:
        source = FileSnapshotSource(args.snapshot)
        inspector = VaultInspector(config, snapshot_source=source, metadata_source=source)
    else:
        inspector = VaultInspector(config)

    await inspector.load_vault(args.address)
    current = inspector.session.derive()
    print(inspector.build_report(current))

    if args.command == "simulate":
        simulated = inspector.simulate(
            price_overrides=dict(args.prices),
            debt_usd=args.debt,
            target_health_factor=args.target_hf,
        )
        print()
        print(inspector.build_report(simulated, title="Simulated"))


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        asyncio.run(_run(args))
    except (VaultLensError, FileNotFoundError) as e:
        logger.error("%s", e)
        sys.exit(1)
