"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from eth_abi import encode

from vaultlens.config import (
    AppConfig,
    CollateralConfig,
    ContractsConfig,
    NetworkConfig,
    ThresholdsConfig,
)
from vaultlens.models import AssetMetadata, AssetPosition, VaultSnapshot
from vaultlens.protocols.etherfi.decoder import SAFE_CASH_DATA

LIQUID_ETH = "0xf0bb20865277abd641a307ece5ee04e79073416c"
USDC = "0x06efdbff2a14a7c8e15944d1f4a48f9f95f663a4"
UNLISTED = "0x0000000000000000000000000000000000000000"
SAFE = "0x3f07a5603665033B04AD0eD4ebc0419F982d9F94"

ONE_TOKEN = 10**18


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_thresholds() -> ThresholdsConfig:
    return ThresholdsConfig(warning=0.6, danger=0.8, critical=0.9)


@pytest.fixture()
def sample_ltv() -> dict[str, int]:
    return {LIQUID_ETH: 50, USDC: 90}


@pytest.fixture()
def sample_app_config(
    sample_thresholds: ThresholdsConfig, sample_ltv: dict[str, int]
) -> AppConfig:
    return AppConfig(
        network=NetworkConfig(
            rpc_endpoints=("https://rpc1.example.com", "https://rpc2.example.com"),
            rpc_timeout=10,
        ),
        contracts=ContractsConfig(cash_lens="0x7DA874f3BacA1A8F0af27E5ceE1b8C66A772F84E"),
        thresholds=sample_thresholds,
        collateral=CollateralConfig(ltv=sample_ltv),
    )


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_metadata() -> dict[str, AssetMetadata]:
    return {
        LIQUID_ETH: AssetMetadata(symbol="LiquidETH", decimals=18),
        USDC: AssetMetadata(symbol="USDC", decimals=6),
    }


@pytest.fixture()
def sample_snapshot() -> VaultSnapshot:
    """1 LiquidETH at $1000 as collateral, 400 USDC borrowed."""
    return VaultSnapshot(
        collateral=(AssetPosition(asset=LIQUID_ETH, amount=ONE_TOKEN),),
        debt=(AssetPosition(asset=USDC, amount=400 * 10**6),),
        prices={LIQUID_ETH: 1_000_000_000, USDC: 1_000_000},
    )


# ---------------------------------------------------------------------------
# Config / snapshot YAML fixtures
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    network:
      name: Scroll
      chain_id: 534352
      rpc_endpoints: ["https://rpc.example.com"]
      rpc_timeout: 10
    contracts:
      cash_lens: "0x7DA874f3BacA1A8F0af27E5ceE1b8C66A772F84E"
    risk:
      thresholds:
        warning: 0.5
        danger: 0.75
        critical: 0.95
    collateral:
      ltv:
        "0xF0BB20865277ABD641A307ECE5EE04E79073416C": 50
        "0x06efdbff2a14a7c8e15944d1f4a48f9f95f663a4": 90
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


SNAPSHOT_YAML = textwrap.dedent(f"""\
    collateral:
      - {{token: "{LIQUID_ETH.upper().replace('0X', '0x')}", amount: "{ONE_TOKEN}"}}
    debt:
      - {{token: "{USDC}", amount: 400000000}}
    prices:
      - {{token: "{LIQUID_ETH}", amount: 1000000000}}
      - {{token: "{USDC}", amount: 1000000}}
    metadata:
      "{LIQUID_ETH}": {{symbol: LiquidETH, decimals: 18}}
      "{USDC}": {{symbol: USDC, decimals: 6}}
""")


@pytest.fixture()
def snapshot_yaml_path(tmp_path: Path) -> Path:
    path = tmp_path / "snapshot.yaml"
    path.write_text(SNAPSHOT_YAML)
    return path


# ---------------------------------------------------------------------------
# ABI helpers
# ---------------------------------------------------------------------------

EMPTY_WITHDRAWAL = ([], [], UNLISTED, 0)
EMPTY_DEBIT_SPEND = ([], [], [], 0)


def encode_safe_cash_data(
    collateral: list[tuple[str, int]],
    borrows: list[tuple[str, int]],
    prices: list[tuple[str, int]],
    mode: int = 0,
    totals: tuple[int, int, int] = (0, 0, 0),
) -> str:
    """Build a ``getSafeCashData`` return value."""
    cash_data = (
        mode,
        collateral,
        borrows,
        prices,
        EMPTY_WITHDRAWAL,
        *totals,
        0,
        0,
        0,
        0,
        EMPTY_DEBIT_SPEND,
    )
    return "0x" + encode([SAFE_CASH_DATA], [cash_data]).hex()


def encode_return(abi_type: str, value) -> str:
    return "0x" + encode([abi_type], [value]).hex()


@pytest.fixture()
def sample_cash_data_hex() -> str:
    return encode_safe_cash_data(
        collateral=[(LIQUID_ETH, ONE_TOKEN)],
        borrows=[(USDC, 400 * 10**6)],
        prices=[(LIQUID_ETH, 1_000_000_000), (USDC, 1_000_000)],
        mode=1,
        totals=(1_000_000_000, 400_000_000, 500_000_000),
    )
