"""vaultlens configuration — network, CashLens address, risk thresholds, LTV table."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .errors import ConfigError
from .models import ThresholdsConfig

logger = logging.getLogger(__name__)

# ether.fi Cash collateral LTVs on Scroll, in percent.
DEFAULT_LTV_TABLE: dict[str, int] = {
    "0x5300000000000000000000000000000000000004": 55,  # wETH
    "0x06efdbff2a14a7c8e15944d1f4a48f9f95f663a4": 90,  # USDC
    "0xf55bec9cafdbe8730f096aa55dad6d22d44099df": 90,  # USDT
    "0x01f0a31698c4d065659b9bdc21b3610292a1c506": 55,  # weETH
    "0x939778d83b46b456224a33fb59630b11dec56663": 80,  # eUSD
    "0x657e8c867d8b37dcc18fa4caead9c45eb088c642": 52,  # eBTC
    "0x056a5fa5da84ceb7f93d36e545c5905607d8bd81": 20,  # ETHFI
    "0xf0bb20865277abd641a307ece5ee04e79073416c": 50,  # LiquidETH
    "0x5f46d540b6ed704c3c8789105f30e075aa900726": 50,  # LiquidBTC
    "0x08c6f91e2b681faf5e17227f2a44c307b3c1364c": 80,  # LiquidUSD
    "0xd83e3d560ba6f05094d9d8b3eb8aaea571d1864e": 45,  # wHYPE
    "0xa519afbc91986c0e7501d7e34968fee51cd901ac": 40,  # beHYPE
    "0xd29687c813d741e2f938f4ac377128810e217b1b": 20,  # SCR
}

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NetworkConfig:
    name: str = "Scroll"
    chain_id: int = 534352
    rpc_endpoints: tuple[str, ...] = ("https://rpc.scroll.io",)
    rpc_timeout: int = 30


@dataclass(frozen=True)
class ContractsConfig:
    cash_lens: str = "0x7DA874f3BacA1A8F0af27E5ceE1b8C66A772F84E"


@dataclass(frozen=True)
class CollateralConfig:
    """Per-asset LTV percentages, keyed by lowercase address."""

    ltv: dict[str, int] = field(default_factory=lambda: dict(DEFAULT_LTV_TABLE))


@dataclass(frozen=True)
class AppConfig:
    network: NetworkConfig = field(default_factory=NetworkConfig)
    contracts: ContractsConfig = field(default_factory=ContractsConfig)
    thresholds: ThresholdsConfig = field(default_factory=ThresholdsConfig)
    collateral: CollateralConfig = field(default_factory=CollateralConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Substitute ``${VAR}`` references in strings, lists and dicts; unset → ""."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_network(raw: dict[str, Any]) -> NetworkConfig:
    endpoints = raw.get("rpc_endpoints", list(NetworkConfig.rpc_endpoints))
    return NetworkConfig(
        name=raw.get("name", NetworkConfig.name),
        chain_id=int(raw.get("chain_id", NetworkConfig.chain_id)),
        # Unset ${VAR} references interpolate to "" and are dropped.
        rpc_endpoints=tuple(e.strip() for e in endpoints if e and e.strip()),
        rpc_timeout=int(raw.get("rpc_timeout", NetworkConfig.rpc_timeout)),
    )


def _build_contracts(raw: dict[str, Any]) -> ContractsConfig:
    return ContractsConfig(cash_lens=raw.get("cash_lens", ContractsConfig.cash_lens))


def _build_thresholds(raw: dict[str, Any]) -> ThresholdsConfig:
    return ThresholdsConfig(
        warning=float(raw.get("warning", 0.6)),
        danger=float(raw.get("danger", 0.8)),
        critical=float(raw.get("critical", 0.9)),
    )


def build_ltv_table(raw: dict[str, Any]) -> dict[str, int]:
    """Canonicalise and validate an address → LTV percent table."""
    table: dict[str, int] = {}
    for address, ltv in raw.items():
        try:
            percent = int(ltv)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"LTV for {address} is not an integer: {ltv!r}") from e
        if not 0 <= percent <= 100:
            raise ConfigError(f"LTV for {address} must be within 0-100, got {percent}")
        table[str(address).strip().lower()] = percent
    return table


def _build_collateral(raw: dict[str, Any]) -> CollateralConfig:
    if "ltv" not in raw:
        return CollateralConfig()
    return CollateralConfig(ltv=build_ltv_table(raw.get("ltv") or {}))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Read config.yaml (plus .env) into a validated ``AppConfig``.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from this package).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        network=_build_network(raw.get("network", {})),
        contracts=_build_contracts(raw.get("contracts", {})),
        thresholds=_build_thresholds(raw.get("risk", {}).get("thresholds", {})),
        collateral=_build_collateral(raw.get("collateral", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise ``ConfigError`` for settings the inspector cannot run with."""
    if not cfg.network.rpc_endpoints:
        raise ConfigError("At least one RPC endpoint must be configured")
    if cfg.network.rpc_timeout <= 0:
        raise ConfigError("rpc_timeout must be positive")
    if not cfg.contracts.cash_lens:
        raise ConfigError("contracts.cash_lens is not configured")
