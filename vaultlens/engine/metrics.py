"""Vault metrics — pure aggregation of position values, no I/O.

Each collateral position is valued as::

    value_usd   = amount / 10**decimals * price / 10**6
    borrow_power = value_usd * ltv_percent / 100

and the float totals are floored into scaled USD at the very end. Assets
without metadata use 18 decimals; assets without a price are worth 0; assets
without an LTV entry still count toward collateral but lend nothing.
"""
from __future__ import annotations

import logging
from typing import Iterable, Mapping

from ..models import (
    DEFAULT_METADATA,
    AssetMetadata,
    AssetPosition,
    PositionValuation,
    VaultMetrics,
    canonical_address,
)
from .fixed_point import resolve_int, to_float, to_scaled

logger = logging.getLogger(__name__)


def resolve_metadata(
    asset: str, metadata: Mapping[str, AssetMetadata] | None
) -> AssetMetadata:
    """Metadata for ``asset``, falling back to UNKNOWN / 18 decimals."""
    if not metadata:
        return DEFAULT_METADATA
    return metadata.get(canonical_address(asset), DEFAULT_METADATA)


def human_amount(amount: int, decimals: int) -> float:
    """Native-resolution token amount → whole tokens."""
    decimals = resolve_int(decimals, DEFAULT_METADATA.decimals)
    if decimals < 0:
        decimals = DEFAULT_METADATA.decimals
    return resolve_int(amount) / 10**decimals


def value_position(
    position: AssetPosition,
    prices: Mapping[str, int],
    metadata: Mapping[str, AssetMetadata] | None,
    ltv_config: Mapping[str, int] | None = None,
) -> PositionValuation:
    """Value one position. ``ltv_config=None`` values it as debt (no LTV)."""
    asset = canonical_address(position.asset)
    meta = resolve_metadata(asset, metadata)
    amount = human_amount(position.amount, meta.decimals)
    price = to_float(prices.get(asset, 0))
    value_usd = amount * price

    ltv_percent = 0
    borrow_power = 0.0
    if ltv_config is not None:
        ltv_percent = resolve_int(ltv_config.get(asset, 0))
        borrow_power = value_usd * (ltv_percent / 100)

    return PositionValuation(
        asset=asset,
        symbol=meta.symbol,
        amount=amount,
        price=price,
        value_usd=value_usd,
        ltv_percent=ltv_percent,
        borrow_power_usd=borrow_power,
    )


def value_positions(
    collateral: Iterable[AssetPosition],
    prices: Mapping[str, int],
    metadata: Mapping[str, AssetMetadata] | None,
    ltv_config: Mapping[str, int],
) -> tuple[PositionValuation, ...]:
    """Value every collateral position, in sequence order."""
    return tuple(
        value_position(position, prices, metadata, ltv_config) for position in collateral
    )


def aggregate(valuations: Iterable[PositionValuation]) -> VaultMetrics:
    """Sum valued positions into floored scaled-USD metrics."""
    total_collateral = 0.0
    max_borrow = 0.0
    for valuation in valuations:
        if valuation.ltv_percent > 100:
            logger.warning(
                "LTV %d%% for %s exceeds 100%%; max borrow may exceed collateral",
                valuation.ltv_percent,
                valuation.asset,
            )
        total_collateral += valuation.value_usd
        max_borrow += valuation.borrow_power_usd

    return VaultMetrics(
        total_collateral_usd=to_scaled(total_collateral),
        max_borrow_usd=to_scaled(max_borrow),
    )


def compute_metrics(
    collateral: Iterable[AssetPosition],
    prices: Mapping[str, int],
    metadata: Mapping[str, AssetMetadata] | None,
    ltv_config: Mapping[str, int],
) -> VaultMetrics:
    """Total collateral value and maximum borrowable value, in scaled USD."""
    return aggregate(value_positions(collateral, prices, metadata, ltv_config))


def compute_debt_value(
    debt: Iterable[AssetPosition],
    prices: Mapping[str, int],
    metadata: Mapping[str, AssetMetadata] | None,
) -> float:
    """Total debt in dollars at the given prices."""
    return sum(value_position(position, prices, metadata).value_usd for position in debt)
