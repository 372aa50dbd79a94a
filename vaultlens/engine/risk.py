"""Risk evaluation: health factor, LTV ratio and risk level.

The health factor here is a borrow-usage ratio, ``debt / max_borrow``: 0 is
no debt, 1.0 is fully used borrowing power, anything above is over-borrowed.
Ratios are never clamped.
"""
from __future__ import annotations

from typing import Iterable, Mapping

from ..models import (
    AssetMetadata,
    AssetPosition,
    RiskAssessment,
    RiskLevel,
    ThresholdsConfig,
    VaultMetrics,
    canonical_address,
)
from .fixed_point import to_float
from .metrics import value_position


def calc_health_factor(current_debt_usd: float, max_borrow_usd: float) -> float:
    if max_borrow_usd <= 0:
        return 0.0
    return current_debt_usd / max_borrow_usd


def calc_ltv(current_debt_usd: float, total_collateral_usd: float) -> float:
    if total_collateral_usd <= 0:
        return 0.0
    return current_debt_usd / total_collateral_usd


def classify(health_factor: float, thresholds: ThresholdsConfig) -> RiskLevel:
    """Map a health factor onto a risk level. Lower bounds are inclusive."""
    if health_factor >= thresholds.critical:
        return RiskLevel.CRITICAL
    if health_factor >= thresholds.danger:
        return RiskLevel.DANGER
    if health_factor >= thresholds.warning:
        return RiskLevel.WARNING
    return RiskLevel.SAFE


def evaluate(
    current_debt_usd: float,
    metrics: VaultMetrics,
    thresholds: ThresholdsConfig,
) -> RiskAssessment:
    """Assess ``current_debt_usd`` (dollars) against scaled-USD ``metrics``."""
    max_borrow = to_float(metrics.max_borrow_usd)
    total_collateral = to_float(metrics.total_collateral_usd)
    health_factor = calc_health_factor(current_debt_usd, max_borrow)
    return RiskAssessment(
        health_factor=health_factor,
        ltv=calc_ltv(current_debt_usd, total_collateral),
        level=classify(health_factor, thresholds),
    )


# ---------------------------------------------------------------------------
# Gauge solvers
# ---------------------------------------------------------------------------


def debt_for_health_factor(target: float, metrics: VaultMetrics) -> float:
    """Debt in dollars that would put the vault at ``target`` health factor."""
    if target <= 0:
        return 0.0
    return target * to_float(metrics.max_borrow_usd)


def price_for_health_factor(
    asset: str,
    target: float,
    current_debt_usd: float,
    collateral: Iterable[AssetPosition],
    prices: Mapping[str, int],
    metadata: Mapping[str, AssetMetadata] | None,
    ltv_config: Mapping[str, int],
) -> float | None:
    """Unit price of collateral ``asset`` at which the health factor hits ``target``.

    Every other position keeps its current price. Returns ``None`` when no
    price can move the health factor (the asset is absent, has no amount or
    no LTV, or the target is not positive). The result is floored at 0.
    """
    asset = canonical_address(asset)
    if target <= 0:
        return None

    target_borrow = 0.0
    other_borrow = 0.0
    for position in collateral:
        valuation = value_position(position, prices, metadata, ltv_config)
        if valuation.asset == asset:
            target_borrow += valuation.amount * valuation.ltv_percent / 100
        else:
            other_borrow += valuation.borrow_power_usd

    if target_borrow <= 0:
        return None

    required_max_borrow = current_debt_usd / target
    return max(0.0, (required_max_borrow - other_borrow) / target_borrow)


def liquidation_price(
    asset: str,
    current_debt_usd: float,
    collateral: Iterable[AssetPosition],
    prices: Mapping[str, int],
    metadata: Mapping[str, AssetMetadata] | None,
    ltv_config: Mapping[str, int],
) -> float | None:
    """Unit price of ``asset`` at which debt uses all borrowing power."""
    return price_for_health_factor(
        asset, 1.0, current_debt_usd, collateral, prices, metadata, ltv_config
    )
