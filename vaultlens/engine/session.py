"""Simulation session — the one piece of mutable state in the engine.

A session holds the last loaded snapshot, its metadata, a sparse set of
price overrides and an optional simulated debt. ``derive()`` recomputes the
full view from scratch on every call; nothing is cached, and the snapshot is
never modified.
"""
from __future__ import annotations

import enum
import logging
from types import MappingProxyType
from typing import Mapping

from ..errors import SessionNotLoadedError
from ..models import (
    AssetMetadata,
    DerivedView,
    ThresholdsConfig,
    VaultSnapshot,
    canonical_address,
)
from . import prices as price_table
from .fixed_point import resolve_number, to_scaled
from .metrics import aggregate, value_position, value_positions
from .risk import debt_for_health_factor, evaluate, price_for_health_factor

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    EMPTY = "empty"
    LOADED = "loaded"


class SimulationSession:
    """What-if simulation over a single vault snapshot."""

    def __init__(
        self,
        ltv_config: Mapping[str, int],
        thresholds: ThresholdsConfig | None = None,
    ) -> None:
        self._ltv_config = {
            canonical_address(asset): ltv for asset, ltv in ltv_config.items()
        }
        self._thresholds = thresholds or ThresholdsConfig()
        self._snapshot: VaultSnapshot | None = None
        self._metadata: dict[str, AssetMetadata] = {}
        self._overrides: dict[str, int] = {}
        self._simulated_debt: float | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return SessionState.LOADED if self._snapshot is not None else SessionState.EMPTY

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def snapshot(self) -> VaultSnapshot | None:
        return self._snapshot

    @property
    def price_overrides(self) -> Mapping[str, int]:
        return MappingProxyType(dict(self._overrides))

    @property
    def simulated_debt(self) -> float | None:
        return self._simulated_debt

    def _require_loaded(self, operation: str) -> VaultSnapshot:
        if self._snapshot is None:
            raise SessionNotLoadedError(f"Cannot {operation}: no vault loaded")
        return self._snapshot

    def load(
        self,
        snapshot: VaultSnapshot,
        metadata: Mapping[str, AssetMetadata] | None = None,
    ) -> None:
        """Replace the snapshot and reseed overrides with its own prices."""
        self._snapshot = snapshot
        self._metadata = {
            canonical_address(asset): meta for asset, meta in (metadata or {}).items()
        }
        self._overrides = price_table.merge(snapshot.prices, {})
        self._simulated_debt = None
        logger.debug(
            "Session loaded: %d collateral, %d debt positions, %d prices",
            len(snapshot.collateral),
            len(snapshot.debt),
            len(self._overrides),
        )

    def reset(self) -> None:
        """Drop everything and return to EMPTY."""
        self._snapshot = None
        self._metadata = {}
        self._overrides = {}
        self._simulated_debt = None
        logger.debug("Session reset")

    # ------------------------------------------------------------------
    # Overrides
    # ------------------------------------------------------------------

    def set_price_override(self, asset: str, price_usd: float) -> None:
        """Simulate ``asset`` trading at ``price_usd`` dollars per token."""
        self._require_loaded("set a price override")
        key = canonical_address(asset)
        self._overrides[key] = to_scaled(price_usd)
        logger.debug("Price override %s = %d", key, self._overrides[key])

    def clear_price_override(self, asset: str) -> None:
        """Restore the snapshot price for ``asset``."""
        snapshot = self._require_loaded("clear a price override")
        key = canonical_address(asset)
        original = price_table.merge(snapshot.prices, {})
        if key in original:
            self._overrides[key] = original[key]
        else:
            self._overrides.pop(key, None)

    def set_simulated_debt(self, debt_usd: float | None) -> None:
        """Preview a hypothetical debt in dollars; ``None`` uses the real debt."""
        self._require_loaded("set a simulated debt")
        self._simulated_debt = None if debt_usd is None else resolve_number(debt_usd)
        logger.debug("Simulated debt = %s", self._simulated_debt)

    def set_health_factor_target(self, target: float) -> float:
        """Set the simulated debt that yields ``target``; returns that debt."""
        self._require_loaded("set a health factor target")
        view = self.derive()
        debt = debt_for_health_factor(target, view.metrics)
        self.set_simulated_debt(debt)
        return debt

    def price_for_health_factor(
        self, asset: str, target: float, view: DerivedView | None = None
    ) -> float | None:
        """Price of collateral ``asset`` that moves ``view`` to ``target``."""
        snapshot = self._require_loaded("solve for a price")
        view = view or self.derive()
        return price_for_health_factor(
            asset,
            target,
            view.current_debt_usd,
            snapshot.collateral,
            view.effective_prices,
            self._metadata,
            self._ltv_config,
        )

    def liquidation_prices(self, view: DerivedView | None = None) -> dict[str, float | None]:
        """Per collateral asset, the price at which the health factor reaches 1.0."""
        snapshot = self._require_loaded("solve for liquidation prices")
        view = view or self.derive()
        assets = dict.fromkeys(canonical_address(p.asset) for p in snapshot.collateral)
        return {asset: self.price_for_health_factor(asset, 1.0, view) for asset in assets}

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------

    def derive(self) -> DerivedView:
        """Recompute metrics and risk from snapshot + overrides."""
        snapshot = self._require_loaded("derive metrics")

        effective = price_table.merge(snapshot.prices, self._overrides)
        collateral = value_positions(
            snapshot.collateral, effective, self._metadata, self._ltv_config
        )
        debt = tuple(
            value_position(position, effective, self._metadata)
            for position in snapshot.debt
        )
        metrics = aggregate(collateral)
        actual_debt = sum(valuation.value_usd for valuation in debt)

        simulated = self._simulated_debt is not None
        current_debt = self._simulated_debt if simulated else actual_debt

        return DerivedView(
            metrics=metrics,
            risk=evaluate(current_debt, metrics, self._thresholds),
            effective_prices=MappingProxyType(effective),
            current_debt_usd=current_debt,
            actual_debt_usd=actual_debt,
            debt_is_simulated=simulated,
            collateral=collateral,
            debt=debt,
        )
