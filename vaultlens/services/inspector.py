"""Vault inspection orchestration — fetch, load, simulate, report."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Mapping

from ..chains.evm import EvmClient
from ..config import AppConfig
from ..engine import SimulationSession, to_float
from ..interfaces.collateral_config import CollateralConfigSource
from ..interfaces.metadata_source import MetadataSource
from ..interfaces.snapshot_source import SnapshotSource
from ..models import DerivedView, PositionValuation, RiskLevel
from ..protocols.etherfi import CashLensSnapshotSource, Erc20MetadataSource
from ..sources import StaticCollateralConfig

logger = logging.getLogger(__name__)

_LEVEL_LABELS = {
    RiskLevel.SAFE: "✅ SAFE",
    RiskLevel.WARNING: "⚠️ WARNING",
    RiskLevel.DANGER: "🔴 DANGER",
    RiskLevel.CRITICAL: "🚨 CRITICAL",
}


class VaultInspector:
    """Loads vaults into a simulation session and renders reports."""

    def __init__(
        self,
        config: AppConfig,
        snapshot_source: SnapshotSource | None = None,
        metadata_source: MetadataSource | None = None,
        collateral_source: CollateralConfigSource | None = None,
    ) -> None:
        self._config = config
        if snapshot_source is None or metadata_source is None:
            client = EvmClient(config.network)
            snapshot_source = snapshot_source or CashLensSnapshotSource(
                client, config.contracts.cash_lens
            )
            metadata_source = metadata_source or Erc20MetadataSource(client)
        self._snapshot_source = snapshot_source
        self._metadata_source = metadata_source
        self._collateral_source = collateral_source or StaticCollateralConfig(
            config.collateral.ltv
        )

        self.session = SimulationSession({}, config.thresholds)
        self.vault_address: str | None = None
        self._latest_request = 0

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load_vault(self, vault_address: str) -> bool:
        """Fetch and load ``vault_address``; returns False if superseded.

        Submitting a new address resets the session at once. A fetch that
        finishes after a newer address was submitted is discarded.
        """
        self._latest_request += 1
        request_id = self._latest_request
        self.session.reset()
        self.vault_address = None

        snapshot = await self._snapshot_source.fetch_vault_snapshot(vault_address)
        metadata = await self._metadata_source.fetch_asset_metadata_batch(
            snapshot.assets
        )

        if request_id != self._latest_request:
            logger.info("Discarding stale data for %s", vault_address)
            return False

        ltv = self._collateral_source.get_collateral_config(
            p.asset for p in snapshot.collateral
        )
        self.session = SimulationSession(ltv, self._config.thresholds)
        self.session.load(snapshot, metadata)
        self.vault_address = vault_address
        missing = set(snapshot.assets) - set(metadata)
        if missing:
            logger.warning("No metadata for %d asset(s); using defaults", len(missing))
        return True

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def simulate(
        self,
        price_overrides: Mapping[str, float] | None = None,
        debt_usd: float | None = None,
        target_health_factor: float | None = None,
    ) -> DerivedView:
        """Apply overrides to the loaded vault and derive the simulated view."""
        for asset, price in (price_overrides or {}).items():
            self.session.set_price_override(asset, price)
        if target_health_factor is not None:
            self.session.set_health_factor_target(target_health_factor)
        elif debt_usd is not None:
            self.session.set_simulated_debt(debt_usd)
        return self.session.derive()

    def liquidation_prices(self, view: DerivedView | None = None) -> dict[str, float | None]:
        """Per-collateral price at which the health factor reaches 1.0."""
        if not self.session.is_loaded:
            return {}
        return self.session.liquidation_prices(view)

    # ------------------------------------------------------------------
    # Formatting helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _format_wallet(address: str) -> str:
        if len(address) > 16:
            return f"{address[:6]}...{address[-4:]}"
        return address

    @staticmethod
    def _now_str() -> str:
        return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

    @staticmethod
    def _asset_lines(valuations: tuple[PositionValuation, ...]) -> list[str]:
        if not valuations:
            return ["  —"]
        return [
            f"  {v.symbol}: {v.amount:,.6f} × ${v.price:,.2f} = ${v.value_usd:,.2f}"
            + (f" (LTV {v.ltv_percent}%)" if v.ltv_percent else "")
            for v in valuations
        ]

    def build_report(self, view: DerivedView, title: str = "Vault Risk Report") -> str:
        """Render a derived view as plain text."""
        total_collateral = to_float(view.metrics.total_collateral_usd)
        max_borrow = to_float(view.metrics.max_borrow_usd)
        debt_label = "Simulated Debt" if view.debt_is_simulated else "Total Debt"

        lines = [
            f"📊 {title} · {self._format_wallet(self.vault_address or '')}",
            "",
            "Collateral:",
            *self._asset_lines(view.collateral),
            "Borrowed:",
            *self._asset_lines(view.debt),
            "",
            f"Total Collateral: ${total_collateral:,.2f}",
            f"{debt_label}: ${view.current_debt_usd:,.2f}",
            f"Borrowing Power: ${max_borrow:,.2f}",
            f"LTV: {view.risk.ltv:.2%} · Health: {view.risk.health_factor:.2%}",
            f"Status: {_LEVEL_LABELS[view.risk.level]}",
        ]
        liquidation = {
            asset: price
            for asset, price in self.liquidation_prices(view).items()
            if price is not None
        }
        if liquidation:
            symbols = {v.asset: v.symbol for v in view.collateral}
            lines += ["", "Liquidation prices (others unchanged):"]
            lines += [
                f"  {symbols.get(asset, asset)}: ${price:,.2f}"
                for asset, price in liquidation.items()
            ]
        if view.risk.alert:
            lines += ["", "🚨 Liquidation risk! Add collateral or repay debt immediately."]
        lines += ["", f"{self._now_str()} UTC"]
        return "\n".join(lines)
