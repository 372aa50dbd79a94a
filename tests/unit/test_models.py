"""Unit tests for data models."""
from __future__ import annotations

import pytest

from vaultlens.models import (
    AssetMetadata,
    AssetPosition,
    RiskAssessment,
    RiskLevel,
    VaultSnapshot,
    canonical_address,
)

from tests.conftest import LIQUID_ETH, USDC


class TestCanonicalAddress:
    def test_lowercases(self) -> None:
        assert canonical_address("0xABCdef") == "0xabcdef"

    def test_strips_whitespace(self) -> None:
        assert canonical_address("  0xAB \n") == "0xab"


class TestAssetMetadata:
    def test_defaults(self) -> None:
        meta = AssetMetadata()
        assert meta.symbol == "UNKNOWN"
        assert meta.decimals == 18

    def test_frozen(self) -> None:
        meta = AssetMetadata("USDC", 6)
        with pytest.raises(AttributeError):
            meta.decimals = 18  # type: ignore[misc]


class TestVaultSnapshot:
    def test_frozen(self, sample_snapshot: VaultSnapshot) -> None:
        with pytest.raises(AttributeError):
            sample_snapshot.debt = ()  # type: ignore[misc]

    def test_prices_are_read_only(self, sample_snapshot: VaultSnapshot) -> None:
        with pytest.raises(TypeError):
            sample_snapshot.prices[USDC] = 0  # type: ignore[index]

    def test_price_keys_are_canonicalised(self) -> None:
        snapshot = VaultSnapshot(prices={USDC.upper().replace("0X", "0x"): 1_000_000})
        assert dict(snapshot.prices) == {USDC: 1_000_000}

    def test_prices_are_copied(self) -> None:
        prices = {USDC: 1_000_000}
        snapshot = VaultSnapshot(prices=prices)
        prices[USDC] = 0
        assert snapshot.prices[USDC] == 1_000_000

    def test_lists_become_tuples(self) -> None:
        snapshot = VaultSnapshot(collateral=[AssetPosition(USDC, 1)])  # type: ignore[arg-type]
        assert isinstance(snapshot.collateral, tuple)

    def test_assets_deduplicated_in_order(self) -> None:
        snapshot = VaultSnapshot(
            collateral=(AssetPosition(LIQUID_ETH.upper().replace("0X", "0x"), 1),),
            debt=(AssetPosition(USDC, 1), AssetPosition(LIQUID_ETH, 2)),
        )
        assert snapshot.assets == (LIQUID_ETH, USDC)

    def test_empty(self) -> None:
        snapshot = VaultSnapshot()
        assert snapshot.assets == ()
        assert dict(snapshot.prices) == {}


class TestRisk:
    @pytest.mark.parametrize(
        "level, is_danger",
        [
            (RiskLevel.SAFE, False),
            (RiskLevel.WARNING, False),
            (RiskLevel.DANGER, True),
            (RiskLevel.CRITICAL, True),
        ],
    )
    def test_is_danger(self, level: RiskLevel, is_danger: bool) -> None:
        assert level.is_danger is is_danger

    def test_alert_only_when_critical(self) -> None:
        assert RiskAssessment(0.95, 0.5, RiskLevel.CRITICAL).alert
        assert not RiskAssessment(0.85, 0.5, RiskLevel.DANGER).alert
