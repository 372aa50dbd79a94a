"""Data models — all frozen (immutable)."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .errors import ConfigError

UNKNOWN_SYMBOL = "UNKNOWN"


def canonical_address(address: str) -> str:
    """Canonical map key for an asset or vault address (lowercase)."""
    return str(address).strip().lower()


@dataclass(frozen=True)
class AssetMetadata:
    """Token symbol and decimals."""

    symbol: str = UNKNOWN_SYMBOL
    decimals: int = 18


DEFAULT_METADATA = AssetMetadata()


@dataclass(frozen=True)
class AssetPosition:
    """One collateral or debt line: an asset and its native-resolution amount."""

    asset: str
    amount: int


@dataclass(frozen=True)
class VaultSnapshot:
    """Point-in-time read of a vault: balances plus unit prices.

    ``prices`` maps asset addresses to scaled USD unit prices; keys are
    canonicalised on construction. The ``reported_*`` fields are the lens
    contract's own totals, kept for display only.
    """

    collateral: tuple[AssetPosition, ...] = ()
    debt: tuple[AssetPosition, ...] = ()
    prices: Mapping[str, int] = field(default_factory=dict)
    mode: int | None = None
    reported_total_collateral_usd: int | None = None
    reported_total_debt_usd: int | None = None
    reported_max_borrow_usd: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "collateral", tuple(self.collateral))
        object.__setattr__(self, "debt", tuple(self.debt))
        object.__setattr__(
            self,
            "prices",
            MappingProxyType(
                {canonical_address(asset): price for asset, price in self.prices.items()}
            ),
        )

    @property
    def assets(self) -> tuple[str, ...]:
        """Canonical addresses of every collateral and debt asset, deduplicated."""
        seen: dict[str, None] = {}
        for position in self.collateral + self.debt:
            seen.setdefault(canonical_address(position.asset), None)
        return tuple(seen)


@dataclass(frozen=True)
class VaultMetrics:
    """Aggregate scaled USD values."""

    total_collateral_usd: int
    max_borrow_usd: int


class RiskLevel(enum.Enum):
    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"
    CRITICAL = "critical"

    @property
    def is_danger(self) -> bool:
        """CRITICAL is a super-state of DANGER."""
        return self in (RiskLevel.DANGER, RiskLevel.CRITICAL)


@dataclass(frozen=True)
class ThresholdsConfig:
    """Health-factor thresholds, ascending."""

    warning: float = 0.6
    danger: float = 0.8
    critical: float = 0.9

    def __post_init__(self) -> None:
        if not (0 <= self.warning <= self.danger <= self.critical):
            raise ConfigError(
                "Risk thresholds must satisfy 0 <= warning <= danger <= critical, "
                f"got {self.warning}/{self.danger}/{self.critical}"
            )


@dataclass(frozen=True)
class RiskAssessment:
    health_factor: float
    ltv: float
    level: RiskLevel

    @property
    def alert(self) -> bool:
        """True when the position warrants an explicit warning banner."""
        return self.level is RiskLevel.CRITICAL


@dataclass(frozen=True)
class PositionValuation:
    """Single position valued at a given price table."""

    asset: str
    symbol: str
    amount: float
    price: float
    value_usd: float
    ltv_percent: int = 0
    borrow_power_usd: float = 0.0


@dataclass(frozen=True)
class DerivedView:
    """Everything ``SimulationSession.derive`` computes in one pass."""

    metrics: VaultMetrics
    risk: RiskAssessment
    effective_prices: Mapping[str, int]
    current_debt_usd: float
    actual_debt_usd: float
    debt_is_simulated: bool = False
    collateral: tuple[PositionValuation, ...] = ()
    debt: tuple[PositionValuation, ...] = ()
