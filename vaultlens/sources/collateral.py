"""Static collateral LTV table."""
from __future__ import annotations

from typing import Iterable, Mapping

from ..config import build_ltv_table
from ..models import canonical_address


class StaticCollateralConfig:
    """LTV lookup over a closed table; unknown assets get 0."""

    def __init__(self, ltv_table: Mapping[str, int]) -> None:
        self._table = build_ltv_table(dict(ltv_table))

    @property
    def table(self) -> dict[str, int]:
        return dict(self._table)

    def get_collateral_config(self, assets: Iterable[str]) -> dict[str, int]:
        return {
            canonical_address(asset): self._table.get(canonical_address(asset), 0)
            for asset in assets
        }
