"""Collateral config protocol — per-asset LTV lookup."""
from typing import Iterable, Protocol


class CollateralConfigSource(Protocol):
    """Return LTV percents for ``assets``; unknown assets map to 0."""

    def get_collateral_config(self, assets: Iterable[str]) -> dict[str, int]: ...
