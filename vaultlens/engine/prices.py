"""Price tables: asset address → scaled USD unit price."""
from __future__ import annotations

from typing import Any, Iterable, Mapping

from ..models import AssetPosition, canonical_address
from .fixed_point import resolve_int


def _quote_fields(quote: Any) -> tuple[str, Any]:
    """Extract ``(asset, amount)`` from a quote in any of its accepted shapes."""
    if isinstance(quote, AssetPosition):
        return quote.asset, quote.amount
    if isinstance(quote, Mapping):
        asset = quote.get("token", quote.get("asset", ""))
        return asset, quote.get("amount")
    asset, amount = quote
    return asset, amount


def build(quotes: Iterable[Any] | None) -> dict[str, int]:
    """Build a price table from ``{asset, amount}`` quotes.

    Addresses are canonicalised; a later quote for the same asset wins.
    """
    table: dict[str, int] = {}
    if not quotes:
        return table
    for quote in quotes:
        asset, amount = _quote_fields(quote)
        table[canonical_address(asset)] = resolve_int(amount)
    return table


def merge(base: Mapping[str, int], overrides: Mapping[str, int] | None) -> dict[str, int]:
    """Return ``base`` with ``overrides`` applied on top. Inputs are not mutated.

    ``base`` keys are kept as given, so callers pass an already canonical
    table (``VaultSnapshot.prices`` always is). Override keys are canonicalised.
    """
    merged = dict(base)
    for asset, price in (overrides or {}).items():
        merged[canonical_address(asset)] = resolve_int(price)
    return merged
