"""YAML snapshot files — offline vault snapshots.

Format::

    collateral:
      - {token: "0xf0bb...416c", amount: "1000000000000000000"}
    debt:
      - {token: "0x06ef...99a4", amount: 400000000}
    prices:
      - {token: "0xf0bb...416c", amount: 1000000000}
    metadata:
      "0xf0bb...416c": {symbol: LiquidETH, decimals: 18}
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

import yaml

from ..engine import prices as price_table
from ..engine.fixed_point import resolve_int
from ..errors import FetchError
from ..models import AssetMetadata, AssetPosition, VaultSnapshot, canonical_address

logger = logging.getLogger(__name__)


def _positions(raw: list[dict[str, Any]] | None) -> tuple[AssetPosition, ...]:
    return tuple(
        AssetPosition(
            asset=canonical_address(entry.get("token", entry.get("asset", ""))),
            amount=resolve_int(entry.get("amount")),
        )
        for entry in raw or []
    )


def _metadata(raw: dict[str, Any] | None) -> dict[str, AssetMetadata]:
    metadata: dict[str, AssetMetadata] = {}
    for address, entry in (raw or {}).items():
        entry = entry or {}
        metadata[canonical_address(address)] = AssetMetadata(
            symbol=str(entry.get("symbol", AssetMetadata.symbol)),
            decimals=resolve_int(entry.get("decimals"), AssetMetadata.decimals),
        )
    return metadata


def load_snapshot_file(path: str | Path) -> tuple[VaultSnapshot, dict[str, AssetMetadata]]:
    """Read a snapshot and its metadata from a YAML file."""
    path = Path(path)
    if not path.exists():
        raise FetchError(f"Snapshot file not found: {path}")

    try:
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise FetchError(f"Snapshot file {path} is not valid YAML: {e}") from e
    if not isinstance(raw, dict):
        raise FetchError(f"Snapshot file {path} must contain a mapping")

    snapshot = VaultSnapshot(
        collateral=_positions(raw.get("collateral")),
        debt=_positions(raw.get("debt")),
        prices=price_table.build(raw.get("prices")),
    )
    logger.info(
        "Loaded snapshot from %s (%d collateral, %d debt)",
        path,
        len(snapshot.collateral),
        len(snapshot.debt),
    )
    return snapshot, _metadata(raw.get("metadata"))


class FileSnapshotSource:
    """Serve one YAML snapshot regardless of the requested address."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    async def fetch_vault_snapshot(self, vault_address: str) -> VaultSnapshot:
        snapshot, _ = load_snapshot_file(self._path)
        return snapshot

    async def fetch_asset_metadata_batch(
        self, assets: Iterable[str]
    ) -> dict[str, AssetMetadata]:
        try:
            _, metadata = load_snapshot_file(self._path)
        except FetchError as e:
            logger.warning("Metadata unavailable: %s", e)
            return {}
        wanted = {canonical_address(a) for a in assets}
        return {asset: meta for asset, meta in metadata.items() if asset in wanted}
