"""Metadata source protocol — token symbol/decimals lookup."""
from typing import Iterable, Protocol

from ..models import AssetMetadata


class MetadataSource(Protocol):
    """Resolve token metadata. Never raises; unresolved assets are omitted."""

    async def fetch_asset_metadata_batch(
        self, assets: Iterable[str]
    ) -> dict[str, AssetMetadata]: ...
