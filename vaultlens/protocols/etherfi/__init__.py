"""ether.fi Cash on Scroll."""
from .adapter import CashLensSnapshotSource, Erc20MetadataSource

__all__ = ["CashLensSnapshotSource", "Erc20MetadataSource"]
