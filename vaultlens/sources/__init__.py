"""Offline and static data sources."""
from .collateral import StaticCollateralConfig
from .snapshot_file import FileSnapshotSource, load_snapshot_file

__all__ = ["StaticCollateralConfig", "FileSnapshotSource", "load_snapshot_file"]
