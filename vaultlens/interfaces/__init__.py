"""Protocol interfaces for the collaborators the engine consumes."""
from .chain import ChainClient
from .collateral_config import CollateralConfigSource
from .metadata_source import MetadataSource
from .snapshot_source import SnapshotSource

__all__ = ["ChainClient", "CollateralConfigSource", "MetadataSource", "SnapshotSource"]
