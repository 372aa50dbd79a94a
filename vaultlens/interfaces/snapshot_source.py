"""Snapshot source protocol — where vault balances and prices come from."""
from typing import Protocol

from ..models import VaultSnapshot


class SnapshotSource(Protocol):
    """Fetch a point-in-time vault snapshot.

    Raises ``InvalidVaultError`` for an address that is not a vault and
    ``FetchError`` for any other failure.
    """

    async def fetch_vault_snapshot(self, vault_address: str) -> VaultSnapshot: ...
