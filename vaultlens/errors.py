"""Exception hierarchy for vaultlens."""
from __future__ import annotations


class VaultLensError(Exception):
    """Base class for every error raised by vaultlens."""


class ConfigError(VaultLensError, ValueError):
    """Invalid configuration (thresholds, LTV table, endpoints)."""


class SessionNotLoadedError(VaultLensError):
    """A simulation operation was called before a vault was loaded."""


class AbiDecodeError(VaultLensError, ValueError):
    """Contract return data could not be decoded."""


class RpcError(VaultLensError):
    """JSON-RPC failure; ``revert_data`` is set when the call reverted."""

    def __init__(self, message: str, revert_data: str | None = None) -> None:
        super().__init__(message)
        self.revert_data = revert_data


class VaultFetchError(VaultLensError):
    """Vault data could not be fetched. The message is user-facing."""


class InvalidVaultError(VaultFetchError):
    """The address is not a vault the lens contract recognises."""


class FetchError(VaultFetchError):
    """Data source unreachable or failed for another reason."""
