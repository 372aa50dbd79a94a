"""ether.fi Cash adapters — vault snapshots via CashLens, token metadata via ERC-20."""
from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from ...errors import AbiDecodeError, FetchError, InvalidVaultError, RpcError
from ...interfaces.chain import ChainClient
from ...models import UNKNOWN_SYMBOL, AssetMetadata, VaultSnapshot, canonical_address
from ...engine import prices as price_table
from . import decoder

logger = logging.getLogger(__name__)

INVALID_SAFE_MESSAGE = "This address is not a valid Ether.fi Safe."
FETCH_FAILED_MESSAGE = "Could not fetch vault data. Ensure address is a valid Safe on Scroll."
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred while fetching data."


class CashLensSnapshotSource:
    """Fetch vault snapshots from the CashLens ``getSafeCashData`` view."""

    def __init__(self, chain_client: ChainClient, lens_address: str) -> None:
        self._client = chain_client
        self._lens_address = lens_address

    async def fetch_vault_snapshot(self, vault_address: str) -> VaultSnapshot:
        logger.info("Fetching CashLens data for safe %s", vault_address)
        try:
            calldata = decoder.encode_get_safe_cash_data(vault_address)
        except ValueError as e:
            raise InvalidVaultError(INVALID_SAFE_MESSAGE) from e

        try:
            result = await self._client.eth_call(self._lens_address, calldata)
        except RpcError as e:
            if decoder.is_invalid_safe(e.revert_data):
                raise InvalidVaultError(INVALID_SAFE_MESSAGE) from e
            if e.revert_data is not None:
                raise FetchError(FETCH_FAILED_MESSAGE) from e
            logger.error("CashLens call failed: %s", e)
            raise FetchError(UNKNOWN_ERROR_MESSAGE) from e

        try:
            data = decoder.decode_safe_cash_data(result)
        except AbiDecodeError as e:
            logger.error("Could not decode CashLens response: %s", e)
            raise FetchError(FETCH_FAILED_MESSAGE) from e

        logger.info(
            "Safe %s: %d collateral, %d borrows, %d prices",
            vault_address,
            len(data.collateral_balances),
            len(data.borrows),
            len(data.token_prices),
        )
        return VaultSnapshot(
            collateral=data.collateral_balances,
            debt=data.borrows,
            prices=price_table.build(data.token_prices),
            mode=data.mode,
            reported_total_collateral_usd=data.total_collateral,
            reported_total_debt_usd=data.total_borrow,
            reported_max_borrow_usd=data.max_borrow,
        )


class Erc20MetadataSource:
    """Resolve symbol/decimals with ERC-20 view calls, concurrently."""

    def __init__(self, chain_client: ChainClient) -> None:
        self._client = chain_client

    async def _fetch_one(self, asset: str) -> AssetMetadata | None:
        try:
            symbol_hex, decimals_hex = await asyncio.gather(
                self._client.eth_call(asset, decoder.ERC20_SYMBOL),
                self._client.eth_call(asset, decoder.ERC20_DECIMALS),
            )
            return AssetMetadata(
                symbol=decoder.decode_symbol(symbol_hex) or UNKNOWN_SYMBOL,
                decimals=decoder.decode_decimals(decimals_hex),
            )
        except (RpcError, AbiDecodeError) as e:
            logger.warning("Metadata lookup failed for %s: %s", asset, e)
            return None

    async def fetch_asset_metadata_batch(
        self, assets: Iterable[str]
    ) -> dict[str, AssetMetadata]:
        unique = list(dict.fromkeys(canonical_address(a) for a in assets))
        results = await asyncio.gather(*(self._fetch_one(a) for a in unique))
        return {asset: meta for asset, meta in zip(unique, results) if meta is not None}
