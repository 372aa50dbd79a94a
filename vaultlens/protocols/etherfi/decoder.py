"""ABI encoding/decoding for the CashLens and ERC-20 calls — no I/O.

Calldata is built and return data parsed with ``eth_abi`` against the
deployed ABI types; selectors come from ``eth_utils``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import (
    decode_hex,
    encode_hex,
    function_signature_to_4byte_selector,
    to_checksum_address,
)

from ...errors import AbiDecodeError
from ...models import AssetPosition, canonical_address

TOKEN_DATA_ARRAY = "(address,uint256)[]"
WITHDRAWAL_REQUEST = "(address[],uint256[],address,uint96)"
DEBIT_MODE_MAX_SPEND = "(address[],uint256[],uint256[],uint256)"

# mode, collateralBalances, borrows, tokenPrices, withdrawalRequest,
# totalCollateral, totalBorrow, maxBorrow, creditMaxSpend,
# spendingLimitAllowance, totalCashbackEarnedInUsd, incomingModeStartTime,
# debitMaxSpend
SAFE_CASH_DATA = (
    f"(uint8,{TOKEN_DATA_ARRAY},{TOKEN_DATA_ARRAY},{TOKEN_DATA_ARRAY},"
    f"{WITHDRAWAL_REQUEST},uint256,uint256,uint256,uint256,uint256,uint256,"
    f"uint256,{DEBIT_MODE_MAX_SPEND})"
)


def selector(signature: str) -> str:
    """4-byte function selector as ``0x``-prefixed hex."""
    return encode_hex(function_signature_to_4byte_selector(signature))


GET_SAFE_CASH_DATA = selector("getSafeCashData(address,address[])")
ERC20_SYMBOL = selector("symbol()")
ERC20_DECIMALS = selector("decimals()")

# CashLens custom error for addresses that are not ether.fi Safes.
INVALID_SAFE_ERROR = "0x34d0b499"


@dataclass(frozen=True)
class SafeCashData:
    """The subset of CashLens ``SafeCashData`` this project uses."""

    mode: int
    collateral_balances: tuple[AssetPosition, ...]
    borrows: tuple[AssetPosition, ...]
    token_prices: tuple[AssetPosition, ...]
    total_collateral: int
    total_borrow: int
    max_borrow: int


def _raw(data: str) -> bytes:
    try:
        return decode_hex(data)
    except ValueError as e:
        raise AbiDecodeError(f"Return data is not hex: {data[:20]}...") from e


def _decode(types: Sequence[str], data: str) -> tuple[Any, ...]:
    raw = _raw(data)
    try:
        return decode(list(types), raw)
    except (DecodingError, ValueError) as e:
        raise AbiDecodeError(f"Cannot decode {', '.join(types)}: {e}") from e


def _positions(token_data: Sequence[tuple[str, int]]) -> tuple[AssetPosition, ...]:
    return tuple(
        AssetPosition(asset=canonical_address(token), amount=amount)
        for token, amount in token_data
    )


def encode_get_safe_cash_data(safe: str, preference: list[str] | None = None) -> str:
    """Calldata for ``getSafeCashData(safe, preference)``.

    Raises ``ValueError`` for a malformed address.
    """
    args = encode(
        ["address", "address[]"],
        [to_checksum_address(safe), [to_checksum_address(a) for a in preference or []]],
    )
    return GET_SAFE_CASH_DATA + args.hex()


def decode_safe_cash_data(data: str) -> SafeCashData:
    """Decode the return value of ``getSafeCashData``."""
    (cash_data,) = _decode([SAFE_CASH_DATA], data)
    mode, collateral, borrows, token_prices, _, total_collateral, total_borrow, max_borrow = (
        cash_data[:8]
    )
    return SafeCashData(
        mode=mode,
        collateral_balances=_positions(collateral),
        borrows=_positions(borrows),
        token_prices=_positions(token_prices),
        total_collateral=total_collateral,
        total_borrow=total_borrow,
        max_borrow=max_borrow,
    )


def decode_decimals(data: str) -> int:
    """Decode an ERC-20 ``decimals()`` return (``uint8``)."""
    (decimals,) = _decode(["uint8"], data)
    return decimals


def decode_symbol(data: str) -> str:
    """Decode an ERC-20 ``symbol()`` return, tolerating legacy ``bytes32`` symbols."""
    if len(_raw(data)) == 32:
        (raw,) = _decode(["bytes32"], data)
        return raw.rstrip(b"\x00").decode("utf-8", errors="replace")
    (symbol,) = _decode(["string"], data)
    return symbol


def is_invalid_safe(revert_data: Any) -> bool:
    return isinstance(revert_data, str) and revert_data.lower().startswith(INVALID_SAFE_ERROR)
