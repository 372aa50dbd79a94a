"""Fixed-point USD helpers — 6 implied decimals, pure functions."""
from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import Any

USD_DECIMALS = 6
USD_SCALE = 10**USD_DECIMALS
DEFAULT_TOKEN_DECIMALS = 18


def resolve_number(value: Any, default: float = 0.0) -> float:
    """Return ``value`` as a finite float, or ``default`` if it is not one.

    Accepts ints, floats, Decimals and numeric strings. ``None``, booleans,
    NaN/inf and anything unparsable resolve to ``default``.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, (str, Decimal)):
        try:
            result = float(Decimal(str(value).strip()))
        except (InvalidOperation, ValueError):
            return default
    else:
        return default
    if not math.isfinite(result):
        return default
    return result


def resolve_int(value: Any, default: int = 0) -> int:
    """Return ``value`` as an exact int, or ``default`` if it is not one.

    Integer-valued inputs keep full precision, so large token balances
    (``10**30``) survive unchanged.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    if isinstance(value, (str, Decimal)):
        try:
            parsed = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return default
        if not parsed.is_finite():
            return default
        return int(parsed)
    return default


def to_float(value: Any) -> float:
    """Convert a scaled USD integer into dollars; missing input is 0."""
    return resolve_number(value) / USD_SCALE


def to_scaled(value: Any) -> int:
    """Convert dollars into a scaled USD integer, always flooring.

    The float is scaled as the decimal it prints as, so $1.005 becomes
    1_005_000 rather than the 1_004_999 a binary multiply would give.
    """
    return math.floor(Decimal(repr(resolve_number(value))) * USD_SCALE)
