"""Satoshi, BTC and percentage formatting helpers."""

from decimal import ROUND_HALF_UP, Decimal

SATS_PER_BTC = 100_000_000


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero.

    Python's ``round`` uses banker's rounding (``round(2.5) == 2``); the
    user-facing texts need ``2.5 -> 3`` and ``-2.5 -> -3``.
    """
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percent(part: float, whole: float) -> int:
    """Integer percentage of ``part`` in ``whole`` (0 when ``whole`` is 0)."""
    if not whole:
        return 0
    return round_half_away(part * 100 / whole)


def format_btc(sats: int) -> str:
    """Format satoshis as a BTC amount with 8 decimals, e.g. ``0.01000000``."""
    return f"{sats / SATS_PER_BTC:.8f}"


def format_sats(sats: int) -> str:
    """Format satoshis with thousands separators, e.g. ``1,000,000 sats``."""
    return f"{sats:,} sats"


def format_satoshis(sats: int) -> str:
    """Format satoshis as both BTC and sats.

    Example:
        >>> format_satoshis(1_000_000)
        '0.01000000 BTC (1,000,000 sats)'
    """
    return f"{format_btc(sats)} BTC ({sats:,} sats)"
