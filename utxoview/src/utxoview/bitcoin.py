"""
Amount conversion helpers.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from utxoview.constants import (
    MAX_SATS,
    SATS_PER_BTC,
    SHORTEN_KEEP,
    SHORTEN_MARKER,
    SHORTEN_THRESHOLD,
)


def btc_to_sats(btc: float | str | Decimal) -> int:
    """Convert a BTC amount to satoshis, truncating sub-satoshi precision."""
    return int(Decimal(str(btc)) * SATS_PER_BTC)


def sats_to_btc(sats: int) -> Decimal:
    return Decimal(sats) / SATS_PER_BTC


def format_btc(sats: int) -> str:
    """Format satoshis as a BTC string with 8 decimals (e.g. 0.00050000)."""
    return f"{sats_to_btc(sats):.8f}"


def parse_btc_amount(text: str | None) -> int | None:
    """
    Parse a user-typed BTC amount into satoshis.

    A comma is accepted as the decimal separator. Blank, unparsable, negative
    and out-of-range (above MAX_SATS) inputs yield None, which the view
    pipeline treats as "no bound".
    """
    if text is None:
        return None
    cleaned = text.strip().replace(",", ".")
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not value.is_finite() or value < 0:
        return None
    sats = int(value * SATS_PER_BTC)
    if sats > MAX_SATS:
        return None
    return sats


def shorten(text: str) -> str:
    """Shorten long identifiers to first6...last6 for display."""
    if len(text) > SHORTEN_THRESHOLD:
        return f"{text[:SHORTEN_KEEP]}{SHORTEN_MARKER}{text[-SHORTEN_KEEP:]}"
    return text
