"""
Filter, sort and summarize a UTXO set for display.

Everything here is pure: inputs are never mutated and the same inputs always
produce the same output.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from functools import cmp_to_key

from utxoview.models import (
    UTXO,
    BalanceSummary,
    SortDirection,
    SortField,
    StatusFilter,
    ViewState,
)


def _cmp(a: int, b: int) -> int:
    return (a > b) - (a < b)


def _value_desc(lhs: UTXO, rhs: UTXO) -> int:
    return _cmp(rhs.value, lhs.value)


def compare_utxos(lhs: UTXO, rhs: UTXO, field: SortField, direction: SortDirection) -> int:
    """Three-way comparison for a (field, direction) pair. 0 keeps input order."""
    descending = direction == SortDirection.DESCENDING

    if field == SortField.AMOUNT:
        result = _cmp(lhs.value, rhs.value)
        return -result if descending else result

    if field == SortField.AGE:
        if lhs.is_confirmed and rhs.is_confirmed:
            result = _cmp(lhs.block_height or 0, rhs.block_height or 0)
            return -result if descending else result
        if lhs.is_confirmed != rhs.is_confirmed:
            # Unconfirmed counts as the most recent
            unconfirmed_first = -1 if descending else 1
            return unconfirmed_first if not lhs.is_confirmed else -unconfirmed_first
        return _value_desc(lhs, rhs)

    if field == SortField.STATUS:
        if lhs.is_confirmed != rhs.is_confirmed:
            confirmed_first = 1 if descending else -1
            return confirmed_first if lhs.is_confirmed else -confirmed_first
        return _value_desc(lhs, rhs)

    raise ValueError(f"Unknown sort field: {field}")


def filter_utxos(utxos: Iterable[UTXO], state: ViewState) -> list[UTXO]:
    result = list(utxos)

    if state.status_filter == StatusFilter.CONFIRMED:
        result = [u for u in result if u.is_confirmed]
    elif state.status_filter == StatusFilter.UNCONFIRMED:
        result = [u for u in result if not u.is_confirmed]

    if state.min_amount_sats is not None:
        result = [u for u in result if u.value >= state.min_amount_sats]
    # A max of 0 means "no upper bound", same as leaving it empty
    if state.max_amount_sats:
        result = [u for u in result if u.value <= state.max_amount_sats]

    return result


def sort_utxos(
    utxos: Iterable[UTXO],
    field: SortField = SortField.AGE,
    direction: SortDirection = SortDirection.DESCENDING,
) -> list[UTXO]:
    key = cmp_to_key(lambda lhs, rhs: compare_utxos(lhs, rhs, field, direction))
    return sorted(utxos, key=key)


def view(utxos: Iterable[UTXO], state: ViewState) -> list[UTXO]:
    """The visible, ordered subset of utxos under state."""
    return sort_utxos(filter_utxos(utxos, state), state.sort_field, state.sort_direction)


def summarize(visible: Sequence[UTXO]) -> BalanceSummary:
    confirmed = sum(1 for u in visible if u.is_confirmed)
    return BalanceSummary(
        total_sats=sum(u.value for u in visible),
        count=len(visible),
        confirmed_count=confirmed,
        unconfirmed_count=len(visible) - confirmed,
    )


def apply_view(utxos: Iterable[UTXO], state: ViewState) -> tuple[list[UTXO], BalanceSummary]:
    visible = view(utxos, state)
    return visible, summarize(visible)
