"""
Privacy insights over the visible UTXO set.

Two heuristics are reported:
- address reuse: more than one UTXO received on the same origin address
- common spend: several UTXOs consumed by the same spending transaction,
  which links them to a single owner (common-input-ownership heuristic)
"""

from __future__ import annotations

from collections.abc import Iterable

from utxoview.bitcoin import shorten
from utxoview.models import UTXO, AnalyticsSummary


def find_address_reuse(utxos: Iterable[UTXO]) -> list[str]:
    by_address: dict[str, list[UTXO]] = {}
    for utxo in utxos:
        if utxo.origin_address is None:
            continue
        if utxo.origin_address not in by_address:
            by_address[utxo.origin_address] = []
        by_address[utxo.origin_address].append(utxo)

    insights = [
        f"{shorten(address)} has {len(group)} UTXOs."
        for address, group in by_address.items()
        if len(group) > 1
    ]
    return sorted(insights)


def find_common_spends(utxos: Iterable[UTXO]) -> list[str]:
    by_spend_txid: dict[str, list[UTXO]] = {}
    for utxo in utxos:
        info = utxo.spend_info
        if info is not None and info.spent is True and info.spend_txid is not None:
            by_spend_txid.setdefault(info.spend_txid, []).append(utxo)

    insights = []
    for spend_txid, group in by_spend_txid.items():
        if len(group) < 2:
            continue
        members = ", ".join(f"{shorten(u.txid)}:{u.vout}" for u in group)
        insights.append(
            f"Common Spend: {len(group)} UTXOs spent in TXID {shorten(spend_txid)} "
            f"(UTXOs: {members})"
        )
    return sorted(insights)


def analyze(visible: Iterable[UTXO]) -> AnalyticsSummary:
    utxos = list(visible)
    return AnalyticsSummary(
        multi_utxo_addresses=find_address_reuse(utxos),
        common_spend_events=find_common_spends(utxos),
    )
