"""
Address derivers for extended public keys.

Real BIP32 derivation is left to external collaborators; StaticAddressDeriver
serves addresses that were derived elsewhere (a watch-only wallet export,
a hardware wallet, or test fixtures).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from utxoview.backends.base import AddressDeriver
from utxoview.errors import ExtendedKeyUnsupportedError


class StaticAddressDeriver(AddressDeriver):
    """Deriver backed by a precomputed key -> addresses mapping."""

    def __init__(self, addresses_by_key: Mapping[str, Iterable[str]] | None = None):
        self._addresses: dict[str, list[str]] = {
            key: list(addresses) for key, addresses in (addresses_by_key or {}).items()
        }

    def register(self, key: str, addresses: Iterable[str]) -> None:
        self._addresses[key] = list(addresses)

    def derive_addresses(self, key: str) -> list[str]:
        if key not in self._addresses:
            raise ExtendedKeyUnsupportedError(key)
        return list(self._addresses[key])
