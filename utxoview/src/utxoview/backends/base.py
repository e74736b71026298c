"""
Base interfaces for UTXO sources and extended key address derivation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from utxoview.models import UTXO


class UTXOBackend(ABC):
    """
    Abstract single-address UTXO source.

    Implementations own transport concerns (timeouts, retries) and raise
    errors from utxoview.errors on failure.
    """

    @abstractmethod
    async def get_address_utxos(self, address: str) -> list[UTXO]:
        """Get UTXOs for a single address, in the order the source returns them"""

    async def close(self) -> None:
        """Close backend connection"""
        pass


class AddressDeriver(ABC):
    """Derives a finite sequence of candidate addresses from an extended public key."""

    @abstractmethod
    def derive_addresses(self, key: str) -> list[str]:
        """Return the addresses to query for the given extended key"""
