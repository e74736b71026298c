"""
UTXO backend and address deriver implementations.

Available backends:
- EsploraBackend: Esplora REST API (mempool.space, blockstream.info, self-hosted)

Available derivers:
- StaticAddressDeriver: precomputed addresses per extended key
"""

from utxoview.backends.base import AddressDeriver, UTXOBackend
from utxoview.backends.derivation import StaticAddressDeriver
from utxoview.backends.esplora import EsploraBackend

__all__ = [
    "AddressDeriver",
    "EsploraBackend",
    "StaticAddressDeriver",
    "UTXOBackend",
]
