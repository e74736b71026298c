"""
Pytest configuration and fixtures for utxoview tests.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from utxoview.models import UTXO

LEGACY_ADDRESS = "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa"
P2SH_ADDRESS = "3J98t1WpEZ73CNmQviecrnyiWrnqRhWNLy"
BECH32_ADDRESS = "bc1qar0srrr7xfkvy5l643lydnw9re59gtzzwf5mdq"
TESTNET_ADDRESS = "mipcBbFg9gMiCh81Kj8tqqdgoZub1ZJRfn"
TESTNET_P2SH_ADDRESS = "2MzQwSSnBHWHqSAqtTVQ6v47XtaisrJa1Vc"
TESTNET_BECH32_ADDRESS = "tb1qw508d6qejxtdg4y5r3zarvary0c5xw7kxpjzsx"
XPUB = (
    "xpub6CUGRUonZSQ4TWtTMmzXdrXDtypWKiKrhko4egpiMZbpiaQL2jkwSB1icqYh2cfDfVxdx4df189o"
    "LKnC5fSwqPfgyP3hooxujYzAu3fDVmz"
)


def make_utxo(
    txid: str = "a" * 64,
    vout: int = 0,
    value: int = 100_000,
    confirmed: bool = True,
    block_height: int | None = 800_000,
    origin_address: str | None = None,
    spent: bool | None = None,
    txid_spent: str | None = None,
) -> UTXO:
    status: dict[str, Any] = {"confirmed": confirmed}
    if confirmed:
        status["block_height"] = block_height
        status["block_hash"] = "00" * 32
        status["block_time"] = 1_690_000_000
    data: dict[str, Any] = {"txid": txid, "vout": vout, "value": value, "status": status}
    if spent is not None:
        data["spent"] = spent
    if txid_spent is not None:
        data["txid_spent"] = txid_spent
    if origin_address is not None:
        data["originAddress"] = origin_address
    return UTXO.model_validate(data)


@pytest.fixture
def utxo_factory() -> Callable[..., UTXO]:
    return make_utxo


@pytest.fixture
def esplora_utxo_payload() -> list[dict[str, Any]]:
    """Response body of GET /address/{address}/utxo"""
    return [
        {
            "txid": "b" * 64,
            "vout": 1,
            "status": {
                "confirmed": True,
                "block_height": 812345,
                "block_hash": "00000000000000000002a7c4c1e48d76c5a37902165a270156b7a8d72728a054",
                "block_time": 1697000000,
            },
            "value": 250000,
        },
        {
            "txid": "c" * 64,
            "vout": 0,
            "status": {"confirmed": False},
            "value": 15000,
        },
    ]
