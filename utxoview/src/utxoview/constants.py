"""
Bitcoin unit and display constants.
"""

from __future__ import annotations

SATS_PER_BTC = 100_000_000

# Largest value a 64-bit signed satoshi amount can hold
MAX_SATS = 2**63 - 1

# Identifiers longer than this are shortened to first/last SHORTEN_KEEP characters
SHORTEN_THRESHOLD = 12
SHORTEN_KEEP = 6
SHORTEN_MARKER = "..."

DEFAULT_MEMPOOL_API_URLS: dict[str, str] = {
    "mainnet": "https://mempool.space/api",
    "testnet": "https://mempool.space/testnet/api",
    "signet": "https://mempool.space/signet/api",
    "regtest": "http://127.0.0.1:3002/api",
}

CSV_HEADER: tuple[str, ...] = (
    "TXID",
    "Vout",
    "Amount (BTC)",
    "Amount (Sats)",
    "Status",
    "Block Height",
    "Block Hash",
    "Block Time",
    "Age",
    "Origin Address",
    "Spent",
    "Spend TXID",
    "Spend Vin",
    "Spend Status Confirmed",
    "Spend Block Height",
    "Spend Block Time",
)
