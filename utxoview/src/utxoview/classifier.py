"""
Classification of raw user input into fetch requests.

Accepted forms:
- a single legacy/P2SH (1, 3, m, n, 2) or bech32 P2WPKH-style (bc1q, tb1q) address
- an extended public key (xpub, ypub, zpub, tpub, upub, vpub)
- a comma-separated list of two or more single addresses
"""

from __future__ import annotations

import re

from utxoview.models import (
    AddressList,
    ExtendedKey,
    FetchRequest,
    InvalidRequest,
    SingleAddress,
)

BASE58_CHARS = "1-9A-HJ-NP-Za-km-z"

LEGACY_ADDRESS_RE = re.compile(rf"^[13mn2][{BASE58_CHARS}]{{25,34}}$")
BECH32_ADDRESS_RE = re.compile(r"^(bc1q|tb1q)[0-9a-z]{38,58}$")
EXTENDED_KEY_RE = re.compile(rf"^(xpub|ypub|zpub|tpub|upub|vpub)[{BASE58_CHARS}]{{70,110}}$")


def is_valid_address(text: str) -> bool:
    return bool(LEGACY_ADDRESS_RE.match(text) or BECH32_ADDRESS_RE.match(text))


def is_extended_key(text: str) -> bool:
    return bool(EXTENDED_KEY_RE.match(text))


def split_address_list(text: str) -> list[str]:
    """Split on commas, trimming tokens and dropping empty ones."""
    return [token.strip() for token in text.split(",") if token.strip()]


def classify(raw: str) -> FetchRequest:
    """Classify raw input. Never raises; unrecognized input is InvalidRequest."""
    if not isinstance(raw, str):
        return InvalidRequest()

    text = raw.strip()

    if is_valid_address(text):
        return SingleAddress(text)

    if is_extended_key(text):
        return ExtendedKey(text)

    tokens = split_address_list(text)
    if len(tokens) >= 2 and all(is_valid_address(token) for token in tokens):
        return AddressList(tuple(tokens))

    return InvalidRequest(text)


def is_valid_input(raw: str) -> bool:
    return not isinstance(classify(raw), InvalidRequest)
