"""
Tests for JSON/CSV import and export.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from conftest import LEGACY_ADDRESS, make_utxo

from utxoview.constants import CSV_HEADER
from utxoview.errors import DecodingError
from utxoview.serialization import (
    read_utxo_file,
    utxos_from_json,
    utxos_to_csv,
    utxos_to_json,
    write_utxo_file,
)


def test_json_keeps_origin_and_spend_fields():
    utxo = make_utxo(
        txid="a" * 64,
        vout=2,
        value=123_456,
        origin_address=LEGACY_ADDRESS,
        spent=True,
        txid_spent="f" * 64,
    )
    payload = json.loads(utxos_to_json([utxo]))

    assert payload == [
        {
            "txid": "a" * 64,
            "vout": 2,
            "status": {
                "confirmed": True,
                "block_height": 800_000,
                "block_hash": "00" * 32,
                "block_time": 1_690_000_000,
            },
            "value": 123_456,
            "spent": True,
            "txid_spent": "f" * 64,
            "originAddress": LEGACY_ADDRESS,
        }
    ]

    [loaded] = utxos_from_json(json.dumps(payload))
    assert loaded == utxo


def test_json_without_origin_loads_unstamped():
    text = json.dumps([{"txid": "b" * 64, "vout": 0, "status": {"confirmed": False}, "value": 1}])
    [utxo] = utxos_from_json(text)
    assert utxo.origin_address is None
    assert utxo.spend_info is None
    assert not utxo.is_confirmed


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        '{"txid": "a"}',
        '[{"txid": "a", "vout": -1, "value": 1}]',
        '[{"txid": "a", "vout": 0, "value": -5}]',
    ],
)
def test_json_invalid_raises_decoding_error(text):
    with pytest.raises(DecodingError):
        utxos_from_json(text)


def test_csv_header_and_confirmed_row():
    utxo = make_utxo(txid="a" * 64, vout=1, value=150_000_000, origin_address=LEGACY_ADDRESS)
    lines = utxos_to_csv([utxo]).splitlines()

    assert lines[0] == ",".join(CSV_HEADER)
    assert lines[1].split(",") == [
        "a" * 64,
        "1",
        "1.50000000",
        "150000000",
        "Confirmed",
        "800000",
        "00" * 32,
        "2023-07-22 04:26:40",
        "Block: 800000",
        LEGACY_ADDRESS,
        "false",
        "",
        "",
        "",
        "",
        "",
    ]


def test_csv_unconfirmed_spent_row():
    utxo = make_utxo(txid="c" * 64, confirmed=False, spent=True, txid_spent="d" * 64)
    row = utxos_to_csv([utxo]).splitlines()[1].split(",")

    assert row[4] == "Unconfirmed"
    assert row[5:8] == ["", "", ""]
    assert row[8] == "Unconfirmed"
    assert row[9] == ""
    assert row[10:12] == ["true", "d" * 64]


def test_csv_empty_set_is_header_only():
    assert utxos_to_csv([]) == ",".join(CSV_HEADER) + "\n"


def test_file_round_trip(tmp_path: Path):
    utxos = [make_utxo(txid="a" * 64), make_utxo(txid="b" * 64, confirmed=False)]
    path = tmp_path / "export.json"
    write_utxo_file(path, utxos)
    assert read_utxo_file(path) == utxos


def test_write_csv_by_suffix(tmp_path: Path):
    path = tmp_path / "export.CSV"
    write_utxo_file(path, [make_utxo()])
    assert path.read_text(encoding="utf-8").startswith("TXID,Vout,")
