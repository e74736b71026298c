"""
JSON and CSV import/export of UTXO sets.

JSON uses the Esplora wire schema plus an optional ``originAddress`` per entry,
so files exported here load back with their reuse analytics intact. CSV is
export only.
"""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from utxoview.bitcoin import format_btc
from utxoview.constants import CSV_HEADER
from utxoview.errors import DecodingError
from utxoview.models import UTXO

_utxo_list_adapter: TypeAdapter[list[UTXO]] = TypeAdapter(list[UTXO])

CSV_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def utxos_to_json(utxos: Iterable[UTXO], indent: int | None = 2) -> str:
    return json.dumps([utxo.to_wire() for utxo in utxos], indent=indent)


def utxos_from_json(text: str | bytes) -> list[UTXO]:
    try:
        return _utxo_list_adapter.validate_json(text)
    except ValidationError as e:
        raise DecodingError(e) from e


def _format_time(timestamp: int | None) -> str:
    if timestamp is None:
        return ""
    return datetime.fromtimestamp(timestamp, UTC).strftime(CSV_TIME_FORMAT)


def _optional(value: object) -> str:
    return "" if value is None else str(value)


def _csv_row(utxo: UTXO) -> list[str]:
    status = utxo.confirmation
    spend = utxo.spend_info

    spent = "false"
    spend_txid = spend_vin = ""
    spend_confirmed = spend_height = spend_time = ""
    if spend is not None:
        spent = "true" if spend.spent else "false"
        spend_txid = _optional(spend.spend_txid)
        spend_vin = _optional(spend.spend_vin)
        if spend.spend_confirmation is not None:
            spend_confirmed = "true" if spend.spend_confirmation.confirmed else "false"
            spend_height = _optional(spend.spend_confirmation.block_height)
            spend_time = _format_time(spend.spend_confirmation.block_time)

    return [
        utxo.txid,
        str(utxo.vout),
        format_btc(utxo.value),
        str(utxo.value),
        "Confirmed" if utxo.is_confirmed else "Unconfirmed",
        _optional(status.block_height),
        _optional(status.block_hash),
        _format_time(status.block_time),
        utxo.age,
        _optional(utxo.origin_address),
        spent,
        spend_txid,
        spend_vin,
        spend_confirmed,
        spend_height,
        spend_time,
    ]


def utxos_to_csv(utxos: Iterable[UTXO]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for utxo in utxos:
        writer.writerow(_csv_row(utxo))
    return buffer.getvalue()


def read_utxo_file(path: Path) -> list[UTXO]:
    """Load a JSON UTXO export."""
    logger.debug(f"Reading UTXOs from {path}")
    utxos = utxos_from_json(path.read_bytes())
    logger.info(f"Loaded {len(utxos)} UTXOs from {path.name}")
    return utxos


def write_utxo_file(path: Path, utxos: Iterable[UTXO]) -> None:
    """Write utxos as CSV when the path ends in .csv, JSON otherwise."""
    if path.suffix.lower() == ".csv":
        content = utxos_to_csv(utxos)
    else:
        content = utxos_to_json(utxos)
    path.write_text(content, encoding="utf-8")
    logger.info(f"Exported UTXOs to {path}")
