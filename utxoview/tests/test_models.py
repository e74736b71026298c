"""
Tests for utxoview.models
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from utxoview.bitcoin import btc_to_sats, format_btc, sats_to_btc
from utxoview.constants import SATS_PER_BTC
from utxoview.models import (
    UTXO,
    AggregationOutcome,
    ConfirmationStatus,
    StatusFilter,
    ViewState,
)


def test_utxo_from_wire_format(esplora_utxo_payload):
    utxo = UTXO.model_validate(esplora_utxo_payload[0])
    assert utxo.key == f"{'b' * 64}:1"
    assert utxo.value == 250000
    assert utxo.is_confirmed
    assert utxo.block_height == 812345
    assert utxo.age == "Block: 812345"
    assert utxo.spend_info is None
    assert utxo.origin_address is None


def test_unconfirmed_utxo_age(esplora_utxo_payload):
    utxo = UTXO.model_validate(esplora_utxo_payload[1])
    assert not utxo.is_confirmed
    assert utxo.age == "Unconfirmed"


def test_unconfirmed_status_drops_block_fields():
    status = ConfirmationStatus(confirmed=False, block_height=5, block_hash="ab", block_time=1)
    assert status.block_height is None
    assert status.block_hash is None
    assert status.block_time is None


def test_spend_fields_collected():
    utxo = UTXO.model_validate(
        {
            "txid": "d" * 64,
            "vout": 2,
            "value": 1000,
            "status": {"confirmed": True, "block_height": 10},
            "spent": True,
            "txid_spent": "e" * 64,
            "vin_spent": 3,
            "status_spent": {"confirmed": True, "block_height": 12, "block_time": 1700000000},
        }
    )
    assert utxo.spend_info is not None
    assert utxo.spend_info.spent is True
    assert utxo.spend_info.spend_txid == "e" * 64
    assert utxo.spend_info.spend_vin == 3
    assert utxo.spend_info.spend_confirmation is not None
    assert utxo.spend_info.spend_confirmation.block_height == 12
    assert utxo.is_spent


def test_negative_value_rejected():
    with pytest.raises(ValidationError):
        UTXO.model_validate({"txid": "a" * 64, "vout": 0, "value": -1, "status": {}})


def test_negative_vout_rejected():
    with pytest.raises(ValidationError):
        UTXO.model_validate({"txid": "a" * 64, "vout": -1, "value": 1, "status": {}})


def test_utxo_is_frozen(utxo_factory):
    utxo = utxo_factory()
    with pytest.raises(ValidationError):
        utxo.value = 5


def test_with_origin_returns_stamped_copy(utxo_factory):
    utxo = utxo_factory()
    stamped = utxo.with_origin("addr1")
    assert stamped.origin_address == "addr1"
    assert utxo.origin_address is None
    # Same address again is a no-op
    assert stamped.with_origin("addr1").origin_address == "addr1"


def test_with_origin_rejects_restamp(utxo_factory):
    utxo = utxo_factory(origin_address="addr1")
    with pytest.raises(ValueError, match="already has origin address"):
        utxo.with_origin("addr2")


def test_to_wire_roundtrip_keeps_origin_and_spend():
    data = {
        "txid": "f" * 64,
        "vout": 0,
        "status": {"confirmed": False},
        "value": 42,
        "spent": True,
        "txid_spent": "9" * 64,
        "originAddress": "addrX",
    }
    utxo = UTXO.model_validate(data)
    assert utxo.to_wire() == data


def test_view_state_defaults():
    state = ViewState()
    assert state.status_filter == StatusFilter.ALL
    assert state.sort_field.value == "age"
    assert state.sort_direction.value == "desc"
    assert not state.has_active_filters
    assert ViewState(max_amount_sats=0).has_active_filters


def test_view_state_rejects_negative_amounts():
    with pytest.raises(ValidationError):
        ViewState(min_amount_sats=-5)


def test_aggregation_outcome_partial(utxo_factory):
    assert not AggregationOutcome(utxos=[utxo_factory()]).partial
    outcome = AggregationOutcome(utxos=[], per_source_errors={"a": RuntimeError("x")})
    assert outcome.partial


class TestAmountConversions:
    def test_btc_to_sats(self):
        assert btc_to_sats("0.0005") == 50_000
        assert btc_to_sats(1) == SATS_PER_BTC
        assert btc_to_sats("0.000000019") == 1

    def test_sats_to_btc_and_format(self):
        assert sats_to_btc(150_000_000) == Decimal("1.5")
        assert format_btc(50_000) == "0.00050000"
        assert format_btc(0) == "0.00000000"

    def test_amount_btc_property(self, utxo_factory):
        assert utxo_factory(value=25_000_000).amount_btc == 0.25
