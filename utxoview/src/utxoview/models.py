"""
Core data models using Pydantic for validation and serialization.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from utxoview.bitcoin import sats_to_btc
from utxoview.constants import MAX_SATS


class ConfirmationStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    confirmed: bool = False
    block_height: int | None = None
    block_hash: str | None = None
    block_time: int | None = None

    @model_validator(mode="after")
    def drop_block_fields_when_unconfirmed(self) -> ConfirmationStatus:
        # Unconfirmed outputs never carry block metadata
        if not self.confirmed:
            object.__setattr__(self, "block_height", None)
            object.__setattr__(self, "block_hash", None)
            object.__setattr__(self, "block_time", None)
        return self


class SpendInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    spent: bool | None = None
    spend_txid: str | None = None
    spend_vin: int | None = None
    spend_confirmation: ConfirmationStatus | None = None


_SPEND_WIRE_FIELDS = ("spent", "txid_spent", "vin_spent", "status_spent")


class UTXO(BaseModel):
    """
    An unspent transaction output as returned by Esplora-style APIs.

    The wire format keeps spend details flat (spent, txid_spent, vin_spent,
    status_spent); they are gathered into ``spend_info`` on load.
    ``origin_address`` is stamped after construction by the aggregator.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    txid: str = Field(..., min_length=1)
    vout: int = Field(..., ge=0)
    value: int = Field(..., ge=0, le=MAX_SATS)
    confirmation: ConfirmationStatus = Field(
        default_factory=ConfirmationStatus, alias="status"
    )
    spend_info: SpendInfo | None = None
    origin_address: str | None = Field(default=None, alias="originAddress")

    @model_validator(mode="before")
    @classmethod
    def collect_spend_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if not any(name in data for name in _SPEND_WIRE_FIELDS):
            return data
        data = dict(data)
        spend = {
            "spent": data.pop("spent", None),
            "spend_txid": data.pop("txid_spent", None),
            "spend_vin": data.pop("vin_spent", None),
            "spend_confirmation": data.pop("status_spent", None),
        }
        if data.get("spend_info") is None and any(v is not None for v in spend.values()):
            data["spend_info"] = spend
        return data

    @property
    def key(self) -> str:
        return f"{self.txid}:{self.vout}"

    @property
    def is_confirmed(self) -> bool:
        return self.confirmation.confirmed

    @property
    def block_height(self) -> int | None:
        return self.confirmation.block_height

    @property
    def amount_btc(self) -> float:
        return float(sats_to_btc(self.value))

    @property
    def age(self) -> str:
        if self.is_confirmed and self.block_height is not None:
            return f"Block: {self.block_height}"
        return "Unconfirmed"

    @property
    def is_spent(self) -> bool:
        return self.spend_info is not None and self.spend_info.spent is True

    def with_origin(self, address: str) -> UTXO:
        """Return a copy stamped with the address it was discovered under."""
        if self.origin_address is not None and self.origin_address != address:
            raise ValueError(
                f"UTXO {self.key} already has origin address {self.origin_address}"
            )
        return self.model_copy(update={"origin_address": address})

    def to_wire(self) -> dict[str, Any]:
        """Serialize back to the Esplora wire schema (plus originAddress if known)."""
        data: dict[str, Any] = {
            "txid": self.txid,
            "vout": self.vout,
            "status": self.confirmation.model_dump(exclude_none=True),
            "value": self.value,
        }
        if self.spend_info is not None:
            info = self.spend_info
            if info.spent is not None:
                data["spent"] = info.spent
            if info.spend_txid is not None:
                data["txid_spent"] = info.spend_txid
            if info.spend_vin is not None:
                data["vin_spent"] = info.spend_vin
            if info.spend_confirmation is not None:
                data["status_spent"] = info.spend_confirmation.model_dump(exclude_none=True)
        if self.origin_address is not None:
            data["originAddress"] = self.origin_address
        return data


class StatusFilter(str, Enum):
    ALL = "all"
    CONFIRMED = "confirmed"
    UNCONFIRMED = "unconfirmed"


class SortField(str, Enum):
    AMOUNT = "amount"
    AGE = "age"
    STATUS = "status"


class SortDirection(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


class ViewState(BaseModel):
    """Filter and sort settings. Replaced as a whole by the controller."""

    model_config = ConfigDict(frozen=True)

    status_filter: StatusFilter = StatusFilter.ALL
    min_amount_sats: int | None = Field(default=None, ge=0, le=MAX_SATS)
    max_amount_sats: int | None = Field(default=None, ge=0, le=MAX_SATS)
    sort_field: SortField = SortField.AGE
    sort_direction: SortDirection = SortDirection.DESCENDING

    @property
    def has_active_filters(self) -> bool:
        return (
            self.status_filter != StatusFilter.ALL
            or self.min_amount_sats is not None
            or self.max_amount_sats is not None
        )


# Fetch requests produced by the input classifier


@dataclass(frozen=True)
class SingleAddress:
    address: str


@dataclass(frozen=True)
class AddressList:
    addresses: tuple[str, ...]


@dataclass(frozen=True)
class ExtendedKey:
    key: str


@dataclass(frozen=True)
class InvalidRequest:
    raw: str = ""


FetchRequest = SingleAddress | AddressList | ExtendedKey | InvalidRequest


@dataclass
class AggregationOutcome:
    """Result of one fetch invocation."""

    utxos: list[UTXO]
    per_source_errors: dict[str, Exception] = field(default_factory=dict)

    @property
    def partial(self) -> bool:
        return bool(self.per_source_errors)


@dataclass(frozen=True)
class BalanceSummary:
    total_sats: int = 0
    count: int = 0
    confirmed_count: int = 0
    unconfirmed_count: int = 0

    @property
    def total_btc(self) -> float:
        return float(sats_to_btc(self.total_sats))


@dataclass(frozen=True)
class AnalyticsSummary:
    multi_utxo_addresses: list[str] = field(default_factory=list)
    common_spend_events: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.multi_utxo_addresses and not self.common_spend_events
