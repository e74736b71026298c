"""
utxoview - UTXO aggregation and analytics engine

Classifies address / xpub input, fetches UTXOs concurrently from an Esplora API,
filters, sorts and summarizes them, and reports address reuse and common-spend
privacy insights.
"""

__version__ = "0.1.0"

from utxoview.aggregator import UTXOAggregator
from utxoview.analytics import analyze
from utxoview.classifier import classify, is_extended_key, is_valid_address, is_valid_input
from utxoview.controller import UTXOController
from utxoview.errors import (
    AddressDerivationFailedError,
    APIError,
    DecodingError,
    ExtendedKeyUnsupportedError,
    InvalidInputError,
    NetworkError,
    NoUTXOsFoundError,
    UTXOViewError,
)
from utxoview.models import (
    UTXO,
    AddressList,
    AggregationOutcome,
    AnalyticsSummary,
    BalanceSummary,
    ConfirmationStatus,
    ExtendedKey,
    FetchRequest,
    InvalidRequest,
    SingleAddress,
    SortDirection,
    SortField,
    SpendInfo,
    StatusFilter,
    ViewState,
)
from utxoview.pipeline import apply_view, summarize, view

__all__ = [
    "APIError",
    "AddressDerivationFailedError",
    "AddressList",
    "AggregationOutcome",
    "AnalyticsSummary",
    "BalanceSummary",
    "ConfirmationStatus",
    "DecodingError",
    "ExtendedKey",
    "ExtendedKeyUnsupportedError",
    "FetchRequest",
    "InvalidInputError",
    "InvalidRequest",
    "NetworkError",
    "NoUTXOsFoundError",
    "SingleAddress",
    "SortDirection",
    "SortField",
    "SpendInfo",
    "StatusFilter",
    "UTXO",
    "UTXOAggregator",
    "UTXOController",
    "UTXOViewError",
    "ViewState",
    "analyze",
    "apply_view",
    "classify",
    "is_extended_key",
    "is_valid_address",
    "is_valid_input",
    "summarize",
    "view",
]
