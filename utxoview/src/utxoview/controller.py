"""
Single owner of the UTXO view state.

The controller serializes every mutation: fetch results, file loads, filter
and sort changes. After each change it recomputes the visible set and summary
with the pure pipeline, stores them, and schedules analytics for the next
event loop iteration. Without a running loop analytics stay pending until
refresh_analytics() is called.

Superseded fetches are detected with a monotonically increasing request
token: a fetch remembers the token it started with and its result is only
applied if no newer request has been issued since.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from pathlib import Path

from loguru import logger

from utxoview.aggregator import UTXOAggregator
from utxoview.analytics import analyze
from utxoview.bitcoin import parse_btc_amount
from utxoview.classifier import classify
from utxoview.models import (
    UTXO,
    AnalyticsSummary,
    BalanceSummary,
    SortDirection,
    SortField,
    StatusFilter,
    ViewState,
)
from utxoview.pipeline import apply_view
from utxoview.serialization import read_utxo_file, utxos_to_csv, utxos_to_json


class UTXOController:
    def __init__(
        self, aggregator: UTXOAggregator | None = None, state: ViewState | None = None
    ) -> None:
        self.aggregator = aggregator
        self._state = state or ViewState()

        self._utxos: list[UTXO] = []
        self._visible: list[UTXO] = []
        self._summary = BalanceSummary()
        self._analytics = AnalyticsSummary()
        self._diagnostics: dict[str, Exception] = {}

        self._error_message: str | None = None
        self._current_source: str | None = None
        self._is_loading = False

        self._request_token = 0
        self._view_version = 0
        self._analytics_version = 0
        self._scheduled_version = 0

    # Read-only snapshots

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def utxos(self) -> list[UTXO]:
        return list(self._utxos)

    @property
    def visible(self) -> list[UTXO]:
        return list(self._visible)

    @property
    def summary(self) -> BalanceSummary:
        return self._summary

    @property
    def analytics(self) -> AnalyticsSummary:
        return self._analytics

    @property
    def analytics_pending(self) -> bool:
        return self._analytics_version != self._view_version

    @property
    def diagnostics(self) -> dict[str, Exception]:
        return dict(self._diagnostics)

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def current_source(self) -> str | None:
        return self._current_source

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def request_token(self) -> int:
        return self._request_token

    # Loading

    def _next_token(self) -> int:
        self._request_token += 1
        return self._request_token

    def _is_current(self, token: int) -> bool:
        return token == self._request_token

    async def fetch(self, raw: str) -> bool:
        """
        Fetch UTXOs for raw input and replace the current set.

        Returns True if the result was applied, False if a newer request
        superseded this one while it was in flight.
        """
        if self.aggregator is None:
            raise RuntimeError("Controller has no aggregator; only file loads are possible")

        token = self._next_token()
        self._is_loading = True
        self._error_message = None
        source = raw.strip() if isinstance(raw, str) else ""

        try:
            outcome = await self.aggregator.fetch(classify(raw))
        except asyncio.CancelledError:
            if self._is_current(token):
                self._is_loading = False
            raise
        except Exception as e:
            if not self._is_current(token):
                logger.debug(f"Discarding stale error for request {token}: {e}")
                return False
            logger.error(f"Fetch failed for {source}: {e}")
            self._apply_failure(str(e))
            return True

        if not self._is_current(token):
            logger.debug(
                f"Discarding stale result for request {token} "
                f"(latest is {self._request_token}, {len(outcome.utxos)} UTXOs)"
            )
            return False

        self._apply_utxos(outcome.utxos, f"API: {source}", outcome.per_source_errors)
        return True

    def load_utxos(self, utxos: Iterable[UTXO], source: str) -> None:
        """Replace the current set with utxos loaded by the caller."""
        self._next_token()
        self._apply_utxos(list(utxos), source, {})
        if not self._utxos:
            self._error_message = f"No UTXOs found in {source}."

    def load_file(self, path: Path) -> bool:
        """Load a JSON export. Returns False and sets error_message on failure."""
        self._next_token()
        try:
            utxos = read_utxo_file(path)
        except Exception as e:
            logger.error(f"Error loading file {path}: {e}")
            self._apply_failure(f"Error loading file. {e}")
            return False
        self.load_utxos(utxos, f"File: {path.name}")
        return True

    def clear(self) -> None:
        """Drop all data and invalidate any in-flight fetch."""
        self._next_token()
        self._utxos = []
        self._diagnostics = {}
        self._error_message = None
        self._current_source = None
        self._is_loading = False
        self._refresh_view()

    def _apply_utxos(
        self, utxos: list[UTXO], source: str, diagnostics: dict[str, Exception]
    ) -> None:
        self._utxos = utxos
        self._diagnostics = dict(diagnostics)
        self._current_source = source
        self._error_message = None
        self._is_loading = False
        logger.info(f"Loaded {len(utxos)} UTXOs from {source}")
        self._refresh_view()

    def _apply_failure(self, message: str) -> None:
        self._utxos = []
        self._diagnostics = {}
        self._current_source = None
        self._error_message = message
        self._is_loading = False
        self._refresh_view()

    # View state

    def set_view_state(self, state: ViewState) -> None:
        self._state = state
        self._refresh_view()

    def set_status_filter(self, status_filter: StatusFilter) -> None:
        self.set_view_state(self._state.model_copy(update={"status_filter": status_filter}))

    def set_amount_range(self, min_sats: int | None, max_sats: int | None) -> None:
        self.set_view_state(
            ViewState(
                **{
                    **self._state.model_dump(),
                    "min_amount_sats": min_sats,
                    "max_amount_sats": max_sats,
                }
            )
        )

    def set_amount_filters_btc(self, min_btc: str | None, max_btc: str | None) -> None:
        """Amount filters as typed by a user in BTC; unparsable text clears the bound."""
        self.set_amount_range(parse_btc_amount(min_btc), parse_btc_amount(max_btc))

    def set_sort(self, field: SortField, direction: SortDirection | None = None) -> None:
        update: dict[str, object] = {"sort_field": field}
        if direction is not None:
            update["sort_direction"] = direction
        self.set_view_state(self._state.model_copy(update=update))

    def clear_filters(self) -> None:
        self.set_view_state(
            self._state.model_copy(
                update={
                    "status_filter": StatusFilter.ALL,
                    "min_amount_sats": None,
                    "max_amount_sats": None,
                }
            )
        )

    # Derived data

    def _refresh_view(self) -> None:
        self._visible, self._summary = apply_view(self._utxos, self._state)
        self._view_version += 1
        self._schedule_analytics(self._view_version)

    def _schedule_analytics(self, version: int) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Left pending until refresh_analytics() or wait_for_analytics()
            logger.debug(f"No event loop, analytics for view {version} deferred")
            return
        self._scheduled_version = version
        loop.call_soon(self._update_analytics, version)

    def _update_analytics(self, version: int) -> None:
        if version != self._view_version:
            # A newer view has its own update scheduled
            return
        self._analytics = analyze(self._visible)
        self._analytics_version = version

    def refresh_analytics(self) -> AnalyticsSummary:
        """
        Bring analytics up to date with the current view.

        For callers without an event loop, where view changes leave analytics
        pending instead of scheduling them.
        """
        if self.analytics_pending:
            self._update_analytics(self._view_version)
        return self._analytics

    async def wait_for_analytics(self) -> AnalyticsSummary:
        """Yield to the event loop until analytics match the current view."""
        while self.analytics_pending:
            if self._scheduled_version != self._view_version:
                # Changed outside a running loop, nothing is scheduled
                return self.refresh_analytics()
            await asyncio.sleep(0)
        return self._analytics

    # Export

    def export_json(self) -> str:
        return utxos_to_json(self._visible)

    def export_csv(self) -> str:
        return utxos_to_csv(self._visible)
