"""
UTXO View CLI - Fetch, filter and inspect UTXOs for addresses or extended keys.
"""

from __future__ import annotations

import asyncio
import sys
from enum import Enum
from pathlib import Path

import typer
from loguru import logger

from utxoview.aggregator import UTXOAggregator
from utxoview.backends.derivation import StaticAddressDeriver
from utxoview.backends.esplora import EsploraBackend
from utxoview.bitcoin import format_btc, parse_btc_amount, shorten
from utxoview.classifier import classify
from utxoview.config import get_settings
from utxoview.controller import UTXOController
from utxoview.models import (
    AddressList,
    ExtendedKey,
    SingleAddress,
    SortDirection,
    SortField,
    StatusFilter,
    ViewState,
)

app = typer.Typer(
    name="utxo-view",
    help="UTXO viewer with address reuse and common-spend analytics",
    add_completion=False,
)


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


def setup_logging(level: str = "INFO") -> None:
    """Configure loguru logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def build_view_state(
    status: StatusFilter,
    min_btc: str | None,
    max_btc: str | None,
    sort: SortField,
    direction: SortDirection,
) -> ViewState:
    return ViewState(
        status_filter=status,
        min_amount_sats=parse_btc_amount(min_btc),
        max_amount_sats=parse_btc_amount(max_btc),
        sort_field=sort,
        sort_direction=direction,
    )


def format_table(controller: UTXOController) -> str:
    lines = []
    summary = controller.summary
    source = controller.current_source or "-"

    lines.append(f"Source: {source}")
    lines.append(
        f"Total: {format_btc(summary.total_sats)} BTC ({summary.total_sats:,} sats) | "
        f"UTXOs: {summary.count} | Confirmed: {summary.confirmed_count} | "
        f"Unconfirmed: {summary.unconfirmed_count}"
    )
    lines.append("=" * 100)
    lines.append(f"{'Outpoint':<24} {'Amount (BTC)':>16} {'Status':<12} {'Age':<16} Origin")
    lines.append("-" * 100)
    for utxo in controller.visible:
        status = "Confirmed" if utxo.is_confirmed else "Unconfirmed"
        origin = shorten(utxo.origin_address) if utxo.origin_address else ""
        outpoint = f"{shorten(utxo.txid)}:{utxo.vout}"
        lines.append(
            f"{outpoint:<24} {format_btc(utxo.value):>16} {status:<12} {utxo.age:<16} {origin}"
        )

    analytics = controller.analytics
    if not analytics.is_empty:
        lines.append("")
        lines.append("Privacy insights:")
        for insight in analytics.multi_utxo_addresses:
            lines.append(f"  - {insight}")
        for insight in analytics.common_spend_events:
            lines.append(f"  - {insight}")

    if controller.diagnostics:
        lines.append("")
        lines.append("Addresses that failed:")
        for address, error in controller.diagnostics.items():
            lines.append(f"  - {address}: {error}")

    return "\n".join(lines)


def emit(controller: UTXOController, output_format: OutputFormat, output: Path | None) -> None:
    if output_format == OutputFormat.JSON:
        content = controller.export_json()
    elif output_format == OutputFormat.CSV:
        content = controller.export_csv()
    else:
        content = format_table(controller)

    if output is not None:
        output.write_text(content + ("" if content.endswith("\n") else "\n"), encoding="utf-8")
        typer.echo(f"Written to: {output}")
    else:
        typer.echo(content)


@app.command("classify")
def classify_command(
    user_input: str = typer.Argument(..., help="Address, comma-separated addresses or xpub"),
) -> None:
    """Show how an input would be interpreted."""
    request = classify(user_input)
    if isinstance(request, SingleAddress):
        typer.echo(f"single address: {request.address}")
    elif isinstance(request, AddressList):
        typer.echo(f"address list ({len(request.addresses)}):")
        for address in request.addresses:
            typer.echo(f"  {address}")
    elif isinstance(request, ExtendedKey):
        typer.echo(f"extended key: {shorten(request.key)}")
    else:
        typer.echo("invalid input")
        raise typer.Exit(1)


@app.command()
def fetch(
    user_input: str = typer.Argument(..., help="Address, comma-separated addresses or xpub"),
    status: StatusFilter = typer.Option(StatusFilter.ALL, "--status", "-s"),
    min_btc: str | None = typer.Option(None, "--min-btc", help="Minimum amount in BTC"),
    max_btc: str | None = typer.Option(
        None, "--max-btc", help="Maximum amount in BTC (0 = no limit)"
    ),
    sort: SortField = typer.Option(SortField.AGE, "--sort"),
    direction: SortDirection = typer.Option(SortDirection.DESCENDING, "--direction", "-d"),
    output_format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-F"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write output to file"),
    derived_addresses: list[str] | None = typer.Option(
        None,
        "--derived-address",
        "-a",
        help="Address derived from the given extended key (repeatable)",
    ),
    api_url: str | None = typer.Option(None, "--api-url", envvar="MEMPOOL_API_URL"),
    log_level: str | None = typer.Option(None, "--log-level", "-l"),
) -> None:
    """Fetch UTXOs from an Esplora API and display them."""
    settings = get_settings()
    setup_logging(log_level or settings.log_level)

    state = build_view_state(status, min_btc, max_btc, sort, direction)

    deriver = None
    request = classify(user_input)
    if isinstance(request, ExtendedKey) and derived_addresses:
        deriver = StaticAddressDeriver({request.key: derived_addresses})

    ok = asyncio.run(
        _fetch_and_show(
            user_input,
            state,
            api_url or settings.get_api_url(),
            settings.request_timeout,
            settings.max_retries,
            settings.retry_delay,
            settings.max_concurrency,
            deriver,
            output_format,
            output,
        )
    )
    if not ok:
        raise typer.Exit(1)


async def _fetch_and_show(
    user_input: str,
    state: ViewState,
    api_url: str,
    timeout: float,
    max_retries: int,
    retry_delay: float,
    max_concurrency: int,
    deriver: StaticAddressDeriver | None,
    output_format: OutputFormat,
    output: Path | None,
) -> bool:
    """Fetch implementation."""
    backend = EsploraBackend(
        base_url=api_url, timeout=timeout, max_retries=max_retries, retry_delay=retry_delay
    )
    aggregator = UTXOAggregator(backend, deriver=deriver, max_concurrency=max_concurrency)
    controller = UTXOController(aggregator, state)

    try:
        await controller.fetch(user_input)
        await controller.wait_for_analytics()

        if controller.error_message:
            logger.error(controller.error_message)
            return False

        emit(controller, output_format, output)
        return True
    finally:
        await backend.close()


@app.command()
def load(
    path: Path = typer.Argument(..., help="JSON file with exported UTXOs"),
    status: StatusFilter = typer.Option(StatusFilter.ALL, "--status", "-s"),
    min_btc: str | None = typer.Option(None, "--min-btc", help="Minimum amount in BTC"),
    max_btc: str | None = typer.Option(
        None, "--max-btc", help="Maximum amount in BTC (0 = no limit)"
    ),
    sort: SortField = typer.Option(SortField.AGE, "--sort"),
    direction: SortDirection = typer.Option(SortDirection.DESCENDING, "--direction", "-d"),
    output_format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-F"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write output to file"),
    log_level: str = typer.Option("INFO", "--log-level", "-l"),
) -> None:
    """Load UTXOs from a JSON file and display them."""
    setup_logging(log_level)

    if not path.exists():
        logger.error(f"File not found: {path}")
        raise typer.Exit(1)

    state = build_view_state(status, min_btc, max_btc, sort, direction)

    controller = UTXOController(state=state)
    if not controller.load_file(path):
        logger.error(controller.error_message)
        raise typer.Exit(1)
    controller.refresh_analytics()
    emit(controller, output_format, output)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
