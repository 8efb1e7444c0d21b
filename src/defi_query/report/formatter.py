"""Rich console formatter for query results."""

from __future__ import annotations

from typing import Any

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .envelope import QueryResult

# Snapshot members that hold a list of records
_RECORD_LISTS = ("topReserves", "rates", "topPools", "topMarkets", "markets", "vaults")

# Snapshot scalars shown in the per-snapshot summary line
_SUMMARY_KEYS = ("totalTVLUSD", "reserveCount", "poolCount", "marketCount")

_PERCENT_KEYS = {"supplyAPY", "borrowAPY", "utilizationRate", "utilization", "lltv", "apy", "netApy"}

_HIDDEN_KEYS = {"timestamp", "demo", "id", "address"}


def _format_usd(value: float) -> str:
    """Format USD compactly: $1.23B, $45.6M, $7.8K."""
    for threshold, suffix in ((1e9, "B"), (1e6, "M"), (1e3, "K")):
        if abs(value) >= threshold:
            return f"${value / threshold:.2f}{suffix}"
    return f"${value:.2f}"


def _format_cell(key: str, value: Any) -> str:
    if value is None:
        return "-"
    if key in _PERCENT_KEYS and isinstance(value, (int, float)):
        return f"{value:.2f}%"
    if key.endswith("USD") and isinstance(value, (int, float)):
        return _format_usd(value)
    if key == "feeTier":
        return f"{value} bps"
    if isinstance(value, int) and not isinstance(value, bool):
        return f"{value:,}"
    return str(value)


def _records_table(records: list[dict[str, Any]], title: str | None = None) -> Table:
    table = Table(title=title, expand=True, show_lines=False)
    if not records:
        table.add_column("(no rows)", style="dim")
        return table

    columns = [k for k in records[0] if k not in _HIDDEN_KEYS]
    for key in columns:
        numeric = isinstance(records[0][key], (int, float))
        table.add_column(
            key,
            justify="right" if numeric else "left",
            style="green" if key.endswith("USD") else ("yellow" if key in _PERCENT_KEYS else "cyan"),
            no_wrap=not numeric,
        )
    for record in records:
        table.add_row(*(_format_cell(k, record.get(k)) for k in columns))
    return table


def _snapshot_renderable(snapshot: dict[str, Any]) -> RenderableType:
    """Render one snapshot: summary line plus its record table."""
    heading = " ".join(
        str(part) for part in (snapshot.get("protocol"), snapshot.get("chain")) if part
    )
    summary = "  ".join(
        f"[dim]{key}[/] {_format_cell(key, snapshot[key])}"
        for key in _SUMMARY_KEYS
        if key in snapshot
    )
    parts: list[RenderableType] = [Text.from_markup(f"[bold]{heading}[/]  {summary}")]
    if snapshot.get("demoNote"):
        parts.append(Text(snapshot["demoNote"], style="yellow"))
    for key in _RECORD_LISTS:
        if isinstance(snapshot.get(key), list):
            parts.append(_records_table(snapshot[key]))
    return Group(*parts)


def _data_renderable(shape: str | None, data: Any) -> RenderableType:
    if shape == "single" and isinstance(data, dict):
        return _snapshot_renderable(data)

    if shape == "chain_map" and isinstance(data, dict):
        parts: list[RenderableType] = []
        for chain, records in data.items():
            if records is None:
                parts.append(Text(f"{chain}: unavailable", style="red"))
            else:
                parts.append(_records_table(records, title=chain))
        return Group(*parts)

    if isinstance(data, list):
        if data and all(isinstance(d, dict) and "protocol" in d for d in data):
            return Group(*(_snapshot_renderable(d) for d in data))
        return _records_table(data)

    return Text(str(data))


def format_result(result: QueryResult, console: Console | None = None) -> None:
    """Print a rich panel for a query result to stdout.

    Args:
        result: Envelope to render
        console: Console to print on; a new stdout console when omitted
    """
    console = console or Console()
    wire = result.to_dict()

    meta = Table(show_header=False, box=None, padding=(0, 1))
    meta.add_column("Key", style="dim")
    meta.add_column("Value", style="cyan")
    meta.add_row("Query", wire["query"])
    if "protocol" in wire:
        meta.add_row("Protocol", wire["protocol"])
    if "chain" in wire:
        meta.add_row("Chain", wire["chain"])
    meta.add_row("Time", f"{wire['executionTimeMs']} ms")

    if result.success:
        body = Group(meta, "", _data_renderable(wire.get("dataShape"), wire.get("data")))
        title, border = "[bold]DeFi Query[/]", "green"
    else:
        body = Group(meta, "", Text(wire["error"], style="bold red"))
        title, border = "[bold]DeFi Query Failed[/]", "red"

    console.print()
    console.print(Panel(body, title=title, border_style=border, padding=(1, 2)))
    console.print()
