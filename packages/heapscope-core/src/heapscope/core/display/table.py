"""Rich rendering of heap reports."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from heapscope.core.types.heap import BlockState, HeapReport

_STATE_STYLES = {
    BlockState.BUSY: "green",
    BlockState.FREE: "red",
    BlockState.TOP: "bold cyan",
}

# Long annotations (big strings, long pointer lists) are cut for display.
_MAX_DATA = 120


def _format_address(value: int, pointer_size: int) -> str:
    return f"0x{value:0{pointer_size * 2}x}"


def blocks_table(report: HeapReport, max_data: int = _MAX_DATA) -> Table:
    """Build a table with one row per block: Block, Size, Type, Data."""
    table = Table(
        title=(
            f"Heap {_format_address(report.bounds.start, report.pointer_size)}"
            f" - {_format_address(report.bounds.end, report.pointer_size)}"
        ),
        header_style="bold",
    )
    table.add_column("Block", style="cyan", no_wrap=True)
    table.add_column("Size", justify="right")
    table.add_column("Type")
    table.add_column("Data", overflow="fold")

    for block in report.blocks:
        data = block.annotation
        if len(data) > max_data:
            data = data[: max_data - 3] + "..."
        table.add_row(
            _format_address(block.address, report.pointer_size),
            str(block.size),
            Text(block.state.value, style=_STATE_STYLES[block.state]),
            Text(data),
        )
    return table


def summary_table(report: HeapReport) -> Table:
    table = Table(title="Summary", header_style="bold")
    table.add_column("Type")
    table.add_column("Blocks", justify="right")
    table.add_column("Bytes", justify="right")
    for state, entry in report.summary().items():
        table.add_row(state, str(entry["count"]), str(entry["bytes"]))
    return table


def render_blocks(report: HeapReport, console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(blocks_table(report))


def render_summary(report: HeapReport, console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(summary_table(report))
