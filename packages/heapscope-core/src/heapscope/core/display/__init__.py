from heapscope.core.display.table import (
    blocks_table,
    render_blocks,
    render_summary,
    summary_table,
)

__all__ = ["blocks_table", "summary_table", "render_blocks", "render_summary"]
