"""Tests for rich rendering of heap reports."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from heapscope.core.display import blocks_table, render_blocks, render_summary, summary_table
from heapscope.core.types.heap import BlockRecord, BlockState, HeapBounds, HeapReport


@pytest.fixture()
def report():
    return HeapReport(
        bounds=HeapBounds(start=0x1000, end=0x1080),
        pointer_size=8,
        blocks=[
            BlockRecord(address=0x1000, size=0x20, state=BlockState.BUSY, annotation='ASCII "[bold]x[/]"'),
            BlockRecord(address=0x1020, size=0x20, state=BlockState.FREE),
            BlockRecord(address=0x1040, size=0x40, state=BlockState.TOP),
        ],
    )


def _render(fn, report) -> str:
    buf = io.StringIO()
    fn(report, Console(file=buf, width=200, color_system=None))
    return buf.getvalue()


class TestBlocksTable:
    def test_columns(self, report):
        table = blocks_table(report)
        assert [c.header for c in table.columns] == ["Block", "Size", "Type", "Data"]
        assert table.row_count == 3

    def test_render(self, report):
        out = _render(render_blocks, report)
        assert "0x0000000000001000" in out
        assert "Busy" in out
        assert "Free" in out
        assert "Top" in out
        assert "64" in out

    def test_annotation_is_not_markup(self, report):
        out = _render(render_blocks, report)
        assert 'ASCII "[bold]x[/]"' in out

    def test_long_annotation_truncated(self):
        report = HeapReport(
            bounds=HeapBounds(start=0x1000, end=0x1100),
            pointer_size=4,
            blocks=[
                BlockRecord(address=0x1000, size=0x100, state=BlockState.BUSY, annotation="A" * 500)
            ],
        )
        out = _render(lambda r, c: c.print(blocks_table(r, max_data=40)), report)
        assert "A" * 37 + "..." in out
        assert "A" * 41 not in out
        assert "0x00001000" in out


class TestSummary:
    def test_summary_counts(self, report):
        assert report.summary() == {
            "Busy": {"count": 1, "bytes": 0x20},
            "Free": {"count": 1, "bytes": 0x20},
            "Top": {"count": 1, "bytes": 0x40},
        }

    def test_summary_table(self, report):
        assert summary_table(report).row_count == 3

    def test_render_summary(self, report):
        out = _render(render_summary, report)
        assert "Summary" in out
        assert "Busy" in out
