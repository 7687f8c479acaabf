"""Root conftest — synthetic heaps shared by the whole test suite."""

from __future__ import annotations

from typing import List
from unittest.mock import MagicMock

import pytest

from heap_builders import make_heap
from heapscope.bridge.types import MemoryRegion, ModuleInfo, SymbolInfo
from heapscope.core.heap.chunk import PREV_INUSE
from heapscope.core.sources import BufferMemory


# ---------------------------------------------------------------------------
# Synthetic heaps
# ---------------------------------------------------------------------------

@pytest.fixture()
def simple_heap() -> BufferMemory:
    """Busy string chunk, free chunk, busy binary chunk, top chunk."""
    return make_heap(
        [
            (0x30 | PREV_INUSE, b"hello heap world\x00"),
            (0x20 | PREV_INUSE, b"\x01\x02\x03\x04"),
            (0x30, b"\x89PNG\r\n\x1a\n" + b"\x00" * 8),
            (0x40 | PREV_INUSE, b""),
        ]
    )


# ---------------------------------------------------------------------------
# Mock sources
# ---------------------------------------------------------------------------

@pytest.fixture()
def glibc_modules() -> List[ModuleInfo]:
    return [
        ModuleInfo(name="a.out", path="/tmp/a.out"),
        ModuleInfo(name="libc.so.6", path="/usr/lib/x86_64-linux-gnu/libc.so.6"),
        ModuleInfo(name="ld-linux-x86-64.so.2", path="/usr/lib64/ld-linux-x86-64.so.2"),
    ]


@pytest.fixture()
def mock_bridge_target(glibc_modules):
    """Mock Target with realistic defaults."""
    target = MagicMock()
    target.address_byte_size = 8
    target.modules = glibc_modules
    target.find_symbols.return_value = [
        SymbolInfo(name="__curbrk", address=0x7FFFF7F9E2E0, module="libc.so.6"),
        SymbolInfo(name="__curbrk", address=0x7FFFF7FFD0A8, module="ld-linux-x86-64.so.2"),
    ]
    return target


@pytest.fixture()
def mock_bridge_process(mock_bridge_target):
    """Mock Process with realistic defaults."""
    process = MagicMock()
    process.pid = 12345
    process.address_byte_size = 8
    process.target = mock_bridge_target
    process.read_memory.return_value = b"\x00" * 16
    return process


@pytest.fixture()
def heap_region() -> MemoryRegion:
    return MemoryRegion(start=0x5000, end=0x9000, readable=True, writable=True, name="[heap]")
