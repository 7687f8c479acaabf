"""heapscope — walk, classify and link the glibc heap of a debugged process."""

from __future__ import annotations

from heapscope.core.analyzer import HeapAnalyzer
from heapscope.core.events import HeapEvent, HeapEventType
from heapscope.core.heap.errors import BoundsUnresolved, GraphTooLarge, HeapError
from heapscope.core.sources import BufferMemory
from heapscope.core.types.config import HeapscopeConfig, load_config
from heapscope.core.types.heap import BlockRecord, BlockState, HeapBounds, HeapGraph, HeapReport

__all__ = [
    "HeapAnalyzer",
    "HeapEvent",
    "HeapEventType",
    "HeapError",
    "BoundsUnresolved",
    "GraphTooLarge",
    "BufferMemory",
    "HeapscopeConfig",
    "load_config",
    "BlockRecord",
    "BlockState",
    "HeapBounds",
    "HeapGraph",
    "HeapReport",
]
