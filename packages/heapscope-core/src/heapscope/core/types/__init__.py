from __future__ import annotations

from heapscope.core.types.config import (
    GraphConfig,
    HeapConfig,
    HeapscopeConfig,
    ScanConfig,
    load_config,
)
from heapscope.core.types.heap import (
    BlockRecord,
    BlockState,
    GraphNode,
    HeapBounds,
    HeapGraph,
    HeapReport,
)

__all__ = [
    # config
    "GraphConfig",
    "HeapConfig",
    "HeapscopeConfig",
    "ScanConfig",
    "load_config",
    # heap
    "BlockRecord",
    "BlockState",
    "GraphNode",
    "HeapBounds",
    "HeapGraph",
    "HeapReport",
]
