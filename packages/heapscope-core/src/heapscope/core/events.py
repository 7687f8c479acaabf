"""Event system for observable heap analysis."""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Optional


class HeapEventType(Enum):
    """Types of events emitted while analysing a heap."""

    BOUNDS_RESOLVED = "bounds_resolved"
    WALK_PROGRESS = "walk_progress"
    WALK_END = "walk_end"
    SCAN_END = "scan_end"
    GRAPH_BUILT = "graph_built"


class HeapEvent:
    """Lightweight event emitted around each analysis phase."""

    __slots__ = (
        "event_type",
        "progress",
        "block_count",
        "duration",
        "metadata",
    )

    def __init__(
        self,
        event_type: HeapEventType,
        progress: float = 0.0,
        block_count: int = 0,
        duration: float = 0.0,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        self.event_type = event_type
        self.progress = progress
        self.block_count = block_count
        self.duration = duration
        self.metadata = metadata or {}


HeapEventCallback = Callable[[HeapEvent], None]
