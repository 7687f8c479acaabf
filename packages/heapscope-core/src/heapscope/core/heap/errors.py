"""Exceptions raised while decoding and walking a heap."""

from __future__ import annotations


class HeapError(Exception):
    """Base class for every heap-analysis error."""


class ReadFailure(HeapError):
    """Target memory at an address could not be read."""

    def __init__(self, address: int, length: int, reason: str = "") -> None:
        self.address = address
        self.length = length
        message = f"Failed to read {length} bytes at {address:#x}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MalformedHeader(HeapError):
    """Fewer bytes than a chunk header were available."""


class BoundsUnresolved(HeapError):
    """No strategy produced a usable heap start/end pair."""


class CorruptChain(HeapError):
    """A chunk's size points outside the heap bounds."""


class SelfReference(HeapError):
    """A chunk's size does not advance the walk."""


class GraphTooLarge(HeapError):
    """The reachable block set exceeds the configured node limit."""

    def __init__(self, node_count: int, max_nodes: int) -> None:
        self.node_count = node_count
        self.max_nodes = max_nodes
        super().__init__(f"Too many nodes: {node_count} (limit {max_nodes})")
