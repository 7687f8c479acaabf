"""Heap decoding: chunk headers, payload classification, walking, scanning."""

from __future__ import annotations

from heapscope.core.heap.bounds import resolve
from heapscope.core.heap.chunk import ChunkHeader, ChunkLayout, decode
from heapscope.core.heap.classify import classify
from heapscope.core.heap.errors import (
    BoundsUnresolved,
    CorruptChain,
    GraphTooLarge,
    HeapError,
    MalformedHeader,
    ReadFailure,
    SelfReference,
)
from heapscope.core.heap.graph import build_graph
from heapscope.core.heap.scanner import scan
from heapscope.core.heap.walker import walk

__all__ = [
    "ChunkHeader",
    "ChunkLayout",
    "decode",
    "classify",
    "resolve",
    "walk",
    "scan",
    "build_graph",
    # errors
    "HeapError",
    "ReadFailure",
    "MalformedHeader",
    "BoundsUnresolved",
    "CorruptChain",
    "SelfReference",
    "GraphTooLarge",
]
