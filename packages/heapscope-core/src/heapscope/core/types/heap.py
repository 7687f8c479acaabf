from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from pydantic import BaseModel

if TYPE_CHECKING:
    from heapscope.core.heap.chunk import ChunkLayout


class BlockState(Enum):
    """Allocation state of a walked chunk."""

    BUSY = "Busy"
    FREE = "Free"
    TOP = "Top"


class HeapBounds(BaseModel):
    """Address range holding the chunk chain; ``end`` is exclusive."""

    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start

    @property
    def is_walkable(self) -> bool:
        return self.end > self.start


class BlockRecord(BaseModel):
    """One chunk found by the walker."""

    address: int
    size: int
    state: BlockState
    annotation: str = ""
    points_to: List[int] = []

    @property
    def end(self) -> int:
        return self.address + self.size

    def payload_address(self, layout: ChunkLayout) -> int:
        return layout.payload_address(self.address)

    def payload_length(self, layout: ChunkLayout) -> int:
        return max(self.size - layout.header_size, 0)


class GraphNode(BaseModel):
    address: int
    state: BlockState


class HeapGraph(BaseModel):
    """Reachability graph over blocks: plain nodes plus address pairs."""

    nodes: List[GraphNode] = []
    edges: List[Tuple[int, int]] = []

    def to_dot(self, name: str = "heap") -> str:
        """Render the graph as Graphviz DOT text."""
        quoted = name.replace('\\', '\\\\').replace('"', '\\"')
        lines = [f'digraph "{quoted}" {{', "    node [style=filled];"]
        for node in self.nodes:
            color = "green" if node.state is BlockState.BUSY else "red"
            lines.append(f'    "{node.address:#x}" [fillcolor={color}];')
        for source, target in self.edges:
            lines.append(f'    "{source:#x}" -> "{target:#x}";')
        lines.append("}")
        return "\n".join(lines) + "\n"

    def to_networkx(self):
        """Return a ``networkx.DiGraph``; requires the optional ``networkx`` package."""
        import networkx as nx

        graph = nx.DiGraph()
        for node in self.nodes:
            graph.add_node(node.address, state=node.state.value)
        graph.add_edges_from(self.edges)
        return graph


class HeapReport(BaseModel):
    """Result of one heap walk.

    Blocks are keyed by address; callers keep addresses, not records, and
    look them up again with :meth:`find`.
    """

    bounds: HeapBounds
    pointer_size: int
    blocks: List[BlockRecord] = []

    def find(self, address: int) -> Optional[BlockRecord]:
        # Walked blocks are in strictly increasing address order.
        lo, hi = 0, len(self.blocks)
        while lo < hi:
            mid = (lo + hi) // 2
            if self.blocks[mid].address < address:
                lo = mid + 1
            else:
                hi = mid
        if lo < len(self.blocks) and self.blocks[lo].address == address:
            return self.blocks[lo]
        return None

    def block_range(self, address: int) -> Optional[Tuple[int, int]]:
        """Return ``(address, size)`` of the block starting at *address*."""
        block = self.find(address)
        if block is None:
            return None
        return block.address, block.size

    def summary(self) -> Dict[str, Dict[str, int]]:
        """Count and total size of blocks per state."""
        result: Dict[str, Dict[str, int]] = {
            state.value: {"count": 0, "bytes": 0} for state in BlockState
        }
        for block in self.blocks:
            entry = result[block.state.value]
            entry["count"] += 1
            entry["bytes"] += block.size
        return result
