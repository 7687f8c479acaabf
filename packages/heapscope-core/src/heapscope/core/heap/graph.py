"""Reference graph reachable from a set of seed blocks."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Set

from heapscope.core.types.heap import BlockRecord, GraphNode, HeapGraph

from .errors import GraphTooLarge

logger = logging.getLogger(__name__)

DEFAULT_MAX_NODES = 3000


def build_graph(
    blocks: List[BlockRecord],
    seed_addresses: Iterable[int],
    max_nodes: int = DEFAULT_MAX_NODES,
) -> HeapGraph:
    """Collect every block reachable from *seed_addresses* via ``points_to``.

    Raises
    ------
    GraphTooLarge
        If more than *max_nodes* blocks are reachable.  No partial graph
        is returned.
    """
    by_address: Dict[int, BlockRecord] = {block.address: block for block in blocks}

    stack: List[int] = []
    seen: Set[int] = set()
    for address in seed_addresses:
        if address not in by_address:
            logger.warning("Seed %#x is not the start of a known block", address)
            continue
        if address not in seen:
            seen.add(address)
            stack.append(address)

    order: List[int] = []
    while stack:
        address = stack.pop()
        order.append(address)
        if len(order) > max_nodes:
            raise GraphTooLarge(len(order), max_nodes)
        for pointer in by_address[address].points_to:
            if pointer in by_address and pointer not in seen:
                seen.add(pointer)
                stack.append(pointer)

    logger.debug("Done processing %d nodes", len(order))

    nodes = [GraphNode(address=a, state=by_address[a].state) for a in order]
    edges = [
        (address, pointer)
        for address in order
        for pointer in by_address[address].points_to
        if pointer in seen
    ]
    return HeapGraph(nodes=nodes, edges=edges)
