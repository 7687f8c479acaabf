"""Detection of pointers from one heap block into another.

Every pointer-aligned address inside any block's payload is a potential
target.  Blocks that the classifier left unannotated are then read word by
word; a word equal to a potential target becomes a reference to the block
containing it.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional

from heapscope.core.types.heap import BlockRecord

from .chunk import ChunkLayout
from .errors import ReadFailure

if TYPE_CHECKING:
    from heapscope.core.sources import MemoryReader

logger = logging.getLogger(__name__)

ANNOTATION_SEPARATOR = " | "


def build_target_index(blocks: List[BlockRecord], layout: ChunkLayout) -> Dict[int, int]:
    """Map every aligned payload address to the address of its block.

    Later blocks overwrite earlier ones for the same address; the index is
    a heuristic, not an authoritative map.
    """
    targets: Dict[int, int] = {}
    step = layout.pointer_size
    for block in blocks:
        payload = block.payload_address(layout)
        for address in range(payload, block.end, step):
            targets[address] = block.address
    return targets


def _pointer_fragment(address: int, layout: ChunkLayout) -> str:
    width = "dword" if layout is ChunkLayout.NARROW else "qword"
    return f"{width} ptr [{address:#x}]"


def scan_block(
    block: BlockRecord,
    reader: MemoryReader,
    targets: Mapping[int, int],
    layout: ChunkLayout,
) -> BlockRecord:
    """Return *block* with its outgoing references filled in.

    Already-annotated blocks and blocks whose payload cannot be read are
    returned unchanged.  Each referenced block is listed once, in order of
    first occurrence.
    """
    if block.annotation:
        return block
    length = block.payload_length(layout)
    if length < layout.pointer_size:
        return block
    try:
        data = reader.read_bytes(block.payload_address(layout), length)
    except ReadFailure:
        logger.debug("Skipping unreadable block at %#x", block.address)
        return block

    points_to: List[int] = []
    seen = set()
    step = layout.pointer_size
    for offset in range(0, length - step + 1, step):
        value = layout.unpack_word(data[offset:offset + step])
        target = targets.get(value)
        if target is None or target in seen:
            continue
        seen.add(target)
        points_to.append(target)

    if not points_to:
        return block
    annotation = ANNOTATION_SEPARATOR.join(_pointer_fragment(t, layout) for t in points_to)
    return block.model_copy(update={"annotation": annotation, "points_to": points_to})


def scan(
    blocks: List[BlockRecord],
    reader: MemoryReader,
    address_width: int,
    max_workers: Optional[int] = None,
) -> List[BlockRecord]:
    """Find intra-heap pointers in *blocks*.

    Parameters
    ----------
    blocks:
        Output of :func:`heapscope.core.heap.walker.walk`; not modified.
    reader:
        Source of target memory.  Called from several threads at once.
    address_width:
        Pointer size of the inferior in bytes.
    max_workers:
        Size of the thread pool; ``None`` uses the executor default.

    Returns
    -------
    list[BlockRecord]
        New records, same order as *blocks*.
    """
    layout = ChunkLayout.for_pointer_size(address_width)
    targets = build_target_index(blocks, layout)
    logger.debug("Collected %d possible target addresses", len(targets))

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        results = list(
            pool.map(lambda block: scan_block(block, reader, targets, layout), blocks)
        )

    linked = sum(1 for block in results if block.points_to)
    logger.info("Found pointers in %d of %d blocks", linked, len(results))
    return results
