"""Sequential traversal of a ptmalloc chunk chain.

The walk starts at ``bounds.start`` and hops from chunk to chunk using each
header's size.  A chunk whose successor lands exactly on ``bounds.end`` is
the top chunk.  Anything unexpected (an unreadable header, a size that
leaves the bounds, a size that does not advance) ends the walk early and
the records gathered so far are returned.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, List, Optional

from heapscope.core.types.heap import BlockRecord, BlockState, HeapBounds

from .chunk import ChunkHeader, ChunkLayout, decode
from .classify import classify
from .errors import CorruptChain, MalformedHeader, ReadFailure, SelfReference

if TYPE_CHECKING:
    from heapscope.core.sources import MemoryReader

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


def read_header(reader: MemoryReader, address: int, layout: ChunkLayout) -> ChunkHeader:
    """Read and decode the chunk header at *address*."""
    return decode(reader.read_bytes(address, layout.header_size), layout)


def _fraction(bounds: HeapBounds, cursor: int) -> float:
    done = (cursor - bounds.start) / bounds.size
    return min(max(done, 0.0), 1.0)


def _report(progress: Optional[ProgressCallback], fraction: float) -> None:
    if progress is None:
        return
    try:
        progress(fraction)
    except Exception:
        # Progress is informational only and never ends the walk.
        logger.debug("Progress callback failed at %.2f", fraction, exc_info=True)


def walk(
    bounds: HeapBounds,
    reader: MemoryReader,
    layout: ChunkLayout,
    min_string_length: int,
    progress: Optional[ProgressCallback] = None,
) -> List[BlockRecord]:
    """Walk the chunk chain inside *bounds*.

    Parameters
    ----------
    bounds:
        Heap range; nothing is read unless ``end > start``.
    reader:
        Source of target memory.
    layout:
        Header layout matching the inferior's pointer width.
    min_string_length:
        Shortest run of characters reported as a string.
    progress:
        Called with the consumed fraction of the range after every chunk.

    Returns
    -------
    list[BlockRecord]
        Records in address order, ending with the top chunk when the chain
        reached ``bounds.end`` cleanly.
    """
    blocks: List[BlockRecord] = []
    if not bounds.is_walkable:
        logger.warning("Heap end %#x is not above start %#x", bounds.end, bounds.start)
        return blocks

    cursor = bounds.start
    try:
        while True:
            header = read_header(reader, cursor, layout)
            chunk_size = header.chunk_size
            next_address = cursor + chunk_size

            if next_address == bounds.end:
                blocks.append(
                    BlockRecord(address=cursor, size=chunk_size, state=BlockState.TOP)
                )
                _report(progress, 1.0)
                break

            if not bounds.start <= next_address < bounds.end:
                raise CorruptChain(
                    f"Chunk at {cursor:#x} points to {next_address:#x}, outside heap"
                )

            if next_address == cursor:
                raise SelfReference(f"Chunk at {cursor:#x} has size zero")

            # A chunk's in-use bit lives in its successor's header.
            next_header = read_header(reader, next_address, layout)
            state = BlockState.BUSY if next_header.prev_in_use else BlockState.FREE
            annotation = classify(
                reader,
                layout.payload_address(cursor),
                chunk_size - layout.header_size,
                min_string_length,
            )
            blocks.append(
                BlockRecord(
                    address=cursor,
                    size=chunk_size,
                    state=state,
                    annotation=annotation,
                )
            )

            cursor = next_address
            _report(progress, _fraction(bounds, cursor))
    except (ReadFailure, MalformedHeader, CorruptChain, SelfReference) as exc:
        logger.debug("Heap walk stopped after %d blocks: %s", len(blocks), exc)

    logger.info("Walked %d blocks between %#x and %#x", len(blocks), bounds.start, bounds.end)
    return blocks
