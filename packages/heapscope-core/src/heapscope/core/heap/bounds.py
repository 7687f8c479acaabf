"""Locate the start and end of the main heap.

glibc keeps the current program break in ``__curbrk``.  The copy inside the
C library tracks the heap end, the one inside the dynamic linker still
holds the initial break, which is the heap start.  When symbols are
missing, a heuristic and finally the ``[heap]`` mapping fill the gaps.
"""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, List, Optional, Tuple

from heapscope.core.types.config import HeapConfig
from heapscope.core.types.heap import HeapBounds

from .chunk import ChunkLayout
from .errors import BoundsUnresolved, ReadFailure

if TYPE_CHECKING:
    from heapscope.bridge.types import ModuleInfo
    from heapscope.core.sources import MemoryReader, ModuleLister, RegionLister, SymbolResolver

logger = logging.getLogger(__name__)


def library_names(
    modules: List[ModuleInfo], config: HeapConfig
) -> Tuple[Optional[str], Optional[str]]:
    """Return the file names of the C library and the dynamic linker."""
    libc_name: Optional[str] = None
    ld_name: Optional[str] = None
    for module in modules:
        if libc_name and ld_name:
            break
        file_name = PurePosixPath(module.name or module.path).name
        if libc_name is None and file_name.startswith(tuple(config.libc_prefixes)):
            libc_name = file_name
            logger.debug("libc library appears to be: %s", libc_name)
        elif ld_name is None and file_name.startswith(tuple(config.ld_prefixes)):
            ld_name = file_name
            logger.debug("ld library appears to be: %s", ld_name)
    return libc_name, ld_name


def read_pointer(reader: MemoryReader, address: int, layout: ChunkLayout) -> int:
    return layout.unpack_word(reader.read_bytes(address, layout.pointer_size))


def find_start_heuristic(
    reader: MemoryReader,
    end_symbol: int,
    layout: ChunkLayout,
    window: int = 0x1000,
) -> Optional[int]:
    """Guess the start-of-heap variable from the end-of-heap one.

    Walks down from *end_symbol* one pointer at a time; a candidate is
    accepted when the word four pointers below it holds the page size.
    """
    page_size = reader.page_size()
    step = layout.pointer_size
    for offset in range(0, window, step):
        candidate = end_symbol - offset
        probe = candidate - 4 * step
        if probe < 0:
            break
        try:
            value = read_pointer(reader, probe, layout)
        except ReadFailure:
            continue
        if value == page_size:
            return candidate
    return None


def _symbol_address(symbols: SymbolResolver, module: Optional[str], name: str) -> Optional[int]:
    if not module:
        return None
    return symbols.find(f"{module}::{name}") or None


def _dereference(reader: MemoryReader, address: Optional[int], layout: ChunkLayout) -> int:
    if not address:
        return 0
    try:
        return read_pointer(reader, address, layout)
    except ReadFailure:
        logger.debug("Could not read heap symbol at %#x", address)
        return 0


def resolve(
    reader: MemoryReader,
    symbols: SymbolResolver,
    modules: ModuleLister,
    regions: RegionLister,
    layout: ChunkLayout,
    config: Optional[HeapConfig] = None,
) -> HeapBounds:
    """Determine the heap bounds.

    Raises
    ------
    BoundsUnresolved
        If no strategy yields non-zero, distinct start and end addresses.
    """
    config = config or HeapConfig()
    libc_name, ld_name = library_names(modules.loaded_modules(), config)

    end_symbol = _symbol_address(symbols, libc_name, config.brk_symbol)
    if end_symbol is None:
        logger.debug("%s symbol not found in libc, falling back on heuristic", config.brk_symbol)

    start_symbol = _symbol_address(symbols, ld_name, config.brk_symbol)
    if start_symbol is None and end_symbol is not None:
        logger.debug("%s symbol not found in ld, falling back on heuristic", config.brk_symbol)
        start_symbol = find_start_heuristic(
            reader, end_symbol, layout, config.heuristic_window
        )

    if start_symbol:
        logger.debug("heap start symbol : %#x", start_symbol)
    if end_symbol:
        logger.debug("heap end symbol   : %#x", end_symbol)

    start = _dereference(reader, start_symbol, layout)
    end = _dereference(reader, end_symbol, layout)

    if not start or not end:
        for region in regions.regions():
            if region.name != config.heap_region_name:
                continue
            logger.info(
                "Found a memory region named '%s', assuming that it provides sane bounds",
                region.name,
            )
            start = start or region.start
            end = end or region.end
            break

    if not start or not end or start == end:
        raise BoundsUnresolved("Failed to calculate the bounds of the heap.")

    logger.info("heap start : %#x", start)
    logger.info("heap end   : %#x", end)
    return HeapBounds(start=start, end=end)
