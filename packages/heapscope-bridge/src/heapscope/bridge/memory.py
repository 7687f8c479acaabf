"""Memory map of an attached process."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

try:
    import lldb
except ImportError:
    lldb = None  # type: ignore[assignment]

from .types import MemoryRegion

if TYPE_CHECKING:
    from .process import Process


def get_memory_regions(process: Process) -> List[MemoryRegion]:
    """Return the process's mappings in address order.

    Unnamed (anonymous) mappings get ``name=None``.
    """
    sb_regions = process._sb.GetMemoryRegions()
    info = lldb.SBMemoryRegionInfo()
    regions: List[MemoryRegion] = []
    for i in range(sb_regions.GetSize()):
        sb_regions.GetMemoryRegionAtIndex(i, info)
        regions.append(
            MemoryRegion(
                start=info.GetRegionBase(),
                end=info.GetRegionEnd(),
                readable=info.IsReadable(),
                writable=info.IsWritable(),
                executable=info.IsExecutable(),
                name=info.GetName() or None,
            )
        )
    return regions
