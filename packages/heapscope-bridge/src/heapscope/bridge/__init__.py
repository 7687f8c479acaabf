"""heapscope.bridge -- the slice of LLDB's SB API that heap inspection needs.

Attach to a process, list its modules and mappings, resolve symbols and
read memory.  LLDB must be importable as a Python module; without it,
creating a :class:`Debugger` raises ``RuntimeError``.

Example::

    from heapscope.bridge import Debugger

    with Debugger() as dbg:
        target, process = dbg.attach(1234)
        header = process.read_memory(0x555555559000, 16)
        process.detach()
"""

from __future__ import annotations

from .debugger import Debugger
from .memory import get_memory_regions
from .process import Process
from .target import Target
from .types import MemoryRegion, ModuleInfo, SymbolInfo

__all__ = [
    "Debugger",
    "Target",
    "Process",
    "MemoryRegion",
    "ModuleInfo",
    "SymbolInfo",
    "get_memory_regions",
]
