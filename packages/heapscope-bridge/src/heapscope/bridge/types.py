"""Plain value types returned by the LLDB wrappers.

Nothing here depends on ``lldb``; the core package builds and tests
against these types without a debugger installed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class MemoryRegion:
    """One mapping of the inferior, ``[start, end)``."""

    start: int
    end: int
    readable: bool = True
    writable: bool = True
    executable: bool = False
    name: Optional[str] = None

    @property
    def size(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class ModuleInfo:
    """A loaded executable or shared library."""

    name: str
    path: str = ""


@dataclass(frozen=True)
class SymbolInfo:
    """A loaded symbol and the file name of the module defining it."""

    name: str
    address: int
    module: str
