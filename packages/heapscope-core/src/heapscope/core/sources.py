"""Memory, symbol, module and region sources consumed by the heap walker.

The walker never talks to LLDB directly.  It is handed objects satisfying
the protocols below, so the same code runs against a live process (through
:mod:`heapscope.bridge`) or against a raw dump loaded into memory.
"""

from __future__ import annotations

import logging
import mmap
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Protocol, runtime_checkable

from heapscope.bridge.types import MemoryRegion, ModuleInfo
from heapscope.core.heap.errors import ReadFailure

if TYPE_CHECKING:
    from heapscope.bridge.process import Process
    from heapscope.bridge.target import Target

logger = logging.getLogger(__name__)

DEFAULT_HEAP_REGION = "[heap]"


@runtime_checkable
class MemoryReader(Protocol):
    """Synchronous access to the inferior's memory."""

    def read_bytes(self, address: int, length: int) -> bytes:
        """Return exactly *length* bytes or raise :class:`ReadFailure`."""
        ...

    def page_size(self) -> int:
        ...


@runtime_checkable
class SymbolResolver(Protocol):
    def find(self, qualified_name: str) -> Optional[int]:
        """Resolve ``module::symbol`` to a load address, or ``None``."""
        ...


@runtime_checkable
class ModuleLister(Protocol):
    def loaded_modules(self) -> List[ModuleInfo]:
        ...


@runtime_checkable
class RegionLister(Protocol):
    def regions(self) -> List[MemoryRegion]:
        ...


# ---------------------------------------------------------------------------
# Live process (LLDB bridge)
# ---------------------------------------------------------------------------

class ProcessMemory:
    """:class:`MemoryReader` over a :class:`heapscope.bridge.Process`."""

    def __init__(self, process: Process, page_size: Optional[int] = None) -> None:
        self._process = process
        self._page_size = page_size or mmap.PAGESIZE

    def read_bytes(self, address: int, length: int) -> bytes:
        if length <= 0:
            return b""
        try:
            data = self._process.read_memory(address, length)
        except RuntimeError as exc:
            raise ReadFailure(address, length, str(exc)) from exc
        if len(data) < length:
            raise ReadFailure(address, length, f"short read ({len(data)} bytes)")
        return data

    def page_size(self) -> int:
        return self._page_size


class TargetSymbols:
    """:class:`SymbolResolver` that scopes lookups to one module.

    ``find("libc.so.6::__curbrk")`` only accepts a ``__curbrk`` symbol that
    lives in ``libc.so.6``; an unqualified name accepts the first match.
    """

    def __init__(self, target: Target) -> None:
        self._target = target

    def find(self, qualified_name: str) -> Optional[int]:
        module, sep, name = qualified_name.rpartition("::")
        if not sep:
            module, name = "", qualified_name
        for sym in self._target.find_symbols(name):
            if module and sym.module != module:
                continue
            if sym.address:
                return sym.address
        return None


class TargetModules:
    """:class:`ModuleLister` over a :class:`heapscope.bridge.Target`."""

    def __init__(self, target: Target) -> None:
        self._target = target

    def loaded_modules(self) -> List[ModuleInfo]:
        return self._target.modules


class ProcessRegions:
    """:class:`RegionLister` over a :class:`heapscope.bridge.Process`."""

    def __init__(self, process: Process) -> None:
        self._process = process

    def regions(self) -> List[MemoryRegion]:
        from heapscope.bridge.memory import get_memory_regions

        return get_memory_regions(self._process)


# ---------------------------------------------------------------------------
# Offline (raw dump)
# ---------------------------------------------------------------------------

class BufferMemory:
    """Memory reader backed by a byte buffer mapped at *base*.

    Reads that fall even partly outside ``[base, base + len(data))`` fail,
    the same way an unmapped page fails in a live process.  The buffer also
    reports itself as a single region named ``[heap]`` so bounds resolution
    can fall back to it.
    """

    def __init__(
        self,
        base: int,
        data: bytes,
        page_size: int = 4096,
        region_name: str = DEFAULT_HEAP_REGION,
    ) -> None:
        self.base = base
        self._data = bytes(data)
        self._page_size = page_size
        self._region_name = region_name

    @classmethod
    def from_file(cls, path: str, base: int, page_size: int = 4096) -> BufferMemory:
        data = Path(path).read_bytes()
        logger.info("Loaded %d bytes from %s at %#x", len(data), path, base)
        return cls(base, data, page_size=page_size)

    @property
    def end(self) -> int:
        return self.base + len(self._data)

    def read_bytes(self, address: int, length: int) -> bytes:
        if length <= 0:
            return b""
        offset = address - self.base
        if offset < 0 or offset + length > len(self._data):
            raise ReadFailure(address, length, "outside buffer")
        return self._data[offset:offset + length]

    def page_size(self) -> int:
        return self._page_size

    def regions(self) -> List[MemoryRegion]:
        return [MemoryRegion(start=self.base, end=self.end, name=self._region_name)]


class NoSymbols:
    """Symbol resolver for inputs without symbol information."""

    def find(self, qualified_name: str) -> Optional[int]:
        return None


class NoModules:
    def loaded_modules(self) -> List[ModuleInfo]:
        return []


class NoRegions:
    def regions(self) -> List[MemoryRegion]:
        return []
