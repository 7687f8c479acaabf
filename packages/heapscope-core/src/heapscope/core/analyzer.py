"""HeapAnalyzer — top-level orchestrator."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Iterable, List, Optional

from heapscope.core.events import HeapEvent, HeapEventCallback, HeapEventType
from heapscope.core.heap import bounds as heap_bounds
from heapscope.core.heap.chunk import ChunkLayout
from heapscope.core.heap.graph import build_graph
from heapscope.core.heap.scanner import scan
from heapscope.core.heap.walker import walk
from heapscope.core.sources import (
    BufferMemory,
    MemoryReader,
    ModuleLister,
    NoModules,
    NoRegions,
    NoSymbols,
    ProcessMemory,
    ProcessRegions,
    RegionLister,
    SymbolResolver,
    TargetModules,
    TargetSymbols,
)
from heapscope.core.types.config import HeapscopeConfig, load_config
from heapscope.core.types.heap import BlockRecord, HeapBounds, HeapGraph, HeapReport

if TYPE_CHECKING:
    from heapscope.bridge.process import Process

logger = logging.getLogger(__name__)


class HeapAnalyzer:
    """Resolves, walks and scans the heap of one inferior.

    Every call to :meth:`find` starts from scratch; the analyzer keeps no
    results between calls.

    Usage::

        with Debugger() as dbg:
            target, process = dbg.attach(pid)
            analyzer = HeapAnalyzer.from_process(process)
            report = analyzer.find()
            for block in report.blocks:
                print(hex(block.address), block.state.value, block.annotation)
    """

    def __init__(
        self,
        reader: MemoryReader,
        symbols: Optional[SymbolResolver] = None,
        modules: Optional[ModuleLister] = None,
        regions: Optional[RegionLister] = None,
        pointer_size: int = 8,
        config: Optional[HeapscopeConfig] = None,
        config_path: Optional[str] = None,
        event_callback: Optional[HeapEventCallback] = None,
    ):
        if config is not None:
            self.config = config
        else:
            self.config = load_config(config_path)

        self.reader = reader
        self.symbols = symbols or NoSymbols()
        self.modules = modules or NoModules()
        if regions is None:
            regions = reader if isinstance(reader, RegionLister) else NoRegions()
        self.regions = regions
        self.layout = ChunkLayout.for_pointer_size(pointer_size)
        self._event_callback = event_callback

        if self.config.verbose:
            logging.basicConfig(level=logging.DEBUG)

    @classmethod
    def from_process(cls, process: Process, **kwargs) -> HeapAnalyzer:
        """Build an analyzer over a live process attached through LLDB."""
        target = process.target
        return cls(
            ProcessMemory(process),
            symbols=TargetSymbols(target),
            modules=TargetModules(target),
            regions=ProcessRegions(process),
            pointer_size=process.address_byte_size,
            **kwargs,
        )

    @classmethod
    def from_dump(
        cls,
        path: str,
        base: int,
        pointer_size: int = 8,
        page_size: int = 4096,
        **kwargs,
    ) -> HeapAnalyzer:
        """Build an analyzer over a raw heap dump mapped at *base*."""
        reader = BufferMemory.from_file(path, base, page_size=page_size)
        return cls(reader, pointer_size=pointer_size, **kwargs)

    # -- events ------------------------------------------------------------

    def _emit(self, event_type: HeapEventType, **kwargs) -> None:
        if self._event_callback is not None:
            self._event_callback(HeapEvent(event_type, **kwargs))

    # -- public API --------------------------------------------------------

    def resolve_bounds(self) -> HeapBounds:
        """Locate the heap; raises :class:`BoundsUnresolved` on failure."""
        bounds = heap_bounds.resolve(
            self.reader,
            self.symbols,
            self.modules,
            self.regions,
            self.layout,
            self.config.heap,
        )
        self._emit(
            HeapEventType.BOUNDS_RESOLVED,
            metadata={"start": bounds.start, "end": bounds.end},
        )
        return bounds

    def walk(self, bounds: HeapBounds) -> List[BlockRecord]:
        """Walk the chunk chain in *bounds*, emitting progress events."""
        started = time.monotonic()

        def _progress(fraction: float) -> None:
            self._emit(HeapEventType.WALK_PROGRESS, progress=fraction)

        blocks = walk(
            bounds,
            self.reader,
            self.layout,
            self.config.heap.min_string_length,
            progress=_progress if self._event_callback is not None else None,
        )
        self._emit(
            HeapEventType.WALK_END,
            progress=1.0,
            block_count=len(blocks),
            duration=time.monotonic() - started,
        )
        return blocks

    def scan(self, blocks: List[BlockRecord]) -> List[BlockRecord]:
        """Link blocks that hold pointers into other blocks."""
        logger.debug("detecting pointers in heap blocks")
        started = time.monotonic()
        blocks = scan(
            blocks,
            self.reader,
            self.layout.pointer_size,
            max_workers=self.config.scan.max_workers,
        )
        self._emit(
            HeapEventType.SCAN_END,
            block_count=len(blocks),
            duration=time.monotonic() - started,
        )
        return blocks

    def find(self, bounds: Optional[HeapBounds] = None) -> HeapReport:
        """Run a complete analysis and return a fresh :class:`HeapReport`.

        Parameters
        ----------
        bounds:
            Heap range to walk; resolved automatically when omitted.
        """
        if bounds is None:
            bounds = self.resolve_bounds()
        blocks = self.walk(bounds)
        if self.config.scan.enabled:
            blocks = self.scan(blocks)
        return HeapReport(
            bounds=bounds,
            pointer_size=self.layout.pointer_size,
            blocks=blocks,
        )

    def graph(self, report: HeapReport, seeds: Iterable[int]) -> HeapGraph:
        """Build the reference graph reachable from the *seeds* block addresses."""
        graph = build_graph(report.blocks, seeds, self.config.graph.max_nodes)
        self._emit(HeapEventType.GRAPH_BUILT, block_count=len(graph.nodes))
        return graph

    def dump(self, report: HeapReport, address: int) -> bytes:
        """Return the raw bytes of the block starting at *address*.

        Raises
        ------
        KeyError
            If no block in *report* starts at *address*.
        """
        block_range = report.block_range(address)
        if block_range is None:
            raise KeyError(f"No block at {address:#x}")
        start, size = block_range
        return self.reader.read_bytes(start, size)
