from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, field_validator


class HeapConfig(BaseModel):
    """Heap discovery and walk configuration."""

    min_string_length: int = 4
    heap_region_name: str = "[heap]"
    brk_symbol: str = "__curbrk"
    libc_prefixes: List[str] = ["libc-", "libc.so"]
    ld_prefixes: List[str] = ["ld-"]
    heuristic_window: int = 0x1000

    @field_validator("min_string_length")
    @classmethod
    def _at_least_one(cls, value: int) -> int:
        return max(value, 1)


class ScanConfig(BaseModel):
    """Pointer scan configuration."""

    enabled: bool = True
    max_workers: Optional[int] = None


class GraphConfig(BaseModel):
    """Reference graph export configuration."""

    max_nodes: int = 3000


class HeapscopeConfig(BaseModel):
    """Top-level heapscope configuration."""

    heap: HeapConfig = HeapConfig()
    scan: ScanConfig = ScanConfig()
    graph: GraphConfig = GraphConfig()
    verbose: bool = False


def load_config(path: Optional[str] = None) -> HeapscopeConfig:
    """Load configuration from a heapscope.toml file, falling back to defaults.

    Uses ``tomllib`` on Python 3.11+ and ``tomli`` on older versions.
    """

    if sys.version_info >= (3, 11):
        import tomllib
    else:
        try:
            import tomli as tomllib  # type: ignore[no-redef]
        except ImportError:
            # If tomli is not installed and we are on an older Python, just
            # return defaults when no explicit path is given.
            if path is None:
                return HeapscopeConfig()
            raise

    config_path = Path(path) if path else Path("heapscope.toml")

    if not config_path.exists():
        return HeapscopeConfig()

    with open(config_path, "rb") as f:
        raw = tomllib.load(f)

    return HeapscopeConfig(**raw)
