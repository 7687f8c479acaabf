"""ptmalloc chunk headers.

A chunk starts with two pointer-sized fields, ``prev_size`` and ``size``.
The low three bits of ``size`` are flags; the rest is the chunk length,
header included.  Field width follows the inferior's pointer width, so the
layout is picked per walk rather than fixed at import time.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum

from .errors import MalformedHeader

PREV_INUSE = 0x1
IS_MMAPPED = 0x2
NON_MAIN_ARENA = 0x4
SIZE_BITS = PREV_INUSE | IS_MMAPPED | NON_MAIN_ARENA


class ChunkLayout(Enum):
    """Header layout for 32-bit (``NARROW``) and 64-bit (``WIDE``) inferiors."""

    NARROW = 4
    WIDE = 8

    @classmethod
    def for_pointer_size(cls, pointer_size: int) -> ChunkLayout:
        try:
            return cls(pointer_size)
        except ValueError:
            raise ValueError(f"Unsupported pointer size: {pointer_size}") from None

    @property
    def pointer_size(self) -> int:
        return self.value

    @property
    def header_size(self) -> int:
        return 2 * self.value

    @property
    def word_format(self) -> str:
        return "<I" if self is ChunkLayout.NARROW else "<Q"

    @property
    def header_format(self) -> str:
        return "<II" if self is ChunkLayout.NARROW else "<QQ"

    def payload_address(self, chunk_address: int) -> int:
        """Return the first user byte of the chunk at *chunk_address*."""
        return chunk_address + self.header_size

    def unpack_word(self, data: bytes) -> int:
        return struct.unpack_from(self.word_format, data)[0]


@dataclass(frozen=True)
class ChunkHeader:
    """Decoded ``prev_size``/``size`` pair."""

    prev_size: int
    size: int

    @property
    def chunk_size(self) -> int:
        return self.size & ~SIZE_BITS

    @property
    def prev_in_use(self) -> bool:
        return bool(self.size & PREV_INUSE)

    @property
    def is_mmapped(self) -> bool:
        return bool(self.size & IS_MMAPPED)

    @property
    def non_main_arena(self) -> bool:
        return bool(self.size & NON_MAIN_ARENA)


def decode(data: bytes, layout: ChunkLayout) -> ChunkHeader:
    """Decode the chunk header at the start of *data*.

    Raises
    ------
    MalformedHeader
        If *data* is shorter than ``layout.header_size``.
    """
    if len(data) < layout.header_size:
        raise MalformedHeader(
            f"Need {layout.header_size} header bytes, got {len(data)}"
        )
    prev_size, size = struct.unpack_from(layout.header_format, data)
    return ChunkHeader(prev_size=prev_size, size=size)
