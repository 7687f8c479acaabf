"""Best-effort description of what a chunk's payload holds."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Tuple

from .errors import ReadFailure

if TYPE_CHECKING:
    from heapscope.core.sources import MemoryReader

logger = logging.getLogger(__name__)

_ASCII_PRINTABLE = frozenset(range(0x20, 0x7F)) | {0x09, 0x0A, 0x0D}
_LATIN1_PRINTABLE = _ASCII_PRINTABLE | frozenset(range(0xA0, 0x100))
_ESCAPES = str.maketrans({"\t": "\\t", "\n": "\\n", "\r": "\\r"})

# Checked in order at offset 0 of the payload; first match wins.
MAGIC_SIGNATURES: List[Tuple[bytes, str]] = [
    (b"\x89PNG", "PNG IMAGE"),
    (b"/* XPM */", "XPM IMAGE"),
    (b"BZ", "BZIP FILE"),
    (b"\x1f\x9d", "COMPRESS FILE"),
    (b"\x1f\x8b", "GZIP FILE"),
    (b"\x7fELF", "ELF FILE"),
    (b"\xff\xd8\xff", "JPEG IMAGE"),
    (b"GIF8", "GIF IMAGE"),
    (b"PK\x03\x04", "ZIP FILE"),
    (b"%PDF", "PDF FILE"),
]


def ascii_string(data: bytes) -> Optional[str]:
    """Return the leading printable ASCII text of *data*.

    The text must end at a NUL byte or at the end of *data*; any other
    byte means the payload is not a string and ``None`` is returned.
    """
    end = len(data)
    for i, b in enumerate(data):
        if b == 0:
            end = i
            break
        if b not in _ASCII_PRINTABLE:
            return None
    return data[:end].decode("ascii")


def utf16_string(data: bytes) -> Optional[str]:
    """Return the leading printable UTF-16LE text of *data*, or ``None``.

    Only code units in the printable Latin-1 range are accepted, which
    keeps arbitrary binary data from decoding as CJK text.
    """
    chars: List[str] = []
    for i in range(0, len(data) - 1, 2):
        lo, hi = data[i], data[i + 1]
        if lo == 0 and hi == 0:
            break
        if hi != 0 or lo not in _LATIN1_PRINTABLE:
            return None
        chars.append(chr(lo))
    return "".join(chars)


def magic_name(data: bytes) -> Optional[str]:
    for signature, name in MAGIC_SIGNATURES:
        if data.startswith(signature):
            return name
    return None


def classify(
    reader: MemoryReader,
    payload_start: int,
    payload_length: int,
    min_string_length: int,
) -> str:
    """Annotate the payload at *payload_start*.

    At most *payload_length* bytes are read.  Returns ``ASCII "..."``,
    ``UTF-16 "..."``, a file-format name, or ``""`` when nothing matched
    or the payload could not be read.
    """
    if payload_length <= 0:
        return ""
    try:
        data = reader.read_bytes(payload_start, payload_length)
    except ReadFailure:
        logger.debug("Unreadable payload at %#x", payload_start)
        return ""

    min_length = max(min_string_length, 1)

    text = ascii_string(data)
    if text is not None and len(text) >= min_length:
        return f'ASCII "{text.translate(_ESCAPES)}"'

    text = utf16_string(data)
    if text is not None and len(text) >= min_length:
        return f'UTF-16 "{text.translate(_ESCAPES)}"'

    return magic_name(data) or ""
