"""Read-only view of an attached ``lldb.SBProcess``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

try:
    import lldb
except ImportError:
    lldb = None  # type: ignore[assignment]

if TYPE_CHECKING:
    from .target import Target


class Process:
    """Wraps the ``SBProcess`` returned by :meth:`Debugger.attach`.

    Heap inspection only ever reads from the inferior, so no write or
    execution-control calls are exposed beyond detaching.
    """

    def __init__(self, sb_process: Any, target: Target) -> None:
        self._sb = sb_process
        self._target = target

    @property
    def target(self) -> Target:
        return self._target

    @property
    def pid(self) -> int:
        return self._sb.GetProcessID()

    @property
    def address_byte_size(self) -> int:
        """Pointer width of the inferior in bytes; 8 when LLDB cannot tell."""
        return self._target.address_byte_size or 8

    def detach(self) -> None:
        """Let the process run on without the debugger."""
        error = self._sb.Detach()
        if error and not error.Success():
            raise RuntimeError(f"Failed to detach from PID {self.pid}: {error}")

    def read_memory(self, address: int, size: int) -> bytes:
        """Return *size* bytes of the inferior starting at *address*.

        Raises
        ------
        RuntimeError
            If any part of the range is unmapped or unreadable.
        """
        error = lldb.SBError()
        data = self._sb.ReadMemory(address, size, error)
        if error.Fail() or data is None:
            raise RuntimeError(
                f"Failed to read {size} bytes at {address:#x}: {error}"
            )
        return bytes(data)
