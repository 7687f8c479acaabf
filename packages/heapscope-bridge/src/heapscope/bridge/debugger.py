"""Entry point into LLDB: one ``SBDebugger`` per heap inspection session."""

from __future__ import annotations

from typing import TYPE_CHECKING, Tuple

try:
    import lldb
except ImportError:
    lldb = None  # type: ignore[assignment]

if TYPE_CHECKING:
    from .process import Process
    from .target import Target


def _require_lldb() -> None:
    if lldb is None:
        raise RuntimeError(
            "The 'lldb' Python module is not available. "
            "Install LLDB and put its bindings on the path, "
            'e.g. PYTHONPATH="$(lldb -P)".'
        )


class Debugger:
    """Owns an ``lldb.SBDebugger`` running in synchronous mode.

    Usage::

        with Debugger() as dbg:
            target, process = dbg.attach(1234)
            try:
                ...
            finally:
                process.detach()
    """

    def __init__(self) -> None:
        _require_lldb()
        lldb.SBDebugger.Initialize()
        self._sb = lldb.SBDebugger.Create()
        # Synchronous mode: attach returns once the inferior has stopped.
        self._sb.SetAsync(False)

    def __enter__(self) -> Debugger:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        self.destroy()

    def attach(self, pid: int) -> Tuple[Target, Process]:
        """Attach to *pid* and return its target and stopped process."""
        from .process import Process
        from .target import Target

        sb_target = self._sb.CreateTarget("")
        if not sb_target or not sb_target.IsValid():
            raise RuntimeError("Failed to create empty target for attach")

        error = lldb.SBError()
        sb_process = sb_target.AttachToProcessWithID(self._sb.GetListener(), pid, error)
        if error.Fail():
            raise RuntimeError(f"Failed to attach to PID {pid}: {error}")

        target = Target(sb_target)
        return target, Process(sb_process, target)

    def destroy(self) -> None:
        """Release the debugger; safe to call more than once."""
        if self._sb is None:
            return
        lldb.SBDebugger.Destroy(self._sb)
        self._sb = None  # type: ignore[assignment]
