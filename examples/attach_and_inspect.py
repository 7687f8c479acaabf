"""Attach to a running process, walk its heap, and detach.

The process is stopped for the duration of the walk so its chunk chain
does not move underneath the reader.  Run with the LLDB Python bindings on
the path:

    PYTHONPATH="$(lldb -P)" python attach_and_inspect.py 12345
"""

import sys

from heapscope.bridge import Debugger
from heapscope.core import HeapAnalyzer
from heapscope.core.display import render_blocks, render_summary


def main():
    if len(sys.argv) < 2:
        print("Usage: python attach_and_inspect.py <pid>")
        sys.exit(1)

    pid = int(sys.argv[1])

    with Debugger() as dbg:
        print(f"Attaching to PID {pid}...")
        _, process = dbg.attach(pid)
        try:
            analyzer = HeapAnalyzer.from_process(process)
            report = analyzer.find()
        finally:
            process.detach()

    render_blocks(report)
    render_summary(report)


if __name__ == "__main__":
    main()
