"""Analyse a raw heap dump without a debugger.

Dump the ``[heap]`` mapping of a process first, for example from gdb:

    (gdb) info proc mappings
    (gdb) dump binary memory heap.bin 0x555555559000 0x55555557a000

then point this script at the file and the address it was mapped at.
"""

import sys

from heapscope.core import HeapAnalyzer
from heapscope.core.types import BlockState


def main():
    if len(sys.argv) < 3:
        print("Usage: python offline_dump.py <heap.bin> <base-address>")
        sys.exit(1)

    analyzer = HeapAnalyzer.from_dump(sys.argv[1], int(sys.argv[2], 0))
    report = analyzer.find()

    for block in report.blocks:
        if block.state is BlockState.FREE:
            continue
        print(f"{block.address:#x}  {block.size:>8}  {block.state.value:<4}  {block.annotation}")

    for state, entry in report.summary().items():
        print(f"{state}: {entry['count']} blocks, {entry['bytes']} bytes")


if __name__ == "__main__":
    main()
