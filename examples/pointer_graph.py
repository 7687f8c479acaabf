"""Follow pointers from one heap block and export the reachable graph.

Writes Graphviz DOT next to the dump and, when networkx is installed,
prints the blocks with the most incoming references.
"""

import sys
from pathlib import Path

from heapscope.core import GraphTooLarge, HeapAnalyzer, HeapEventType


def on_event(event):
    if event.event_type is HeapEventType.SCAN_END:
        print(f"Scanned {event.block_count} blocks in {event.duration:.2f}s")


def main():
    if len(sys.argv) < 4:
        print("Usage: python pointer_graph.py <heap.bin> <base-address> <block-address>...")
        sys.exit(1)

    dump = Path(sys.argv[1])
    seeds = [int(arg, 0) for arg in sys.argv[3:]]

    analyzer = HeapAnalyzer.from_dump(str(dump), int(sys.argv[2], 0), event_callback=on_event)
    report = analyzer.find()

    try:
        graph = analyzer.graph(report, seeds)
    except GraphTooLarge as exc:
        print(f"Giving up: {exc}")
        sys.exit(1)

    dot_path = dump.with_suffix(".dot")
    dot_path.write_text(graph.to_dot())
    print(f"Wrote {len(graph.nodes)} nodes, {len(graph.edges)} edges to {dot_path}")

    try:
        nx_graph = graph.to_networkx()
    except ImportError:
        return
    ranked = sorted(nx_graph.in_degree(), key=lambda item: item[1], reverse=True)
    for address, degree in ranked[:10]:
        print(f"{address:#x}  referenced {degree} times")


if __name__ == "__main__":
    main()
