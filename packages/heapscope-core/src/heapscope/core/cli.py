"""Command-line entry point: ``heapscope attach PID`` / ``heapscope dump FILE``."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.progress import Progress

from heapscope.core.analyzer import HeapAnalyzer
from heapscope.core.display import render_blocks, render_summary
from heapscope.core.events import HeapEvent, HeapEventType
from heapscope.core.heap.errors import BoundsUnresolved, GraphTooLarge
from heapscope.core.types.config import HeapscopeConfig, load_config

logger = logging.getLogger(__name__)


def _address(text: str) -> int:
    try:
        return int(text, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid address: {text!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="heapscope",
        description="Walk the glibc heap of a live process or a raw heap dump.",
    )
    parser.add_argument("--config", help="Path to a heapscope.toml file")
    parser.add_argument(
        "--min-string-length",
        type=int,
        help="Shortest character run reported as a string",
    )
    parser.add_argument(
        "--no-scan", action="store_true", help="Skip the pointer scan"
    )
    parser.add_argument(
        "--graph",
        metavar="ADDR",
        type=_address,
        action="append",
        default=[],
        help="Emit the reference graph reachable from this block (repeatable)",
    )
    parser.add_argument(
        "--dot", metavar="FILE", help="Write the graph to FILE instead of stdout"
    )
    parser.add_argument("--verbose", "-v", action="store_true")

    sub = parser.add_subparsers(dest="command", required=True)

    attach = sub.add_parser("attach", help="Attach to a running process with LLDB")
    attach.add_argument("pid", type=int)

    dump = sub.add_parser("dump", help="Analyse a raw dump of the heap region")
    dump.add_argument("file")
    dump.add_argument("--base", type=_address, required=True, help="Load address of the dump")
    dump.add_argument("--pointer-size", type=int, choices=(4, 8), default=8)
    dump.add_argument("--page-size", type=int, default=4096)
    return parser


def _configure(args: argparse.Namespace) -> HeapscopeConfig:
    config = load_config(args.config)
    if args.min_string_length is not None:
        config.heap.min_string_length = max(args.min_string_length, 1)
    if args.no_scan:
        config.scan.enabled = False
    if args.verbose:
        config.verbose = True
    return config


def _run(analyzer: HeapAnalyzer, args: argparse.Namespace, console: Console) -> int:
    try:
        report = analyzer.find()
    except BoundsUnresolved as exc:
        console.print(f"[red]Could not calculate heap bounds.[/] {exc}")
        return 1

    render_blocks(report, console)
    render_summary(report, console)

    if args.graph:
        try:
            graph = analyzer.graph(report, args.graph)
        except GraphTooLarge as exc:
            console.print(f"[red]Graph not exported.[/] {exc}")
            return 1
        dot = graph.to_dot()
        if args.dot:
            Path(args.dot).write_text(dot)
            console.print(f"Wrote {len(graph.nodes)} nodes to {args.dot}")
        else:
            sys.stdout.write(dot)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = _configure(args)
    # DOT written to stdout owns it; everything else goes to stderr then.
    console = Console(stderr=bool(args.graph) and not args.dot)

    with Progress(
        console=Console(stderr=True), transient=True, redirect_stdout=False
    ) as progress:
        task = progress.add_task("Walking heap", total=1.0)

        def on_event(event: HeapEvent) -> None:
            if event.event_type in (HeapEventType.WALK_PROGRESS, HeapEventType.WALK_END):
                progress.update(task, completed=event.progress)

        if args.command == "dump":
            analyzer = HeapAnalyzer.from_dump(
                args.file,
                args.base,
                pointer_size=args.pointer_size,
                page_size=args.page_size,
                config=config,
                event_callback=on_event,
            )
            return _run(analyzer, args, console)

        from heapscope.bridge import Debugger

        try:
            with Debugger() as dbg:
                _, process = dbg.attach(args.pid)
                try:
                    analyzer = HeapAnalyzer.from_process(
                        process, config=config, event_callback=on_event
                    )
                    return _run(analyzer, args, console)
                finally:
                    process.detach()
        except RuntimeError as exc:
            logger.debug("LLDB session failed", exc_info=True)
            console.print(f"[red]{exc}[/]")
            return 1


if __name__ == "__main__":
    sys.exit(main())
