"""Command-line entry point.

Usage::

    pagesim <num_frames> <page_size> <fifo|clock> <trace_file> [options]

Prints one line per access followed by the run summary.  Configuration
problems (bad sizes, unknown policy, unreadable trace) are reported on
stderr and end the run with exit status 1.  Skipped trace lines are
reported on stderr as warnings while the run carries on.

This module is the thin I/O wrapper; everything it prints comes from
``pagesim.report`` and everything it runs from ``pagesim.simulator``.
"""

import argparse
import sys
from collections.abc import Sequence

from pagesim.config import ConfigError, SimulationConfig
from pagesim.logging import Logger, LogLevel
from pagesim.report import format_access, format_comparison, format_frames, format_summary
from pagesim.simulator import compare_policies, run_simulation
from pagesim.trace import load_trace

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pagesim",
        description="Simulate page replacement (FIFO or Clock) over a memory access trace.",
    )
    parser.add_argument("num_frames", help="number of physical frames")
    parser.add_argument("page_size", help="page size in bytes")
    parser.add_argument("policy", help="replacement policy: fifo or clock")
    parser.add_argument("trace_file", help="trace file with 'pid address R|W' lines")
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="print only the final summary"
    )
    parser.add_argument(
        "--show-frames", action="store_true", help="print the final frame table"
    )
    parser.add_argument(
        "--compare",
        action="store_true",
        help="also run every policy on the same trace and compare them",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="print the full event log to stderr"
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the simulator and return the process exit status."""
    args = build_parser().parse_args(argv)
    logger = Logger()

    try:
        config = SimulationConfig.from_values(
            num_frames=args.num_frames, page_size=args.page_size, policy=args.policy
        )
        records = load_trace(args.trace_file, logger=logger)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)  # noqa: T201
        return EXIT_CONFIG_ERROR

    for entry in logger.filter(min_level=LogLevel.WARNING):
        print(entry, file=sys.stderr)  # noqa: T201
    already_shown = len(logger.entries)

    run = run_simulation(config, records, logger=logger)
    if not args.quiet:
        for result in run.results:
            print(format_access(result))  # noqa: T201
    print(format_summary(run.summary))  # noqa: T201

    if args.show_frames:
        print()  # noqa: T201
        print(format_frames(run.frames))  # noqa: T201

    if args.compare:
        summaries = compare_policies(
            num_frames=config.num_frames, page_size=config.page_size, records=records
        )
        print()  # noqa: T201
        print(format_comparison(summaries))  # noqa: T201

    if args.verbose:
        for entry in logger.entries[already_shown:]:
            print(entry, file=sys.stderr)  # noqa: T201

    return EXIT_OK
