"""Human-readable rendering of simulation output.

Pure functions from engine results to strings, so the wording can be
tested without capturing stdout.  The command line prints them; the web
API returns structured data instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pagesim.memory.engine import FaultIntoFree, FaultWithEviction, Hit

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pagesim.memory.engine import AccessResult, ReplacementPolicy, RunSummary
    from pagesim.memory.frames import FrameView

_FREE = "-"
_FRAME_ROW = "{:>5}  {:>5}  {:>6}  {:>3}  {:>5}  {:>6}"


def format_access(result: AccessResult) -> str:
    """Describe one access outcome on a single line."""
    prefix = (
        f"Access: PID {result.process}, Address {result.address} "
        f"(Page {result.page}, Offset {result.offset}) -> "
    )
    match result:
        case Hit():
            return (
                f"{prefix}HIT: Page {result.page} (PID {result.process}) "
                f"already in Frame {result.frame_index}"
            )
        case FaultIntoFree():
            return (
                f"{prefix}PAGE FAULT -> Page {result.page} (PID {result.process}) "
                f"loaded into free Frame {result.frame_index}"
            )
        case FaultWithEviction():
            return (
                f"{prefix}PAGE FAULT -> Memory full. Page {result.evicted_page} "
                f"(PID {result.evicted_process}) (Frame {result.frame_index}) "
                f"will be evicted. -> Page {result.page} (PID {result.process}) "
                f"loaded into Frame {result.frame_index}"
            )


def format_summary(summary: RunSummary) -> str:
    """Render the end-of-run counters."""
    lines = [
        f"--- Simulation finished (Algorithm: {summary.policy_name})",
        f"Total accesses: {summary.total_accesses}",
        f"Total page faults: {summary.total_faults}",
        f"Total hits: {summary.total_hits}",
        f"Total write-backs: {summary.total_writebacks}",
        f"Hit rate: {summary.hit_rate:.2%}",
    ]
    return "\n".join(lines)


def format_frames(frames: list[FrameView]) -> str:
    """Render the frame table, one row per frame."""
    rows = [_FRAME_ROW.format("FRAME", "PID", "PAGE", "REF", "DIRTY", "LOADED")]
    for view in frames:
        if not view.occupied:
            rows.append(_FRAME_ROW.format(view.index, *[_FREE] * 5))
            continue
        rows.append(
            _FRAME_ROW.format(
                view.index,
                view.owner_process,
                view.resident_page,
                int(view.referenced),
                int(view.dirty),
                view.load_sequence,
            )
        )
    return "\n".join(rows)


def format_comparison(summaries: Mapping[ReplacementPolicy, RunSummary]) -> str:
    """Render one row per policy for side-by-side comparison."""
    header = f"{'POLICY':<8}{'ACCESSES':>10}{'FAULTS':>8}{'HITS':>8}{'WRITEBACKS':>12}{'HIT RATE':>10}"
    rows = [header]
    for policy, summary in summaries.items():
        rows.append(
            f"{policy:<8}{summary.total_accesses:>10}{summary.total_faults:>8}"
            f"{summary.total_hits:>8}{summary.total_writebacks:>12}{summary.hit_rate:>10.2%}"
        )
    return "\n".join(rows)
