"""Simulation runner — replay a whole trace through a fresh engine.

The engine resolves one access at a time; this module owns the loop
around it.  Every run builds its own engine, so runs never share state:
replaying the same trace with the same configuration always produces
the same outcomes and counters.

``compare_policies`` replays one trace under every policy, which is the
usual way to study how FIFO and Clock differ on the same workload.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pagesim.config import SimulationConfig
from pagesim.logging import LogLevel
from pagesim.memory.engine import PagingEngine, ReplacementPolicy

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pagesim.logging import Logger
    from pagesim.memory.engine import AccessResult, RunSummary
    from pagesim.memory.frames import FrameView
    from pagesim.trace import AccessRecord

_SOURCE = "simulator"


@dataclass(frozen=True)
class SimulationRun:
    """Everything one run produced.

    Attributes:
        config: The configuration the run used.
        results: One outcome per access, in trace order.
        summary: The final counters.
        frames: The frame table as it stood after the last access.

    """

    config: SimulationConfig
    results: list[AccessResult]
    summary: RunSummary
    frames: list[FrameView]


def run_simulation(
    config: SimulationConfig,
    records: Iterable[AccessRecord],
    *,
    logger: Logger | None = None,
) -> SimulationRun:
    """Replay ``records`` in order through a new engine.

    Args:
        config: Frame count, page size and policy.
        records: The accesses, in trace order.
        logger: Optional log shared with the engine.

    Returns:
        The per-access outcomes, summary and final frame state.

    """
    engine = PagingEngine(
        num_frames=config.num_frames,
        page_size=config.page_size,
        policy=config.policy,
        logger=logger,
    )
    if logger is not None:
        logger.log(
            LogLevel.INFO,
            f"Starting {config.policy} run: {config.num_frames} frames, "
            f"page size {config.page_size}",
            source=_SOURCE,
        )

    results = [
        engine.process_access(record.process, record.address, record.operation)
        for record in records
    ]
    summary = engine.summary()

    if logger is not None:
        logger.log(
            LogLevel.INFO,
            f"Finished {config.policy} run: {summary.total_accesses} accesses, "
            f"{summary.total_faults} faults",
            source=_SOURCE,
        )
    return SimulationRun(
        config=config,
        results=results,
        summary=summary,
        frames=engine.frames(),
    )


def compare_policies(
    *,
    num_frames: int,
    page_size: int,
    records: Iterable[AccessRecord],
    logger: Logger | None = None,
) -> dict[ReplacementPolicy, RunSummary]:
    """Run the same trace under every replacement policy.

    Raises:
        ConfigError: If the frame count or page size is invalid.

    """
    trace = list(records)
    summaries: dict[ReplacementPolicy, RunSummary] = {}
    for policy in ReplacementPolicy:
        config = SimulationConfig.from_values(
            num_frames=num_frames, page_size=page_size, policy=policy
        )
        summaries[policy] = run_simulation(config, trace, logger=logger).summary
    return summaries
