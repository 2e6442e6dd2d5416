"""Tests for the simulation runner.

The runner replays a full trace through a fresh engine and collects the
outcomes, the summary and the final frame table.  Each run is
independent, so replaying a trace is deterministic.
"""

import pytest

from pagesim.config import ConfigError, SimulationConfig
from pagesim.logging import Logger, LogLevel
from pagesim.memory.engine import FaultWithEviction, Hit, ReplacementPolicy
from pagesim.simulator import compare_policies, run_simulation
from pagesim.trace import read_trace

TRACE = [
    "1 0 R",
    "1 100 R",
    "1 200 R",
    "1 0 W",
    "1 300 R",
    "2 0 R",
    "1 100 W",
    "1 400 R",
]
NUM_FRAMES = 3
PAGE_SIZE = 100


def _config(policy: str) -> SimulationConfig:
    return SimulationConfig.from_values(
        num_frames=NUM_FRAMES, page_size=PAGE_SIZE, policy=policy
    )


class TestRunSimulation:
    """Verify a complete run."""

    def test_one_result_per_record(self) -> None:
        """Every record yields exactly one outcome, in order."""
        records = read_trace(TRACE)
        run = run_simulation(_config("fifo"), records)
        assert len(run.results) == len(records)
        assert [r.address for r in run.results] == [rec.address for rec in records]
        assert isinstance(run.results[3], Hit)

    def test_summary_balances(self) -> None:
        """hits + faults == accesses in the final summary."""
        run = run_simulation(_config("clock"), read_trace(TRACE))
        summary = run.summary
        assert summary.total_hits + summary.total_faults == summary.total_accesses
        assert summary.total_accesses == len(TRACE)
        assert summary.policy_name == "clock"

    def test_final_frames_are_full(self) -> None:
        """After more distinct pages than frames, every frame is occupied."""
        run = run_simulation(_config("fifo"), read_trace(TRACE))
        assert len(run.frames) == NUM_FRAMES
        assert all(view.occupied for view in run.frames)

    def test_empty_trace(self) -> None:
        """An empty trace produces zero counters and free frames."""
        run = run_simulation(_config("fifo"), [])
        assert run.results == []
        assert run.summary.total_accesses == 0
        assert not any(view.occupied for view in run.frames)

    @pytest.mark.parametrize("policy", ["fifo", "clock"])
    def test_replay_is_identical(self, policy: str) -> None:
        """Independent runs of the same trace produce identical output."""
        records = read_trace(TRACE)
        first = run_simulation(_config(policy), records)
        second = run_simulation(_config(policy), records)
        assert first.results == second.results
        assert first.summary == second.summary
        assert first.frames == second.frames

    def test_logs_run_boundaries(self) -> None:
        """The runner logs start and finish; the engine logs evictions."""
        logger = Logger()
        run_simulation(_config("fifo"), read_trace(TRACE), logger=logger)
        simulator_entries = logger.filter(source="simulator")
        expected_boundaries = 2
        assert len(simulator_entries) == expected_boundaries
        assert "Starting fifo run" in simulator_entries[0].message
        assert "Finished fifo run" in simulator_entries[1].message
        evictions = logger.filter(source="engine", min_level=LogLevel.DEBUG)
        assert evictions


class TestComparePolicies:
    """Verify side-by-side comparison."""

    def test_every_policy_reported(self) -> None:
        """One summary per policy, each consistent with a single run."""
        records = read_trace(TRACE)
        summaries = compare_policies(
            num_frames=NUM_FRAMES, page_size=PAGE_SIZE, records=records
        )
        assert set(summaries) == set(ReplacementPolicy)
        for policy, summary in summaries.items():
            single = run_simulation(_config(policy.value), records).summary
            assert summary == single

    def test_accepts_one_shot_iterable(self) -> None:
        """A generator of records is replayed for every policy."""
        records = read_trace(TRACE)
        summaries = compare_policies(
            num_frames=NUM_FRAMES, page_size=PAGE_SIZE, records=iter(records)
        )
        for summary in summaries.values():
            assert summary.total_accesses == len(records)

    def test_policies_can_differ(self) -> None:
        """FIFO and Clock evict different pages on a second-chance trace."""
        trace = read_trace(["1 0 R", "1 1 R", "1 2 R", "1 3 R", "1 1 R", "1 4 R"])
        fifo = run_simulation(
            SimulationConfig.from_values(num_frames=3, page_size=1, policy="fifo"), trace
        ).results[-1]
        clock = run_simulation(
            SimulationConfig.from_values(num_frames=3, page_size=1, policy="clock"), trace
        ).results[-1]
        assert isinstance(fifo, FaultWithEviction)
        assert isinstance(clock, FaultWithEviction)
        assert fifo.evicted_page != clock.evicted_page

    def test_invalid_sizes_rejected(self) -> None:
        """Bad sizes are configuration errors here too."""
        with pytest.raises(ConfigError):
            compare_policies(num_frames=0, page_size=PAGE_SIZE, records=[])
