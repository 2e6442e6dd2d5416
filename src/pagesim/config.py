"""Startup configuration for a simulation run.

A run is fixed by three values chosen before the first access and never
changed afterwards: the number of physical frames, the page size, and
the replacement policy.  Anything wrong here is fatal; the run does not
start.
"""

from __future__ import annotations

from dataclasses import dataclass

from pagesim.memory.engine import ReplacementPolicy


class ConfigError(Exception):
    """Raise when the run cannot start (bad sizes, policy, or input file)."""


# Upper bound on the frame table size.
MAX_FRAMES = 1 << 16


def _positive_int(label: str, value: int | str) -> int:
    """Convert ``value`` to an int and require it to be positive."""
    try:
        number = int(value)
    except ValueError:
        msg = f"{label} must be a positive integer, got {value!r}"
        raise ConfigError(msg) from None
    if number <= 0:
        msg = f"{label} must be a positive integer, got {number}"
        raise ConfigError(msg)
    return number


def parse_policy(name: str) -> ReplacementPolicy:
    """Resolve a policy name, case-insensitively.

    Args:
        name: ``fifo`` or ``clock`` in any letter case.

    Returns:
        The matching policy.

    Raises:
        ConfigError: If the name is not recognised.

    """
    try:
        return ReplacementPolicy(name.strip().lower())
    except ValueError:
        choices = ", ".join(policy.value for policy in ReplacementPolicy)
        msg = f"Unknown replacement policy {name!r} (use {choices})"
        raise ConfigError(msg) from None


@dataclass(frozen=True)
class SimulationConfig:
    """Immutable run configuration.

    Build it with ``from_values`` to get validation; the bare constructor
    trusts its arguments.
    """

    num_frames: int
    page_size: int
    policy: ReplacementPolicy

    @classmethod
    def from_values(
        cls,
        *,
        num_frames: int | str,
        page_size: int | str,
        policy: ReplacementPolicy | str,
    ) -> SimulationConfig:
        """Validate raw values and build a config.

        Sizes may arrive as text straight from the command line.

        Raises:
            ConfigError: If a size is not a positive integer, the frame
                count exceeds ``MAX_FRAMES``, or the policy is unknown.

        """
        num_frames = _positive_int("Number of frames", num_frames)
        if num_frames > MAX_FRAMES:
            msg = f"Number of frames must be at most {MAX_FRAMES}, got {num_frames}"
            raise ConfigError(msg)
        page_size = _positive_int("Page size", page_size)
        if not isinstance(policy, ReplacementPolicy):
            policy = parse_policy(policy)
        return cls(num_frames=num_frames, page_size=page_size, policy=policy)
