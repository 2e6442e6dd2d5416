"""Memory model — the frame table and the paging engine that drives it.

Re-exports public symbols so callers can write::

    from pagesim.memory import PagingEngine, ReplacementPolicy
"""

from pagesim.memory.engine import (
    AccessResult,
    FaultIntoFree,
    FaultWithEviction,
    Hit,
    Operation,
    PagingEngine,
    ReplacementPolicy,
    RunSummary,
)
from pagesim.memory.frames import Frame, FrameTable, FrameView

__all__ = [
    "AccessResult",
    "FaultIntoFree",
    "FaultWithEviction",
    "Frame",
    "FrameTable",
    "FrameView",
    "Hit",
    "Operation",
    "PagingEngine",
    "ReplacementPolicy",
    "RunSummary",
]
