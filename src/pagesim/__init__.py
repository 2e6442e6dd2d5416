"""pagesim — a virtual-memory page replacement simulator.

Feed it a trace of ``(pid, address, R|W)`` accesses, a frame count, a
page size and a policy (FIFO or Clock), and it reports every hit, fault
and eviction along with the run's totals.
"""

__version__ = "0.1.0"
