"""Paging engine — address translation, fault handling and page replacement.

Every memory access goes through the same pipeline:

    1. **Translate** — split the virtual address into (page, offset).
    2. **Look up** — is ``(process, page)`` already in some frame?
    3. **Hit** — yes: mark the frame referenced (and dirty on writes).
    4. **Fault** — no: load the page into the first free frame, or, when
       memory is full, ask the replacement policy for a **victim** and
       load the page over it.  Evicting a dirty victim costs a
       **write-back**.

Replacement policies:
    - **FIFO** — evict the page that was loaded earliest.  Every frame
      remembers the logical time of its load, so the victim is simply
      the minimum ``load_sequence``.
    - **Clock** — second chance.  A hand sweeps the frames in a circle;
      a referenced frame gets its flag cleared and is skipped, the first
      unreferenced frame is evicted.  After one full sweep every flag is
      clear, so the search never needs more than two passes.

Only two fixed policies exist, so the choice is an enum dispatched with
``match`` at the single place a victim is needed rather than a class
hierarchy.  Victim selection is reachable only after ``find_free`` has
failed, which is what guarantees the table is full whenever a policy
runs.

The engine is strictly sequential: FIFO order and Clock's second
chances both depend on the order accesses arrive in.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from pagesim.logging import LogLevel
from pagesim.memory.frames import FrameTable, FrameView

if TYPE_CHECKING:
    from pagesim.logging import Logger

_SOURCE = "engine"


class ReplacementPolicy(StrEnum):
    """The page replacement algorithm used when memory is full."""

    FIFO = "fifo"
    CLOCK = "clock"


class Operation(StrEnum):
    """The kind of memory access, as written in a trace."""

    READ = "R"
    WRITE = "W"

    @property
    def is_write(self) -> bool:
        """Return True for writes (which dirty the page)."""
        return self is Operation.WRITE


# -- Access outcomes ------------------------------------------------------------


@dataclass(frozen=True)
class Hit:
    """The page was already resident in ``frame_index``."""

    process: int
    address: int
    page: int
    offset: int
    frame_index: int
    operation: Operation


@dataclass(frozen=True)
class FaultIntoFree:
    """The page was missing and was loaded into a free frame."""

    process: int
    address: int
    page: int
    offset: int
    frame_index: int
    operation: Operation


@dataclass(frozen=True)
class FaultWithEviction:
    """The page was missing, memory was full, and a victim was replaced.

    Attributes:
        evicted_process: Owner of the page that was thrown out.
        evicted_page: The virtual page that was thrown out.
        wrote_back: True if the victim was dirty.

    """

    process: int
    address: int
    page: int
    offset: int
    frame_index: int
    operation: Operation
    evicted_process: int
    evicted_page: int
    wrote_back: bool


AccessResult = Hit | FaultIntoFree | FaultWithEviction


@dataclass(frozen=True)
class RunSummary:
    """Counters reported at the end of a run."""

    policy_name: str
    total_accesses: int
    total_faults: int
    total_hits: int
    total_writebacks: int

    @property
    def hit_rate(self) -> float:
        """Return hits as a fraction of accesses (0.0 for an empty run)."""
        if self.total_accesses == 0:
            return 0.0
        return self.total_hits / self.total_accesses

    @property
    def fault_rate(self) -> float:
        """Return faults as a fraction of accesses (0.0 for an empty run)."""
        if self.total_accesses == 0:
            return 0.0
        return self.total_faults / self.total_accesses


# -- Engine ---------------------------------------------------------------------


class PagingEngine:
    """Drive accesses one at a time against a private frame table.

    Args:
        num_frames: Number of physical frames.
        page_size: Bytes per page.
        policy: The replacement algorithm, fixed for the run.
        logger: Optional log to record evictions and write-backs in.

    """

    def __init__(
        self,
        *,
        num_frames: int,
        page_size: int,
        policy: ReplacementPolicy,
        logger: Logger | None = None,
    ) -> None:
        """Create an engine with every frame free and every counter at zero."""
        if page_size <= 0:
            msg = f"Page size must be positive, got {page_size}"
            raise ValueError(msg)
        self._table = FrameTable(num_frames=num_frames)
        self._page_size = page_size
        self._policy = policy
        self._logger = logger

        self._clock = 0
        self._hand = 0

        self._accesses = 0
        self._hits = 0
        self._faults = 0
        self._writebacks = 0

    @property
    def policy(self) -> ReplacementPolicy:
        """Return the replacement policy in use."""
        return self._policy

    @property
    def page_size(self) -> int:
        """Return the page size in bytes."""
        return self._page_size

    @property
    def num_frames(self) -> int:
        """Return the number of physical frames."""
        return len(self._table)

    @property
    def clock_hand(self) -> int:
        """Return the frame index the Clock hand currently points at."""
        return self._hand

    @property
    def accesses(self) -> int:
        """Return the number of accesses processed so far."""
        return self._accesses

    @property
    def hits(self) -> int:
        """Return the number of hits so far."""
        return self._hits

    @property
    def faults(self) -> int:
        """Return the number of page faults so far."""
        return self._faults

    @property
    def writebacks(self) -> int:
        """Return the number of dirty pages evicted so far."""
        return self._writebacks

    def translate(self, virtual_address: int) -> tuple[int, int]:
        """Split a virtual address into ``(page, offset)``."""
        return divmod(virtual_address, self._page_size)

    def frames(self) -> list[FrameView]:
        """Return a snapshot of the frame table."""
        return self._table.snapshot()

    def summary(self) -> RunSummary:
        """Return the run counters so far."""
        return RunSummary(
            policy_name=str(self._policy),
            total_accesses=self._accesses,
            total_faults=self._faults,
            total_hits=self._hits,
            total_writebacks=self._writebacks,
        )

    def process_access(
        self,
        process: int,
        virtual_address: int,
        operation: Operation,
    ) -> AccessResult:
        """Resolve one memory access.

        Args:
            process: The accessing process id.
            virtual_address: The address within that process's space.
            operation: Read or write.

        Returns:
            A ``Hit``, ``FaultIntoFree`` or ``FaultWithEviction``.

        """
        page, offset = self.translate(virtual_address)
        write = operation.is_write

        self._clock += 1
        self._accesses += 1

        resident = self._table.find_resident(process, page)
        if resident is not None:
            self._hits += 1
            self._table.mark_referenced(resident, write=write)
            return Hit(
                process=process,
                address=virtual_address,
                page=page,
                offset=offset,
                frame_index=resident,
                operation=operation,
            )

        self._faults += 1

        free = self._table.find_free()
        if free is not None:
            self._install(free, process, page, write=write)
            return FaultIntoFree(
                process=process,
                address=virtual_address,
                page=page,
                offset=offset,
                frame_index=free,
                operation=operation,
            )

        victim = self._select_victim()
        frame = self._table[victim]
        # A full table means every frame is occupied, so both are set.
        evicted_process = frame.owner_process
        evicted_page = frame.resident_page
        assert evicted_process is not None  # noqa: S101
        assert evicted_page is not None  # noqa: S101
        self._log(
            LogLevel.DEBUG,
            f"Evicting page {evicted_page} (PID {evicted_process}) from frame {victim}",
        )
        wrote_back = self._install(victim, process, page, write=write)
        return FaultWithEviction(
            process=process,
            address=virtual_address,
            page=page,
            offset=offset,
            frame_index=victim,
            operation=operation,
            evicted_process=evicted_process,
            evicted_page=evicted_page,
            wrote_back=wrote_back,
        )

    def _install(self, index: int, process: int, page: int, *, write: bool) -> bool:
        """Install a page and account for a dirty overwrite."""
        wrote_back = self._table.install(
            index, process, page, write=write, timestamp=self._clock
        )
        if wrote_back:
            self._writebacks += 1
            self._log(LogLevel.INFO, f"Write-back of dirty frame {index}")
        return wrote_back

    def _select_victim(self) -> int:
        """Pick the frame to evict.  Only called when the table is full."""
        match self._policy:
            case ReplacementPolicy.FIFO:
                return self._select_fifo()
            case ReplacementPolicy.CLOCK:
                return self._select_clock()

    def _select_fifo(self) -> int:
        """Return the frame whose page was loaded earliest."""
        return min(
            range(len(self._table)),
            key=lambda index: self._table[index].load_sequence,
        )

    def _select_clock(self) -> int:
        """Sweep the hand, clearing reference flags, until a victim appears."""
        size = len(self._table)
        for _ in range(size):
            index = self._hand
            self._hand = (self._hand + 1) % size
            if not self._table[index].referenced:
                return index
            self._table.clear_reference(index)
        # One full sweep cleared every flag and brought the hand back to
        # where it started, so that frame is the victim.
        index = self._hand
        self._hand = (self._hand + 1) % size
        return index

    def _log(self, level: LogLevel, message: str) -> None:
        if self._logger is not None:
            self._logger.log(level, message, source=_SOURCE)
