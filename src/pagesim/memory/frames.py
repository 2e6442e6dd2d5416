"""Frame table — the physical side of the paging simulation.

Physical memory is divided into a fixed number of **frames**, each able
to hold exactly one virtual page.  The frame table records, for every
frame, who lives there and what the hardware knows about it:

    occupied      — does the frame hold a page at all?
    owner/page    — which (process, virtual page) pair is resident.
    referenced    — set on every access; the Clock sweep clears it.
    dirty         — the page was written since it was loaded.
    load_sequence — logical time of the load; FIFO evicts the minimum.

Each frame is a tiny state machine::

    Free  --install-->  Occupied  --hit / eviction install-->  Occupied

There is no way back to Free: capacity is fixed and frames are only
ever reassigned, never vacated.

Design choices:
    - **Mutable dataclass per frame** — the engine updates flags in place
      on every access, so copying would be wasted work.
    - **FrameView snapshots** — reporters get frozen copies so nothing
      outside the engine can mutate live state.
    - **Linear scans** — frame counts are small and the scan order
      (ascending index) makes results reproducible.
"""

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass
class Frame:
    """One physical memory slot.

    When ``occupied`` is False every other field is stale and must be
    ignored.
    """

    owner_process: int | None = None
    resident_page: int | None = None
    referenced: bool = False
    dirty: bool = False
    occupied: bool = False
    load_sequence: int = 0


@dataclass(frozen=True)
class FrameView:
    """An immutable copy of one frame, for reporting."""

    index: int
    owner_process: int | None
    resident_page: int | None
    referenced: bool
    dirty: bool
    occupied: bool
    load_sequence: int


class FrameTable:
    """A fixed-length, index-ordered sequence of frames.

    All frames start free.  The table answers two questions for the
    paging engine (where is this page? where is a free slot?) and
    applies the two mutations it needs (install a page, mark an access).
    """

    def __init__(self, *, num_frames: int) -> None:
        """Create a table of ``num_frames`` free frames.

        Args:
            num_frames: Number of physical frames (must be positive).

        Raises:
            ValueError: If ``num_frames`` is not positive.

        """
        if num_frames <= 0:
            msg = f"Frame count must be positive, got {num_frames}"
            raise ValueError(msg)
        self._frames = [Frame() for _ in range(num_frames)]

    def __len__(self) -> int:
        """Return the number of frames."""
        return len(self._frames)

    def __getitem__(self, index: int) -> Frame:
        """Return the live frame at ``index``."""
        return self._frames[index]

    def __iter__(self) -> Iterator[Frame]:
        """Iterate over frames in index order."""
        return iter(self._frames)

    def find_resident(self, process: int, page: int) -> int | None:
        """Return the index of the frame holding ``(process, page)``.

        Returns:
            The first matching occupied frame, or None if the page is
            not resident.

        """
        for index, frame in enumerate(self._frames):
            if (
                frame.occupied
                and frame.owner_process == process
                and frame.resident_page == page
            ):
                return index
        return None

    def find_free(self) -> int | None:
        """Return the lowest-index unoccupied frame, or None if full."""
        for index, frame in enumerate(self._frames):
            if not frame.occupied:
                return index
        return None

    def install(
        self,
        index: int,
        process: int,
        page: int,
        *,
        write: bool,
        timestamp: int,
    ) -> bool:
        """Load ``(process, page)`` into a frame, replacing whatever was there.

        Serves both the free-frame fill and the evict-and-replace case;
        the previous contents are simply overwritten.

        Args:
            index: The target frame.
            process: The new owner.
            page: The virtual page being loaded.
            write: Whether the loading access is a write (page starts dirty).
            timestamp: Logical time of the load, recorded for FIFO.

        Returns:
            True if the overwritten frame held a dirty page, meaning a
            write-back to backing store would have happened.

        """
        frame = self._frames[index]
        wrote_back = frame.occupied and frame.dirty
        frame.owner_process = process
        frame.resident_page = page
        frame.dirty = write
        frame.referenced = True
        frame.occupied = True
        frame.load_sequence = timestamp
        return wrote_back

    def mark_referenced(self, index: int, *, write: bool) -> None:
        """Record a hit: set the reference flag, and the dirty flag on writes."""
        frame = self._frames[index]
        frame.referenced = True
        if write:
            frame.dirty = True

    def clear_reference(self, index: int) -> None:
        """Clear the reference flag (the Clock policy's second chance)."""
        self._frames[index].referenced = False

    def snapshot(self) -> list[FrameView]:
        """Return frozen copies of every frame in index order."""
        return [
            FrameView(
                index=index,
                owner_process=frame.owner_process,
                resident_page=frame.resident_page,
                referenced=frame.referenced,
                dirty=frame.dirty,
                occupied=frame.occupied,
                load_sequence=frame.load_sequence,
            )
            for index, frame in enumerate(self._frames)
        ]
