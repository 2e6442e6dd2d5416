"""Trace input — turning text lines into access records.

A trace is plain text, one access per line::

    <pid> <virtual address> <R|W>

    1 0 R
    1 4096 W
    # comments and blank lines are ignored
    2 128 R

Malformed lines do not stop a run.  Each one is reported as a WARNING
in the log (with its line number) and skipped, so a long trace with a
few bad records still produces a result.  Operation letters are
upper case only; ``r`` or ``w`` is a malformed line.  Only an unreadable
file is fatal.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from pagesim.config import ConfigError
from pagesim.memory.engine import Operation

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pagesim.logging import Logger

_SOURCE = "trace"
_FIELD_COUNT = 3
_COMMENT = "#"


class TraceFormatError(Exception):
    """Raise when a single trace line cannot be parsed."""


@dataclass(frozen=True)
class AccessRecord:
    """One memory access from the trace."""

    process: int
    address: int
    operation: Operation


def parse_line(text: str) -> AccessRecord | None:
    """Parse one trace line.

    Args:
        text: The raw line.

    Returns:
        The access record, or None for a blank or comment line.

    Raises:
        TraceFormatError: If the line is not ``pid address R|W``.

    """
    stripped = text.strip()
    if not stripped or stripped.startswith(_COMMENT):
        return None

    fields = stripped.split()
    if len(fields) != _FIELD_COUNT:
        msg = f"Expected {_FIELD_COUNT} fields, got {len(fields)}: {stripped!r}"
        raise TraceFormatError(msg)

    pid_text, address_text, op_text = fields
    try:
        process = int(pid_text)
        address = int(address_text)
    except ValueError:
        msg = f"Process id and address must be integers: {stripped!r}"
        raise TraceFormatError(msg) from None
    if address < 0:
        msg = f"Address must be non-negative, got {address}"
        raise TraceFormatError(msg)

    try:
        operation = Operation(op_text)
    except ValueError:
        msg = f"Invalid operation {op_text!r} (use R or W)"
        raise TraceFormatError(msg) from None

    return AccessRecord(process=process, address=address, operation=operation)


def read_trace(lines: Iterable[str], *, logger: Logger | None = None) -> list[AccessRecord]:
    """Parse every line, skipping (and logging) the malformed ones.

    Args:
        lines: The trace text, one line per item.
        logger: Where to record skipped lines.

    Returns:
        The valid records in trace order.

    """
    records: list[AccessRecord] = []
    for lineno, line in enumerate(lines, start=1):
        try:
            record = parse_line(line)
        except TraceFormatError as exc:
            if logger is not None:
                logger.warning(f"Line {lineno} skipped: {exc}", source=_SOURCE)
            continue
        if record is not None:
            records.append(record)
    return records


def load_trace(path: str | Path, *, logger: Logger | None = None) -> list[AccessRecord]:
    """Read and parse a trace file.

    Raises:
        ConfigError: If the file cannot be read.

    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read trace file {str(path)!r}: {exc.strerror or exc}"
        raise ConfigError(msg) from exc
    except UnicodeDecodeError as exc:
        msg = f"Trace file {str(path)!r} is not UTF-8 text"
        raise ConfigError(msg) from exc
    return read_trace(text.split("\n"), logger=logger)
