"""Snapshot cache shared between consecutive runs.

The cache is a plain text file. The first line holds the time the snapshot
was captured (nanoseconds since the epoch); every following line holds one
process as ``pid,parent,user_time,system_time,memory_used``.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Callable, Collection, TypeVar

from psstat.core.config import CACHE
from psstat.core.errors import StoreWriteError
from psstat.models import Process, Snapshot

logger = logging.getLogger(__name__)

FIELD_COUNT = 5

_T = TypeVar("_T", int, float)


def _parse(value: str, kind: Callable[[str], _T]) -> _T:
    try:
        return kind(value)
    except ValueError:
        return kind("0")


def _parse_usage(value: str, kind: Callable[[str], _T]) -> _T:
    """Like _parse, but negative or non-finite usage counts as malformed."""

    number = _parse(value, kind)
    if not math.isfinite(number) or number < 0:
        return kind("0")
    return number


def format_row(process: Process) -> str:
    return "%d,%d,%f,%f,%d" % (
        process.pid,
        process.parent,
        process.user_time,
        process.system_time,
        process.memory_used,
    )


def parse_row(line: str) -> Process | None:
    """Return the process stored on ``line``, or None when the row is corrupt."""

    parts = line.split(",")
    if len(parts) != FIELD_COUNT:
        return None
    return Process(
        pid=_parse(parts[0], int),
        parent=_parse(parts[1], int),
        user_time=_parse_usage(parts[2], float),
        system_time=_parse_usage(parts[3], float),
        memory_used=_parse_usage(parts[4], int),
    )


class SnapshotCache:
    """Reads and writes the previous run's snapshot."""

    def __init__(self, path: Path = CACHE.path) -> None:
        self.path = Path(path)

    def load(self, known_pids: Collection[int]) -> Snapshot:
        """Return the cached snapshot restricted to ``known_pids``.

        A missing or unreadable file, or one without a valid header, yields an
        empty snapshot with ``captured_at == 0``.
        """

        try:
            contents = self.path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.debug("No usable cache at %s: %s", self.path, exc)
            return Snapshot()

        lines = contents.splitlines()
        if not lines:
            return Snapshot()
        try:
            captured_at = int(lines[0])
        except ValueError:
            logger.warning("Ignoring cache %s with malformed header %r", self.path, lines[0])
            return Snapshot()

        processes: dict[int, Process] = {}
        skipped = 0
        for line in lines[1:]:
            process = parse_row(line)
            if process is None:
                skipped += 1
                continue
            if process.pid in known_pids:
                processes[process.pid] = process

        if skipped:
            logger.debug("Skipped %d corrupt rows in %s", skipped, self.path)
        return Snapshot(captured_at=captured_at, processes=processes)

    def save(self, snapshot: Snapshot) -> None:
        """Replace the cache with ``snapshot``; raises StoreWriteError on failure."""

        lines = [str(int(snapshot.captured_at))]
        lines.extend(format_row(process) for process in snapshot.processes.values())
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as handle:
                handle.write("\n".join(lines) + "\n")
        except OSError as exc:
            raise StoreWriteError(f"cannot write cache {self.path}: {exc}") from exc
