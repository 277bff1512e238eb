"""Process table collection from procfs."""

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from psstat.core.config import READER, ReaderConfig
from psstat.core.errors import EnumerationError, ParseError
from psstat.models import Process, Snapshot

logger = logging.getLogger(__name__)

# Offsets into the fields that follow the closing ")" of the name.
_PPID = 1
_UTIME = 11
_STIME = 12
# Offset into /proc/<pid>/statm.
_RSS = 1


def _read(path: Path, pid: int) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        raise ParseError(pid, "process vanished") from None
    except OSError as exc:
        raise ParseError(pid, f"cannot read {path.name}: {exc.strerror or exc}") from exc


def _coerce_float(fields: list[str], index: int) -> float:
    try:
        return float(fields[index])
    except (IndexError, ValueError):
        return 0.0


def _coerce_int(fields: list[str], index: int) -> int:
    try:
        return int(fields[index])
    except (IndexError, ValueError):
        return 0


def parse_stat(pid: int, contents: str, clock_ticks: int = READER.clock_ticks) -> Process:
    """Build a Process from the text of ``/proc/<pid>/stat``.

    The name sits between the first ``(`` and the last ``)``; it may itself
    contain spaces and parentheses, so every later field is located relative
    to the end of the name rather than by absolute column.
    """

    start = contents.find("(")
    end = contents.rfind(")")
    if start < 0 or end < start:
        raise ParseError(pid, "stat record has no name field")

    try:
        record_pid = int(contents[:start].strip())
    except ValueError:
        raise ParseError(pid, "malformed pid") from None

    fields = contents[end + 1:].split()
    try:
        parent = int(fields[_PPID])
    except (IndexError, ValueError):
        raise ParseError(pid, "malformed parent pid") from None

    return Process(
        pid=record_pid,
        name=contents[start + 1:end],
        parent=parent,
        user_time=max(0.0, _coerce_float(fields, _UTIME)) / clock_ticks,
        system_time=max(0.0, _coerce_float(fields, _STIME)) / clock_ticks,
    )


def parse_statm(contents: str, page_size: int = READER.page_size) -> int:
    """Return resident memory in bytes from the text of ``/proc/<pid>/statm``."""

    return max(0, _coerce_int(contents.split(), _RSS)) * page_size


def parse_one(pid: int, config: ReaderConfig = READER) -> Process:
    """Read one process from ``config.proc_root``.

    Raises ParseError when the process is gone or its records are unusable.
    """

    base = Path(config.proc_root) / str(pid)
    process = parse_stat(pid, _read(base / "stat", pid), config.clock_ticks)
    process.memory_used = parse_statm(_read(base / "statm", pid), config.page_size)
    return process


def _try_parse(pid: int, config: ReaderConfig) -> Process | None:
    try:
        return parse_one(pid, config)
    except ParseError as exc:
        logger.debug("Skipping process: %s", exc)
        return None


def _candidate_pids(proc_root: Path) -> list[int]:
    try:
        entries = list(os.scandir(proc_root))
    except OSError as exc:
        raise EnumerationError(f"cannot list {proc_root}: {exc}") from exc

    pids: list[int] = []
    for entry in entries:
        if not entry.name.isdecimal():
            continue
        try:
            is_dir = entry.is_dir()
        except OSError:
            continue
        pid = int(entry.name)
        if is_dir and pid > 0:
            pids.append(pid)
    return pids


def _gather_sequential(pids: list[int], config: ReaderConfig) -> list[Process | None]:
    return [_try_parse(pid, config) for pid in pids]


def _gather_concurrent(pids: list[int], config: ReaderConfig) -> list[Process | None]:
    results: list[Process | None] = []
    with ThreadPoolExecutor(max_workers=max(1, config.max_workers)) as executor:
        futures = [executor.submit(_try_parse, pid, config) for pid in pids]
        for future in as_completed(futures):
            results.append(future.result())
    return results


def enumerate_processes(config: ReaderConfig = READER) -> Snapshot:
    """Return a snapshot of every process visible under ``config.proc_root``.

    Processes that disappear or cannot be parsed while the table is being
    read are left out. Raises EnumerationError only when the root itself
    cannot be listed.
    """

    captured_at = time.time_ns()
    pids = _candidate_pids(Path(config.proc_root))
    gather = _gather_concurrent if config.concurrent else _gather_sequential

    processes: dict[int, Process] = {}
    for process in gather(pids, config):
        if process is not None:
            processes[process.pid] = process

    logger.debug("Collected %d of %d processes", len(processes), len(pids))
    return Snapshot(captured_at=captured_at, processes=processes)
