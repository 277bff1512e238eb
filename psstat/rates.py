"""Turn two snapshots into CPU and memory usage figures."""

from __future__ import annotations

from psstat.aggregate import sum_resources
from psstat.models import Aggregate, Measurement, Snapshot

NANOSECONDS = 1_000_000_000


def elapsed_seconds(current_ns: int, previous_ns: int) -> float:
    return (current_ns - previous_ns) / NANOSECONDS


def cpu_percent(
    current_total: float,
    previous_total: float,
    elapsed: float,
    core_count: float,
) -> float:
    """CPU usage over ``elapsed`` seconds.

    The elapsed time is scaled by the core count and the result multiplied by
    it again, which cancels out; kept as is so figures stay comparable with
    earlier releases.
    """

    delta_time = elapsed * core_count
    if delta_time <= 0:
        return 0.0
    return (current_total - previous_total) / delta_time * core_count


def mem_percent(memory_bytes: int, total_memory_bytes: int) -> float:
    if total_memory_bytes <= 0:
        return 0.0
    return memory_bytes / total_memory_bytes


def previous_cpu_seconds(pid: int, current: Aggregate, previous: Snapshot) -> float:
    """CPU seconds of ``pid`` at the previous run.

    A process missing from the previous snapshot (new, or first run) uses its
    current total, which gives a zero delta instead of a spike.
    """

    if pid in previous:
        return sum_resources(pid, previous.processes).cpu_seconds
    return current.cpu_seconds


def measure(
    pid: int,
    current: Snapshot,
    previous: Snapshot,
    total_memory_bytes: int,
    core_count: int,
) -> Measurement:
    totals = sum_resources(pid, current.processes)
    before = previous_cpu_seconds(pid, totals, previous)
    elapsed = elapsed_seconds(current.captured_at, previous.captured_at)
    return Measurement(
        pid=pid,
        cpu_percent=cpu_percent(totals.cpu_seconds, before, elapsed, core_count),
        mem_percent=mem_percent(totals.memory_bytes, total_memory_bytes),
        process_count=totals.process_count,
    )
