"""Roll process usage up the parent/child hierarchy."""

from __future__ import annotations

from collections import defaultdict, deque
from typing import Mapping

from psstat.models import Aggregate, Process


def children_index(processes: Mapping[int, Process]) -> dict[int, list[int]]:
    """Map each parent PID to the PIDs that name it as parent."""

    index: dict[int, list[int]] = defaultdict(list)
    for pid, process in processes.items():
        if process.parent != pid:
            index[process.parent].append(pid)
    return index


def sum_resources(root: int, processes: Mapping[int, Process]) -> Aggregate:
    """Return the usage of ``root`` plus every descendant found in ``processes``.

    Descendants are found by walking the flat map breadth first, visiting each
    PID at most once, so parent links that loop back (a race while the table
    was read) cannot recurse forever and ``root`` never counts itself.
    Raises KeyError when ``root`` is not in ``processes``.
    """

    own = processes[root]
    cpu_seconds = own.cpu_time
    memory_bytes = own.memory_used
    count = 1

    index = children_index(processes)
    seen = {root}
    queue = deque(index.get(root, ()))
    while queue:
        pid = queue.popleft()
        if pid in seen:
            continue
        seen.add(pid)
        child = processes[pid]
        cpu_seconds += child.cpu_time
        memory_bytes += child.memory_used
        count += 1
        queue.extend(index.get(pid, ()))

    return Aggregate(cpu_seconds=cpu_seconds, memory_bytes=memory_bytes, process_count=count)
