from __future__ import annotations

import pytest

from psstat.cache import SnapshotCache, parse_row
from psstat.core.errors import StoreWriteError
from psstat.models import Process, Snapshot


def _snapshot() -> Snapshot:
    return Snapshot(
        captured_at=1_700_000_000_123_456_789,
        processes={
            1: Process(pid=1, name="init", parent=0, user_time=10.25, system_time=5.5, memory_used=4096),
            20: Process(pid=20, name="sh", parent=1, user_time=0.01, system_time=0.0, memory_used=0),
            31: Process(pid=31, name="cat", parent=20, user_time=123.456789, system_time=7.0, memory_used=81920),
        },
    )


def test_round_trip(tmp_path):
    cache = SnapshotCache(tmp_path / "cache")
    original = _snapshot()
    cache.save(original)

    loaded = cache.load(original.pids())
    assert loaded.captured_at == original.captured_at
    assert set(loaded.processes) == set(original.processes)
    for pid, proc in original.processes.items():
        restored = loaded.processes[pid]
        assert restored.pid == proc.pid
        assert restored.parent == proc.parent
        assert restored.user_time == pytest.approx(proc.user_time, abs=1e-6)
        assert restored.system_time == pytest.approx(proc.system_time, abs=1e-6)
        assert restored.memory_used == proc.memory_used


def test_file_layout(tmp_path):
    path = tmp_path / "cache"
    SnapshotCache(path).save(Snapshot(captured_at=99, processes={7: Process(pid=7, parent=1, user_time=1.5, memory_used=10)}))
    assert path.read_text() == "99\n7,1,1.500000,0.000000,10\n"


def test_save_creates_directory(tmp_path):
    cache = SnapshotCache(tmp_path / "nested" / "dir" / "psstat")
    cache.save(_snapshot())
    assert cache.path.exists()


def test_save_failure_raises(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")
    with pytest.raises(StoreWriteError):
        SnapshotCache(blocker / "cache").save(_snapshot())


def test_missing_file_is_empty(tmp_path):
    loaded = SnapshotCache(tmp_path / "missing").load({1, 2})
    assert loaded.captured_at == 0
    assert loaded.processes == {}


@pytest.mark.parametrize("contents", ["", "not-a-time\n1,0,1.0,1.0,1\n", "\n1,0,1.0,1.0,1\n"])
def test_bad_header_is_empty(tmp_path, contents):
    path = tmp_path / "cache"
    path.write_text(contents)
    loaded = SnapshotCache(path).load({1})
    assert loaded.captured_at == 0
    assert loaded.processes == {}


def test_header_only(tmp_path):
    path = tmp_path / "cache"
    path.write_text("12345\n")
    loaded = SnapshotCache(path).load({1, 2, 3})
    assert loaded.captured_at == 12345
    assert loaded.processes == {}


def test_stale_and_corrupt_rows_are_dropped(tmp_path):
    path = tmp_path / "cache"
    path.write_text(
        "500\n"
        "1,0,1.0,2.0,300\n"
        "2,1,1.0,2.0\n"  # too few fields
        "3,1,1.0,2.0,4,extra\n"  # too many fields
        "4,1,x,2.0,y\n"  # bad numbers default to zero
        "99,1,1.0,1.0,1\n"  # no longer running
        "garbage,1,1.0,1.0,1\n"
        "\n"
    )
    loaded = SnapshotCache(path).load({1, 2, 3, 4})
    assert sorted(loaded.processes) == [1, 4]
    assert loaded.processes[1].system_time == pytest.approx(2.0)
    assert loaded.processes[4].user_time == 0.0
    assert loaded.processes[4].system_time == pytest.approx(2.0)
    assert loaded.processes[4].memory_used == 0


def test_unparsable_pid_becomes_zero():
    row = parse_row("abc,1,1.0,1.0,1")
    assert row is not None
    assert row.pid == 0


@pytest.mark.parametrize(
    "row",
    [
        "1,0,-3.5,-1.0,-4096",
        "1,0,nan,inf,0",
        "1,0,-inf,NaN,0",
    ],
)
def test_negative_and_non_finite_usage_defaults_to_zero(tmp_path, row):
    path = tmp_path / "cache"
    path.write_text(f"5\n{row}\n")
    loaded = SnapshotCache(path).load({1})
    restored = loaded.processes[1]
    assert restored.user_time == 0.0
    assert restored.system_time == 0.0
    assert restored.memory_used == 0


def test_valid_usage_survives_next_to_bad_field():
    row = parse_row("7,1,2.5,-1,4096")
    assert row is not None
    assert row.user_time == pytest.approx(2.5)
    assert row.system_time == 0.0
    assert row.memory_used == 4096
