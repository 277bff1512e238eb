from __future__ import annotations

from pathlib import Path

import pytest

from psstat.core.config import ReaderConfig


def stat_line(pid: int, name: str, ppid: int, utime: int | str = 0, stime: int | str = 0) -> str:
    # pid (comm) state ppid pgrp session tty tpgid flags minflt cminflt majflt cmajflt utime stime ...
    return (
        f"{pid} ({name}) S {ppid} {pid} {pid} 0 -1 4194560 100 0 0 0 "
        f"{utime} {stime} 0 0 20 0 1 0 12345 1000000 250 18446744073709551615\n"
    )


class FakeProc:
    """Builds a procfs-like directory tree under ``root``."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def add(
        self,
        pid: int,
        name: str = "proc",
        ppid: int = 0,
        utime: int | str = 0,
        stime: int | str = 0,
        rss: int | str = 0,
        statm: str | None = None,
    ) -> Path:
        directory = self.root / str(pid)
        directory.mkdir()
        (directory / "stat").write_text(stat_line(pid, name, ppid, utime, stime))
        if statm is None:
            statm = f"1000 {rss} 50 10 0 200 0\n"
        (directory / "statm").write_text(statm)
        return directory

    def config(self, **kwargs) -> ReaderConfig:
        return ReaderConfig(proc_root=self.root, page_size=4096, **kwargs)


@pytest.fixture
def fake_proc(tmp_path) -> FakeProc:
    return FakeProc(tmp_path / "proc")
