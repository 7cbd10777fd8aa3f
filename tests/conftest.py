"""Shared fixtures for memtop tests."""

from pathlib import Path

import pytest

from memtop.errors import ProcessNotFound
from memtop.models import SystemMemoryInfo

MEMINFO = """\
MemTotal:       16777216 kB
MemFree:         4194304 kB
MemAvailable:    9437184 kB
Buffers:         1048576 kB
Cached:          2097152 kB
SwapCached:            0 kB
SwapTotal:       8388608 kB
SwapFree:        7340032 kB
HugePages_Total:       0
Hugepagesize:       2048 kB
"""


def status_text(name: str, rss_kb: int | None) -> str:
    lines = [f"Name:\t{name}", "State:\tS (sleeping)", "VmPeak:\t  123456 kB"]
    if rss_kb is not None:
        lines.append(f"VmRSS:\t{rss_kb:>8} kB")
    lines.append("Threads:\t1")
    return "\n".join(lines) + "\n"


@pytest.fixture
def proc_root(tmp_path: Path) -> Path:
    """A fake /proc tree with three processes and some non-pid entries."""
    root = tmp_path / "proc"
    root.mkdir()
    (root / "meminfo").write_text(MEMINFO)
    for pid, name, rss in [(1, "init", 1024), (42, "python", 204800), (300, "kworker/0:1", None)]:
        (root / str(pid)).mkdir()
        (root / str(pid) / "status").write_text(status_text(name, rss))
    (root / "self").mkdir()
    (root / "net").mkdir()
    (root / "0").mkdir()
    (root / "uptime").write_text("123.45 67.89\n")
    return root


class FakeReader:
    """In-memory MemoryReader."""

    def __init__(self, rss: dict[int, int], system: SystemMemoryInfo | None = None) -> None:
        self.rss = rss
        self.system = system or SystemMemoryInfo(
            total=16 * 1024**3,
            free=4 * 1024**3,
            available=8 * 1024**3,
            swap_total=2 * 1024**3,
            swap_free=1024**3,
        )
        self.fail_system: Exception | None = None
        self.system_calls = 0

    def read_system_memory(self) -> SystemMemoryInfo:
        self.system_calls += 1
        if self.fail_system is not None:
            raise self.fail_system
        return self.system

    def get_process_list(self) -> list[int]:
        return list(self.rss) + [9999]

    def read_process_memory(self, pid: int) -> int:
        if pid not in self.rss:
            raise ProcessNotFound(pid)
        return self.rss[pid]


@pytest.fixture
def fake_reader() -> FakeReader:
    return FakeReader({1: 10 * 1024**2, 2: 300 * 1024**2, 3: 50 * 1024**2, 4: 50 * 1024**2})
