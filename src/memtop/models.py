"""Data models for memtop."""

from dataclasses import dataclass, field
from datetime import datetime


def _percent(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return part / whole * 100


@dataclass(slots=True, frozen=True)
class SystemMemoryInfo:
    """Immutable snapshot of host memory, all values in bytes."""

    total: int
    free: int
    available: int
    swap_total: int
    swap_free: int

    @property
    def used(self) -> int:
        """Memory in use, i.e. everything that is not available."""
        return max(0, self.total - self.available)

    @property
    def used_percent(self) -> float:
        return _percent(self.used, self.total)

    @property
    def swap_used(self) -> int:
        return max(0, self.swap_total - self.swap_free)

    @property
    def swap_percent(self) -> float:
        return _percent(self.swap_used, self.swap_total)


@dataclass(slots=True, frozen=True)
class ProcessSample:
    """Resident memory of one process at one poll."""

    pid: int
    name: str
    resident_bytes: int


@dataclass(slots=True, frozen=True)
class MemorySnapshot:
    """Result of one poll: system memory plus the top processes by RSS."""

    system: SystemMemoryInfo
    processes: list[ProcessSample]
    process_count: int
    taken_at: datetime = field(default_factory=datetime.now)


@dataclass(slots=True)
class DisplayConfig:
    """
    Dashboard tunables.

    update_interval: seconds between polls.
    top_processes: how many processes to keep, largest RSS first.
    """

    update_interval: float = 3.0
    top_processes: int = 10

    def __post_init__(self) -> None:
        self.update_interval = max(0.1, self.update_interval)
        self.top_processes = max(1, self.top_processes)
