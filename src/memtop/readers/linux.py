"""Linux reader backed by the /proc pseudo-filesystem."""

import logging
from pathlib import Path

from memtop.errors import FormatError, MissingField, ProcessNotFound, SourceUnavailable
from memtop.models import SystemMemoryInfo
from memtop.parsing import is_decimal, parse_keyed_line, parse_keyed_lines

logger = logging.getLogger(__name__)

PROC_ROOT = Path("/proc")

# /proc reports these in kB.
REQUIRED_MEMINFO_FIELDS = ("MemTotal", "MemFree", "SwapTotal", "SwapFree")


class LinuxMemoryReader:
    """
    Reads memory figures from /proc.

    ``proc_root`` can point at a fake tree for testing.
    """

    def __init__(self, proc_root: Path = PROC_ROOT) -> None:
        self._proc_root = Path(proc_root)

    @property
    def proc_root(self) -> Path:
        return self._proc_root

    def get_process_list(self) -> list[int]:
        """List the digit-named directories under /proc as PIDs."""
        try:
            entries = list(self._proc_root.iterdir())
        except OSError as e:
            raise SourceUnavailable(f"cannot list {self._proc_root}: {e}") from e

        pids: list[int] = []
        for entry in entries:
            name = entry.name
            if not name or not is_decimal(name):
                continue
            try:
                if not entry.is_dir():
                    continue
            except OSError:
                # Vanished while scanning
                continue
            pid = int(name)
            if pid > 0:
                pids.append(pid)
        return pids

    def read_process_memory(self, pid: int) -> int:
        """Return VmRSS of ``pid`` in bytes."""
        status_path = self._proc_root / str(pid) / "status"
        try:
            contents = status_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise ProcessNotFound(pid, e.strerror or str(e)) from e

        for line in contents.splitlines():
            if line.startswith("VmRSS:"):
                _, rss_kb = parse_keyed_line(line)
                return rss_kb * 1024
        # Kernel threads and zombies have no VmRSS line
        raise ProcessNotFound(pid, "VmRSS not reported")

    def read_system_memory(self) -> SystemMemoryInfo:
        """
        Parse /proc/meminfo.

        MemAvailable is used when the kernel reports it (3.14+). Older kernels
        fall back to MemFree + Buffers + Cached.

        Raises:
            MissingField: If MemTotal, MemFree, SwapTotal or SwapFree is absent.
        """
        meminfo_path = self._proc_root / "meminfo"
        try:
            contents = meminfo_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise SourceUnavailable(f"cannot read {meminfo_path}: {e}") from e

        stats = parse_keyed_lines(contents)
        if not stats:
            raise FormatError(f"no fields parsed from {meminfo_path}")

        for name in REQUIRED_MEMINFO_FIELDS:
            if name not in stats:
                raise MissingField(name, str(meminfo_path))

        free = stats["MemFree"] * 1024
        if "MemAvailable" in stats:
            available = stats["MemAvailable"] * 1024
        else:
            logger.debug("MemAvailable missing, using MemFree + Buffers + Cached")
            available = free + stats.get("Buffers", 0) * 1024 + stats.get("Cached", 0) * 1024

        return SystemMemoryInfo(
            total=stats["MemTotal"] * 1024,
            free=free,
            available=available,
            swap_total=stats["SwapTotal"] * 1024,
            swap_free=stats["SwapFree"] * 1024,
        )
