"""Darwin/BSD reader backed by ps, sysctl and vm_stat."""

import logging

from memtop.errors import ExternalToolFailure, FormatError, MissingField, ParseError, ProcessNotFound
from memtop.models import SystemMemoryInfo
from memtop.parsing import is_decimal, parse_keyed_lines, parse_scaled_size
from memtop.readers.base import CommandRunner, run_command

logger = logging.getLogger(__name__)

PAGE_SIZE = 4096

# Positions in "total = 2048.00M  used = 512.00M  free = 1536.00M  (encrypted)"
SWAP_TOTAL_INDEX = 2
SWAP_FREE_INDEX = 8


class DarwinMemoryReader:
    """
    Reads memory figures by running macOS command line utilities.

    All commands go through ``run`` so tests can feed canned output.
    """

    def __init__(self, run: CommandRunner = run_command) -> None:
        self._run = run

    def get_process_list(self) -> list[int]:
        """Return the PIDs printed by ``ps -e -o pid=``."""
        output = self._run(["ps", "-e", "-o", "pid="])
        pids: list[int] = []
        for line in output.splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                pid = int(line)
            except ValueError:
                logger.debug("skipping ps line %r", line)
                continue
            if pid > 0:
                pids.append(pid)
        return pids

    def read_process_memory(self, pid: int) -> int:
        """Return the RSS of ``pid`` in bytes using ``ps -p <pid> -o rss=``."""
        try:
            output = self._run(["ps", "-p", str(pid), "-o", "rss="])
        except ExternalToolFailure as e:
            # ps exits 1 when the pid does not exist
            raise ProcessNotFound(pid, str(e)) from e

        rss = output.strip()
        if not rss:
            raise ProcessNotFound(pid)
        if not is_decimal(rss):
            raise FormatError(f"unexpected rss for pid {pid}: {rss!r}")
        return int(rss) * 1024

    def read_system_memory(self) -> SystemMemoryInfo:
        total = self._read_total_memory()
        free, available = self._read_page_stats()
        swap_total, swap_free = self._read_swap_usage()
        return SystemMemoryInfo(
            total=total,
            free=free,
            available=available,
            swap_total=swap_total,
            swap_free=swap_free,
        )

    def _read_total_memory(self) -> int:
        output = self._run(["sysctl", "-n", "hw.memsize"]).strip()
        if not output:
            raise MissingField("hw.memsize", "sysctl")
        if not is_decimal(output):
            raise FormatError(f"unexpected hw.memsize value: {output!r}")
        return int(output)

    def _read_page_stats(self) -> tuple[int, int]:
        """Return (free, available) in bytes from vm_stat."""
        raw = parse_keyed_lines(self._run(["vm_stat"]))
        # "Pages free" -> "free", "File-backed pages" -> "file-backed pages"
        pages = {key.removeprefix("Pages ").lower(): value for key, value in raw.items()}

        free_pages = pages.get("free", 0) + pages.get("inactive", 0)
        available_pages = free_pages + pages.get("speculative", 0)
        # Newer macOS reports file-backed pages, older releases a cache count
        if "file-backed pages" in pages:
            available_pages += pages["file-backed pages"]
        elif "cache" in pages:
            available_pages += pages["cache"]

        return free_pages * PAGE_SIZE, available_pages * PAGE_SIZE

    def _read_swap_usage(self) -> tuple[int, int]:
        """Return (total, free) swap in bytes from ``sysctl vm.swapusage``."""
        tokens = self._run(["sysctl", "-n", "vm.swapusage"]).split()
        if len(tokens) <= SWAP_FREE_INDEX:
            raise FormatError(f"unexpected vm.swapusage output: {' '.join(tokens)!r}")
        try:
            total = parse_scaled_size(tokens[SWAP_TOTAL_INDEX])
        except ParseError as e:
            raise FormatError(f"cannot parse swap total: {e}") from e
        try:
            free = parse_scaled_size(tokens[SWAP_FREE_INDEX])
        except ParseError as e:
            raise FormatError(f"cannot parse swap free: {e}") from e
        return total, free
