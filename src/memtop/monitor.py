"""Memory polling engine for memtop."""

import logging
import threading
from collections.abc import Callable
from queue import Queue

from memtop.errors import MemoryReaderError
from memtop.models import DisplayConfig, MemorySnapshot, ProcessSample
from memtop.names import resolve_process_name
from memtop.readers import MemoryReader

logger = logging.getLogger(__name__)


def collect_snapshot(
    reader: MemoryReader,
    top_n: int,
    resolve_name: Callable[[int], str] = resolve_process_name,
) -> MemorySnapshot:
    """
    Collect one poll: system memory plus the ``top_n`` largest processes.

    Errors reading system memory or listing processes propagate. A failure
    reading one process only drops that process.
    """
    system = reader.read_system_memory()
    pids = reader.get_process_list()

    sampled: list[tuple[int, int]] = []
    for pid in pids:
        try:
            rss = reader.read_process_memory(pid)
        except (MemoryReaderError, OSError) as e:
            logger.debug("dropping pid %d: %s", pid, e)
            continue
        sampled.append((pid, rss))

    sampled.sort(key=lambda item: (-item[1], item[0]))
    processes = [
        ProcessSample(pid=pid, name=resolve_name(pid), resident_bytes=rss)
        for pid, rss in sampled[:top_n]
    ]
    return MemorySnapshot(system=system, processes=processes, process_count=len(sampled))


class MemoryMonitor:
    """
    Polls a MemoryReader on a fixed interval.

    Runs in a separate daemon thread and pushes snapshots to a thread-safe
    Queue. A failed poll is logged and the next tick tries again.
    """

    def __init__(
        self,
        reader: MemoryReader,
        update_queue: Queue[MemorySnapshot],
        config: DisplayConfig | None = None,
        resolve_name: Callable[[int], str] = resolve_process_name,
    ) -> None:
        """
        Initialize the MemoryMonitor.

        Args:
            reader: Platform reader to poll.
            update_queue: Thread-safe queue to push snapshots to.
            config: Poll interval and top-N count.
            resolve_name: PID to display name lookup.
        """
        self._reader = reader
        self._queue = update_queue
        self._config = config or DisplayConfig()
        self._resolve_name = resolve_name
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._failed_polls = 0
        self._last_error: Exception | None = None

    @property
    def poll_rate(self) -> float:
        """Get the current poll rate."""
        return self._config.update_interval

    @poll_rate.setter
    def poll_rate(self, value: float) -> None:
        """Set the poll rate."""
        self._config.update_interval = max(0.1, value)

    @property
    def top_n(self) -> int:
        return self._config.top_processes

    @property
    def failed_polls(self) -> int:
        return self._failed_polls

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    @property
    def is_running(self) -> bool:
        """Check if the monitor thread is running."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the monitoring thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._poll_loop,
            daemon=True,
            name="MemoryMonitor",
        )
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """
        Stop the monitoring thread.

        An in-flight poll is not interrupted; the thread exits after it.

        Args:
            timeout: How long to wait for thread to stop (seconds).
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def poll_once(self) -> MemorySnapshot | None:
        """Run one poll, queue the snapshot and return it, or None on failure."""
        try:
            snapshot = collect_snapshot(self._reader, self.top_n, self._resolve_name)
        except (MemoryReaderError, OSError) as e:
            self._failed_polls += 1
            self._last_error = e
            logger.warning("poll failed: %s", e)
            return None
        self._queue.put(snapshot)
        return snapshot

    def _poll_loop(self) -> None:
        """Main polling loop running in the background thread."""
        while not self._stop_event.is_set():
            self.poll_once()
            # Wait for poll_rate seconds or until stop is requested
            self._stop_event.wait(timeout=self.poll_rate)
