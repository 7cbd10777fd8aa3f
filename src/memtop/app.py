"""memtop - Textual dashboard application."""

from enum import Enum
from queue import Empty, Queue

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.widgets import DataTable, Footer, Static

from memtop.models import DisplayConfig, MemorySnapshot, ProcessSample, SystemMemoryInfo
from memtop.monitor import MemoryMonitor
from memtop.names import short_process_name
from memtop.readers import MemoryReader


class SortKey(Enum):
    """Sort keys for the process table."""

    MEM = "mem"
    PID = "pid"
    NAME = "name"


def format_bytes(size: int) -> str:
    """Format bytes as human-readable string."""
    for unit in ["B", "K", "M", "G", "T"]:
        if size < 1024:
            return f"{size:5.1f}{unit}" if unit != "B" else f"{size:5d}{unit}"
        size = size / 1024
    return f"{size:.1f}P"


def usage_bar(percent: float, color: str, width: int = 20) -> str:
    """Return a markup bar filled to ``percent``."""
    filled = min(max(int(percent / (100 / width)), 0), width)
    return f"[{color}]█[/{color}]" * filled + "[dim]░[/dim]" * (width - filled)


class HeaderStats(Static):
    """Header widget showing memory and swap statistics."""

    DEFAULT_CSS = """
    HeaderStats {
        height: auto;
        min-height: 5;
        padding: 1;
        background: $surface;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize HeaderStats."""
        super().__init__(*args, **kwargs)
        self._system: SystemMemoryInfo | None = None
        self._process_count: int = 0
        self._updated: str = ""
        self._error: str = ""

    @property
    def system(self) -> SystemMemoryInfo | None:
        return self._system

    def compose(self) -> ComposeResult:
        """Compose the header stats layout."""
        yield Horizontal(
            Static(self._get_mem_info(), id="mem-info"),
            Static(self._get_status_info(), id="status-info"),
        )

    def update_stats(self, snapshot: MemorySnapshot) -> None:
        """Update the statistics from a memory snapshot."""
        self._system = snapshot.system
        self._process_count = snapshot.process_count
        self._updated = f"{snapshot.taken_at:%Y-%m-%d %H:%M:%S}"
        self._error = ""
        self._refresh_display()

    def show_error(self, message: str) -> None:
        """Show the last failed poll without discarding the previous figures."""
        self._error = message
        self._refresh_display()

    def _refresh_display(self) -> None:
        try:
            self.query_one("#mem-info", Static).update(self._get_mem_info())
            self.query_one("#status-info", Static).update(self._get_status_info())
        except Exception:
            pass  # Widget not mounted yet

    def _get_mem_info(self) -> str:
        """Get memory info display."""
        info = self._system
        if info is None:
            return "Loading memory info..."

        gib = 1024**3
        return (
            f"Mem\\[{usage_bar(info.used_percent, 'cyan')}] "
            f"{info.used / gib:.1f}G/{info.total / gib:.1f}G ({info.used_percent:.1f}%)\n"
            f"Swp\\[{usage_bar(info.swap_percent, 'yellow')}] "
            f"{info.swap_used / gib:.1f}G/{info.swap_total / gib:.1f}G ({info.swap_percent:.1f}%)\n"
            f"Available: {format_bytes(info.available).strip()}  Free: {format_bytes(info.free).strip()}"
        )

    def _get_status_info(self) -> str:
        lines = []
        if self._updated:
            lines.append(f"Processes: {self._process_count}")
            lines.append(f"Updated: {self._updated}")
        if self._error:
            lines.append(f"[red]Error: {self._error}[/red]")
        return "\n".join(lines)


class ProcessTable(Container):
    """Container for the process data table."""

    DEFAULT_CSS = """
    ProcessTable {
        height: 1fr;
        border: solid $primary;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize ProcessTable."""
        super().__init__(*args, **kwargs)
        self._sort_key: SortKey = SortKey.MEM
        self._sort_reverse: bool = True
        self._total_memory: int = 0

    @property
    def sort_key(self) -> SortKey:
        """Get current sort key."""
        return self._sort_key

    def cycle_sort(self) -> SortKey:
        """Cycle to the next sort key and return it."""
        keys = list(SortKey)
        next_index = (keys.index(self._sort_key) + 1) % len(keys)
        self._sort_key = keys[next_index]
        self._sort_reverse = self._sort_key is SortKey.MEM
        return self._sort_key

    def compose(self) -> ComposeResult:
        """Compose the process table."""
        yield DataTable(id="process-table")

    def on_mount(self) -> None:
        """Initialize the data table when mounted."""
        table = self.query_one("#process-table", DataTable)
        table.cursor_type = "row"
        table.add_column("PID", key="pid", width=8)
        table.add_column("NAME", key="name", width=16)
        table.add_column("RES", key="rss", width=8)
        table.add_column("MEM%", key="mem", width=8)

    def update_processes(self, processes: list[ProcessSample], total_memory: int = 0) -> None:
        """
        Replace the table contents with new samples.

        The table is rebuilt in sorted order since the top-N set changes
        between polls.
        """
        self._total_memory = total_memory
        table = self.query_one("#process-table", DataTable)
        table.clear()
        sorted_processes = self._sort_processes(processes)
        for proc in sorted_processes:
            self._add_row(table, proc)

    def _sort_processes(self, processes: list[ProcessSample]) -> list[ProcessSample]:
        """Sort processes based on the current sort key."""
        key_func = {
            SortKey.MEM: lambda p: p.resident_bytes,
            SortKey.PID: lambda p: p.pid,
            SortKey.NAME: lambda p: p.name.lower(),
        }
        return sorted(processes, key=key_func[self._sort_key], reverse=self._sort_reverse)

    def _mem_percent(self, proc: ProcessSample) -> float:
        if self._total_memory <= 0:
            return 0.0
        return proc.resident_bytes / self._total_memory * 100

    def _add_row(self, table: DataTable, proc: ProcessSample) -> None:
        try:
            table.add_row(
                str(proc.pid),
                short_process_name(proc.name),
                format_bytes(proc.resident_bytes),
                f"{self._mem_percent(proc):5.1f}",
                key=str(proc.pid),
            )
        except Exception:
            pass  # Duplicate pid in one snapshot


class MemtopApp(App):
    """Main memtop application."""

    TITLE = "memtop"
    SUB_TITLE = "Memory Dashboard"

    CSS = """
    Screen {
        layout: vertical;
    }

    #header-stats {
        dock: top;
        height: auto;
        min-height: 5;
    }

    Horizontal {
        height: auto;
    }

    #mem-info {
        width: 2fr;
        padding-right: 2;
    }

    #status-info {
        width: 1fr;
        padding-left: 2;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("f6", "sort", "Sort"),
    ]

    def __init__(self, reader: MemoryReader, config: DisplayConfig | None = None) -> None:
        """Initialize the MemtopApp."""
        super().__init__()
        self._update_queue: Queue[MemorySnapshot] = Queue()
        self._monitor = MemoryMonitor(reader, self._update_queue, config)
        self._seen_failures = 0

    @property
    def monitor(self) -> MemoryMonitor:
        return self._monitor

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield HeaderStats(id="header-stats")
        yield ProcessTable()
        yield Footer()

    def on_mount(self) -> None:
        """Start the memory monitor when the app is mounted."""
        self._monitor.start()
        self.set_interval(0.5, self._check_for_updates)

    def on_unmount(self) -> None:
        self._monitor.stop()

    def _check_for_updates(self) -> None:
        """Drain the queue and show the most recent snapshot."""
        snapshot = None
        while True:
            try:
                snapshot = self._update_queue.get_nowait()
            except Empty:
                break

        if snapshot is not None:
            self._seen_failures = self._monitor.failed_polls
            self._update_ui(snapshot)
        elif self._monitor.failed_polls != self._seen_failures:
            self._seen_failures = self._monitor.failed_polls
            try:
                self.query_one("#header-stats", HeaderStats).show_error(str(self._monitor.last_error))
            except Exception:
                pass

    def _update_ui(self, snapshot: MemorySnapshot) -> None:
        """Update the UI with a new snapshot."""
        try:
            self.query_one("#header-stats", HeaderStats).update_stats(snapshot)
        except Exception:
            pass

        try:
            self.query_one(ProcessTable).update_processes(snapshot.processes, snapshot.system.total)
        except Exception:
            pass

    def action_sort(self) -> None:
        """Handle sort action - cycle through sort keys."""
        try:
            process_table = self.query_one(ProcessTable)
            new_sort_key = process_table.cycle_sort()
            self.notify(f"Sort: {new_sort_key.value.upper()}")
        except Exception:
            pass

    def action_quit(self) -> None:
        """Handle quit action with graceful cleanup."""
        self._monitor.stop()
        self.exit()
