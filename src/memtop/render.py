"""Plain-text dashboard rendering."""

from memtop.models import MemorySnapshot, ProcessSample, SystemMemoryInfo
from memtop.names import short_process_name

_UNITS = ["B", "KB", "MB", "GB", "TB"]


def format_memory_size(size: int) -> str:
    """Format bytes as e.g. ``512.00 MB``."""
    index = 0
    while size >= 1024 and index < len(_UNITS) - 1:
        size //= 1024
        index += 1
    return f"{float(size):.2f} {_UNITS[index]}"


def format_system_stats(info: SystemMemoryInfo) -> str:
    lines = [
        "System Memory:",
        f"Total:     {format_memory_size(info.total)}",
        f"Used:      {format_memory_size(info.used)} ({info.used_percent:.1f}%)",
        f"Available: {format_memory_size(info.available)}",
        f"Swap Used: {format_memory_size(info.swap_used)} ({info.swap_percent:.1f}%)",
    ]
    return "\n".join(lines) + "\n"


def format_process_table(processes: list[ProcessSample]) -> str:
    lines = [
        "Process List:",
        "PID      NAME            MEMORY",
        "-" * 32,
    ]
    for proc in processes:
        pid = str(proc.pid)[:8]
        name = short_process_name(proc.name)[:15]
        memory = format_memory_size(proc.resident_bytes)[:10]
        lines.append(f"{pid:<8} {name:<15} {memory:>10}")
    return "\n".join(lines) + "\n"


def render_dashboard(snapshot: MemorySnapshot) -> str:
    """Render a full dashboard frame."""
    return (
        "=== Memory Analyzer ===\n\n"
        + format_system_stats(snapshot.system)
        + "\n"
        + "Top Memory Processes:\n"
        + format_process_table(snapshot.processes)
        + "\n"
        + f"Updated: {snapshot.taken_at:%Y-%m-%d %H:%M:%S}\n"
        + "Press Ctrl+C to exit\n"
    )
