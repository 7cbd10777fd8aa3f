"""Tests for the plain-text dashboard."""

from datetime import datetime

import pytest

from memtop.models import MemorySnapshot, ProcessSample, SystemMemoryInfo
from memtop.render import format_memory_size, format_process_table, format_system_stats, render_dashboard

INFO = SystemMemoryInfo(
    total=16 * 1024**3,
    free=4 * 1024**3,
    available=8 * 1024**3,
    swap_total=2 * 1024**3,
    swap_free=1024**3,
)


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (0, "0.00 B"),
        (500, "500.00 B"),
        (2048, "2.00 KB"),
        (5 * 1024**2, "5.00 MB"),
        (1536 * 1024**2, "1.00 GB"),
        (3 * 1024**4, "3.00 TB"),
        (2048 * 1024**4, "2048.00 TB"),
    ],
)
def test_format_memory_size(size, expected):
    assert format_memory_size(size) == expected


def test_format_system_stats():
    text = format_system_stats(INFO)
    assert text.startswith("System Memory:\n")
    assert "Total:     16.00 GB" in text
    assert "Used:      8.00 GB (50.0%)" in text
    assert "Available: 8.00 GB" in text
    assert "Swap Used: 1.00 GB (50.0%)" in text


def test_format_system_stats_without_swap():
    info = SystemMemoryInfo(total=1024, free=512, available=512, swap_total=0, swap_free=0)
    assert "Swap Used: 0.00 B (0.0%)" in format_system_stats(info)


def test_format_process_table_columns():
    samples = [
        ProcessSample(pid=42, name="/usr/bin/python3", resident_bytes=200 * 1024**2),
        ProcessSample(pid=123456789, name="a-very-long-process-name", resident_bytes=512),
    ]
    lines = format_process_table(samples).splitlines()
    assert lines[1] == "PID      NAME            MEMORY"
    assert lines[3] == f"{'42':<8} {'python3':<15} {'200.00 MB':>10}"
    assert lines[4].startswith("12345678 a-very-long-...")
    assert lines[4].endswith("512.00 B")
    assert len(lines[3]) == 8 + 1 + 15 + 1 + 10


def test_render_dashboard():
    snapshot = MemorySnapshot(
        system=INFO,
        processes=[ProcessSample(pid=1, name="init", resident_bytes=4096)],
        process_count=1,
        taken_at=datetime(2024, 5, 1, 12, 30, 5),
    )
    text = render_dashboard(snapshot)
    assert text.startswith("=== Memory Analyzer ===\n\n")
    assert "Top Memory Processes:\n" in text
    assert "Updated: 2024-05-01 12:30:05\n" in text
    assert text.endswith("Press Ctrl+C to exit\n")
