"""Platform memory readers and reader selection."""

import platform

from memtop.errors import PlatformUnsupported
from memtop.readers.base import CommandRunner, MemoryReader, run_command
from memtop.readers.darwin import DarwinMemoryReader
from memtop.readers.linux import LinuxMemoryReader

__all__ = [
    "CommandRunner",
    "DarwinMemoryReader",
    "LinuxMemoryReader",
    "MemoryReader",
    "get_reader",
    "run_command",
]

_READERS = {
    "linux": LinuxMemoryReader,
    "darwin": DarwinMemoryReader,
}


def get_reader(system: str | None = None) -> MemoryReader:
    """
    Return the reader for the running operating system.

    Args:
        system: OS name as reported by platform.system(). Detected if omitted.

    Raises:
        PlatformUnsupported: If there is no reader for the platform.
    """
    if system is None:
        system = platform.system()
    reader_cls = _READERS.get(system.lower())
    if reader_cls is None:
        raise PlatformUnsupported(system)
    return reader_cls()
