"""Exceptions raised by memtop memory readers."""


class MemoryReaderError(Exception):
    """Base class for all memory reader failures."""


class PlatformUnsupported(MemoryReaderError):
    """No reader exists for the running operating system."""

    def __init__(self, system: str) -> None:
        super().__init__(f"Unsupported operating system: {system or 'unknown'}")
        self.system = system


class MissingField(MemoryReaderError):
    """A required field is absent from a memory report."""

    def __init__(self, field: str, source: str = "") -> None:
        where = f" in {source}" if source else ""
        super().__init__(f"{field} not found{where}")
        self.field = field
        self.source = source


class FormatError(MemoryReaderError):
    """A line or token does not have the expected shape."""


class ParseError(FormatError):
    """A numeric token could not be parsed."""


class ProcessNotFound(MemoryReaderError):
    """The process exited between enumeration and inspection."""

    def __init__(self, pid: int, reason: str = "") -> None:
        message = f"process {pid} not found"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.pid = pid


class ExternalToolFailure(MemoryReaderError):
    """An external utility could not be run or exited with an error."""

    def __init__(self, command: str, reason: str) -> None:
        super().__init__(f"{command}: {reason}")
        self.command = command


class SourceUnavailable(MemoryReaderError):
    """A pseudo-file or directory could not be read."""
