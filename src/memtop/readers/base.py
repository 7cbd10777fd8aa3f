"""Reader protocol and the command runner used by command-driven readers."""

import logging
import subprocess
from collections.abc import Callable, Sequence
from typing import Protocol

from memtop.errors import ExternalToolFailure
from memtop.models import SystemMemoryInfo

logger = logging.getLogger(__name__)

# Takes argv, returns the command's stdout.
CommandRunner = Callable[[Sequence[str]], str]


class MemoryReader(Protocol):
    """Platform memory introspection used by the monitor."""

    def read_system_memory(self) -> SystemMemoryInfo:
        """Return total, free, available and swap figures for the host."""
        ...

    def get_process_list(self) -> list[int]:
        """Return the PIDs of all running processes."""
        ...

    def read_process_memory(self, pid: int) -> int:
        """Return the resident memory of ``pid`` in bytes."""
        ...


def run_command(args: Sequence[str], timeout: float | None = None) -> str:
    """
    Run a read-only utility and return its stdout.

    Args:
        args: Command and arguments.
        timeout: Seconds to wait before giving up. None waits forever.

    Raises:
        ExternalToolFailure: If the command cannot be started, times out or
            exits with a non-zero status.
    """
    command = " ".join(args)
    logger.debug("running %s", command)
    try:
        result = subprocess.run(
            list(args),
            capture_output=True,
            text=True,
            errors="replace",
            check=True,
            timeout=timeout,
        )
    except subprocess.CalledProcessError as e:
        raise ExternalToolFailure(command, f"exit status {e.returncode}") from e
    except subprocess.TimeoutExpired as e:
        raise ExternalToolFailure(command, f"timed out after {timeout}s") from e
    except OSError as e:
        raise ExternalToolFailure(command, str(e)) from e
    return result.stdout
