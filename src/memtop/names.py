"""Process name lookup and display shortening."""

import os

import psutil

MAX_NAME_LENGTH = 15


def resolve_process_name(pid: int) -> str:
    """Return the process name for ``pid``, or ``process-<pid>`` if unknown."""
    try:
        name = psutil.Process(pid).name()
    except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
        name = ""
    return name or f"process-{pid}"


def short_process_name(full_name: str) -> str:
    """
    Shorten a process name for the dashboard.

    Drops the directory, macOS ``.app`` bundle suffixes and Electron style
    ``-helper`` suffixes, then truncates long names with ``...``.
    """
    name = os.path.basename(full_name).strip()
    if name.endswith(".app"):
        name = name[: -len(".app")]
    elif ".app" in name:
        name = name[: name.index(".app")]
    name = name.removesuffix("-helper (Renderer)")
    name = name.removesuffix("-helper")
    if len(name) > MAX_NAME_LENGTH:
        name = name[:12] + "..."
    return name
