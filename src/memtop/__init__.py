"""memtop - terminal memory dashboard for Linux and macOS."""

__version__ = "0.1.0"
