"""
memtop command line entry point.

Without options the Textual dashboard is started. ``--plain`` prints a text
dashboard on every tick instead, and ``--once`` prints a single frame.
"""

import logging
import platform
import signal
import threading
import time
from queue import Queue

import typer

from memtop import __version__
from memtop.errors import MemoryReaderError, PlatformUnsupported
from memtop.models import DisplayConfig, MemorySnapshot
from memtop.monitor import MemoryMonitor, collect_snapshot
from memtop.readers import MemoryReader, get_reader
from memtop.render import render_dashboard

logger = logging.getLogger(__name__)

app = typer.Typer(
    add_completion=False,
    help="memtop: system and per-process memory dashboard",
)


def setup_logging(level: str, tui: bool) -> None:
    """Send log records to stderr, or to the Textual devtools console in TUI mode."""
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    if tui:
        from textual.logging import TextualHandler

        logging.basicConfig(level=numeric_level, handlers=[TextualHandler()], force=True)
    else:
        logging.basicConfig(
            level=numeric_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            force=True,
        )


def run_plain(reader: MemoryReader, config: DisplayConfig, stop_event: threading.Event) -> None:
    """Print a dashboard frame every interval until ``stop_event`` is set."""
    queue: Queue[MemorySnapshot] = Queue(maxsize=1)
    monitor = MemoryMonitor(reader, queue, config)
    while not stop_event.is_set():
        snapshot = monitor.poll_once()
        if snapshot is None:
            typer.echo(f"Error reading system memory: {monitor.last_error}", err=True)
        else:
            queue.get_nowait()
            typer.clear()
            typer.echo(render_dashboard(snapshot), nl=False)
        stop_event.wait(timeout=config.update_interval)


@app.command()
def main(
    interval: float = typer.Option(3.0, "--interval", "-i", help="Seconds between updates.", min=0.1),
    top: int = typer.Option(10, "--top", "-n", help="Number of processes to show.", min=1),
    plain: bool = typer.Option(False, "--plain", help="Print a plain text dashboard instead of the TUI."),
    once: bool = typer.Option(False, "--once", help="Print one plain text frame and exit."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level."),
    version: bool = typer.Option(False, "--version", help="Show the version and exit."),
) -> None:
    """Show host memory and the processes using the most of it."""
    if version:
        typer.echo(f"memtop v{__version__}")
        raise typer.Exit()

    plain = plain or once
    setup_logging(log_level, tui=not plain)

    try:
        reader = get_reader()
    except PlatformUnsupported as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from e

    config = DisplayConfig(update_interval=interval, top_processes=top)

    if once:
        try:
            snapshot = collect_snapshot(reader, config.top_processes)
        except MemoryReaderError as e:
            typer.echo(f"Error reading system memory: {e}", err=True)
            raise typer.Exit(code=1) from e
        typer.echo(render_dashboard(snapshot), nl=False)
        return

    if not plain:
        from memtop.app import MemtopApp

        MemtopApp(reader, config).run()
        return

    stop_event = threading.Event()
    previous = signal.signal(signal.SIGTERM, lambda signum, frame: stop_event.set())
    typer.echo(f"Starting Memory Analyzer on {platform.system().lower()}")
    started = time.monotonic()
    try:
        run_plain(reader, config, stop_event)
    except KeyboardInterrupt:
        pass
    finally:
        signal.signal(signal.SIGTERM, previous)
    logger.info("stopped after %.1fs", time.monotonic() - started)
    typer.echo("\nReceived interrupt signal. Exiting...")


if __name__ == "__main__":
    app()
