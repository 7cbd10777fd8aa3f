"""Tests for reader selection and the default command runner."""

import sys

import pytest

from memtop.errors import ExternalToolFailure, PlatformUnsupported
from memtop.readers import DarwinMemoryReader, LinuxMemoryReader, get_reader, run_command


@pytest.mark.parametrize(
    ("system", "reader_cls"),
    [
        ("Linux", LinuxMemoryReader),
        ("linux", LinuxMemoryReader),
        ("Darwin", DarwinMemoryReader),
    ],
)
def test_get_reader_selects_variant(system, reader_cls):
    assert isinstance(get_reader(system), reader_cls)


@pytest.mark.parametrize("system", ["Windows", "FreeBSD", "Java", ""])
def test_get_reader_unsupported(system):
    """Test unknown platforms are a hard error."""
    with pytest.raises(PlatformUnsupported) as exc_info:
        get_reader(system)
    assert exc_info.value.system == system
    assert "Unsupported operating system" in str(exc_info.value)


def test_get_reader_detects_platform(monkeypatch):
    monkeypatch.setattr("memtop.readers.platform.system", lambda: "Darwin")
    assert isinstance(get_reader(), DarwinMemoryReader)


def test_run_command_returns_stdout():
    assert run_command([sys.executable, "-c", "print('hello')"]) == "hello\n"


def test_run_command_nonzero_exit():
    with pytest.raises(ExternalToolFailure, match="exit status 3"):
        run_command([sys.executable, "-c", "raise SystemExit(3)"])


def test_run_command_missing_tool():
    with pytest.raises(ExternalToolFailure):
        run_command(["memtop-no-such-tool-xyz"])


def test_run_command_timeout():
    with pytest.raises(ExternalToolFailure, match="timed out"):
        run_command([sys.executable, "-c", "import time; time.sleep(5)"], timeout=0.2)
