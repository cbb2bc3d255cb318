"""Tests for periphery_review/runner.py"""

import stat
import textwrap
from pathlib import Path

import pytest

from periphery_review.errors import ExecutableNotFound, ParseError, ToolExecutionError
from periphery_review.runner import Runner


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def fake_periphery(tmp_path: Path, body: str, name: str = "periphery") -> Path:
    """Write an executable shell script standing in for Periphery."""
    script = tmp_path / name
    script.write_text("#!/bin/sh\n" + textwrap.dedent(body), encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR)
    return script


# ---------------------------------------------------------------------------
# scan()
# ---------------------------------------------------------------------------

def test_scan_returns_stdout_verbatim(tmp_path):
    binary = fake_periphery(tmp_path, """\
        printf '<checkstyle>\\n</checkstyle>\\n'
        """)
    assert Runner(str(binary)).scan([]) == "<checkstyle>\n</checkstyle>\n"


def test_scan_passes_subcommand_and_arguments(tmp_path):
    binary = fake_periphery(tmp_path, """\
        for arg in "$@"; do echo "$arg"; done
        """)
    output = Runner(str(binary)).scan(["--targets=A,B", "--clean-build"])
    assert output.splitlines() == ["scan", "--targets=A,B", "--clean-build"]


def test_non_zero_exit_raises_with_stderr(tmp_path):
    binary = fake_periphery(tmp_path, """\
        echo "partial output"
        echo "error: no such scheme" >&2
        exit 3
        """)
    with pytest.raises(ToolExecutionError, match="no such scheme") as excinfo:
        Runner(str(binary)).scan([])
    assert excinfo.value.returncode == 3
    assert excinfo.value.stderr == "error: no such scheme"


def test_non_utf8_output_raises_parse_error(tmp_path):
    binary = fake_periphery(tmp_path, """\
        printf '<checkstyle><file name="\\377.swift"/></checkstyle>'
        """)
    with pytest.raises(ParseError, match="UTF-8"):
        Runner(str(binary)).scan([])


def test_non_utf8_stderr_is_replaced(tmp_path):
    binary = fake_periphery(tmp_path, """\
        printf 'bad \\377 byte' >&2
        exit 1
        """)
    with pytest.raises(ToolExecutionError) as excinfo:
        Runner(str(binary)).scan([])
    assert excinfo.value.stderr == "bad \ufffd byte"


def test_timeout_raises_tool_execution_error(tmp_path):
    binary = fake_periphery(tmp_path, """\
        exec sleep 5
        """)
    with pytest.raises(ToolExecutionError, match="did not finish") as excinfo:
        Runner(str(binary), timeout=0.2).scan([])
    assert excinfo.value.returncode is None


# ---------------------------------------------------------------------------
# version()
# ---------------------------------------------------------------------------

def test_version_is_stripped(tmp_path):
    binary = fake_periphery(tmp_path, """\
        echo "2.21.0"
        """)
    assert Runner(str(binary)).version() == "2.21.0"


# ---------------------------------------------------------------------------
# Binary resolution
# ---------------------------------------------------------------------------

def test_missing_explicit_binary(tmp_path):
    with pytest.raises(ExecutableNotFound):
        Runner(str(tmp_path / "nope")).scan([])


def test_non_executable_binary(tmp_path):
    binary = fake_periphery(tmp_path, """\
        echo never
        """)
    binary.chmod(0o644)
    with pytest.raises(ExecutableNotFound, match="Unable to execute"):
        Runner(str(binary)).scan([])


def test_binary_resolved_from_path(tmp_path, monkeypatch):
    fake_periphery(tmp_path, """\
        echo found
        """)
    monkeypatch.setenv("PATH", str(tmp_path))
    assert Runner().resolve_binary() == str(tmp_path / "periphery")
    assert Runner().scan([]) == "found\n"


def test_binary_not_on_path(tmp_path, monkeypatch):
    monkeypatch.setenv("PATH", str(tmp_path))
    with pytest.raises(ExecutableNotFound, match="PATH"):
        Runner().scan([])
