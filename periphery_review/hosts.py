"""Annotation hosts: where surviving issues end up.

A host only needs ``warn(message, file=None, line=None)``. Two real hosts are
provided (GitHub Actions workflow commands and plain console lines) plus an
in-memory recorder.
"""

from dataclasses import dataclass
from typing import IO, Protocol

import click


class AnnotationHost(Protocol):
    def warn(self, message: str, file: str | None = None, line: int | None = None) -> None:
        ...


@dataclass(frozen=True)
class Annotation:
    message: str
    file: str | None = None
    line: int | None = None


# ---------------------------------------------------------------------------
# Hosts
# ---------------------------------------------------------------------------

class GitHubActionsHost:
    """Emit ``::warning file=...,line=...::message`` workflow commands."""

    def __init__(self, stream: IO[str] | None = None) -> None:
        self.stream = stream

    def warn(self, message: str, file: str | None = None, line: int | None = None) -> None:
        properties = []
        if file is not None:
            properties.append(f"file={_escape_property(file)}")
        if line is not None:
            properties.append(f"line={line}")
        prefix = "::warning " + ",".join(properties) if properties else "::warning"
        click.echo(f"{prefix}::{_escape_data(message)}", file=self.stream)


class ConsoleHost:
    """Emit compiler-style ``path:line: warning: message`` lines."""

    def __init__(self, stream: IO[str] | None = None) -> None:
        self.stream = stream

    def warn(self, message: str, file: str | None = None, line: int | None = None) -> None:
        location = ""
        if file is not None:
            location = f"{file}:{line}: " if line is not None else f"{file}: "
        click.echo(f"{location}warning: {message}", file=self.stream)


class RecordingHost:
    """Keep annotations in memory instead of printing them."""

    def __init__(self) -> None:
        self.annotations: list[Annotation] = []

    def warn(self, message: str, file: str | None = None, line: int | None = None) -> None:
        self.annotations.append(Annotation(message, file, line))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")
