"""Thin wrapper around the Periphery executable.

Usage:
    runner = Runner()                         # resolves `periphery` from $PATH
    output = runner.scan(["--format=json"])   # raw stdout of `periphery scan`
    runner.version()                          # "2.21.0"
"""

import logging
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path

from periphery_review.errors import ExecutableNotFound, ParseError, ToolExecutionError

logger = logging.getLogger(__name__)

DEFAULT_BINARY = "periphery"
DEFAULT_TIMEOUT = 1800


class Runner:
    """Run Periphery subcommands and capture their standard output."""

    def __init__(self, binary_path: str | None = None, timeout: float | None = DEFAULT_TIMEOUT) -> None:
        self.binary_path = binary_path
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def scan(self, args: Sequence[str]) -> str:
        """Run ``periphery scan`` with *args* and return its stdout verbatim."""
        return self._run(["scan", *args])

    def version(self) -> str:
        """Return the version reported by ``periphery version``."""
        return self._run(["version"]).strip()

    def resolve_binary(self) -> str:
        """Return the absolute path of the executable.

        Raises:
            ExecutableNotFound: if the configured path does not exist or
                                nothing named `periphery` is on $PATH.
        """
        if self.binary_path:
            path = Path(self.binary_path)
            if not path.is_file():
                raise ExecutableNotFound(f"Periphery executable not found at '{self.binary_path}'")
            return str(path.resolve())

        resolved = shutil.which(DEFAULT_BINARY)
        if resolved is None:
            raise ExecutableNotFound(
                f"'{DEFAULT_BINARY}' was not found on PATH. "
                "Install it or run `periphery-review install`."
            )
        return resolved

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run(self, args: Sequence[str]) -> str:
        command = [self.resolve_binary(), *args]
        logger.debug("Running %s", " ".join(command))
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise ToolExecutionError(
                f"Periphery did not finish within {self.timeout}s",
                returncode=None,
                stderr=_decode(exc.stderr),
            ) from exc
        except OSError as exc:
            # Missing, not executable, or built for another architecture
            raise ExecutableNotFound(f"Unable to execute '{command[0]}': {exc}") from exc

        if completed.returncode != 0:
            stderr = _decode(completed.stderr).strip()
            raise ToolExecutionError(
                f"Periphery failed with code {completed.returncode}: {stderr}",
                returncode=completed.returncode,
                stderr=stderr,
            )

        try:
            return completed.stdout.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Periphery output is not valid UTF-8: {exc}") from exc


def _decode(stream: bytes | None) -> str:
    if stream is None:
        return ""
    return stream.decode("utf-8", errors="replace")
