"""Analyze Swift projects with Periphery and annotate unused code.

Usage:
    plugin = PeripheryPlugin(GitHubActionsHost())
    plugin.scan(
        {"project": "Foo.xcodeproj", "schemes": ["foo", "bar"], "clean_build": True},
        callback=lambda issue: not issue.path.endswith("/Generated.swift"),
    )
"""

import logging
import os
import threading
import traceback
import warnings
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from periphery_review.hosts import AnnotationHost
from periphery_review.installer import Installer
from periphery_review.models import Issue
from periphery_review.options import translate
from periphery_review.parsers import get_parser
from periphery_review.postprocess import (
    CallbackStrategy,
    IssueCallback,
    LegacyPostprocessor,
    LegacyStrategy,
    PassThroughStrategy,
    Strategy,
    apply,
)
from periphery_review.runner import DEFAULT_TIMEOUT, Runner

logger = logging.getLogger(__name__)


class PeripheryPlugin:
    """Run Periphery and post one warning per unused declaration."""

    def __init__(
        self,
        host: AnnotationHost,
        binary_path: str | None = None,
        output_format: str = "checkstyle",
        timeout: float | None = DEFAULT_TIMEOUT,
        base_dir: str | os.PathLike | None = None,
    ) -> None:
        self.host = host
        self.binary_path = binary_path
        self.format = output_format
        self.timeout = timeout
        self.base_dir = base_dir
        self._legacy: LegacyStrategy | None = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def scan(self, options: Mapping[str, Any] | None = None,
             callback: IssueCallback | None = None) -> list[Issue]:
        """Scan the project and emit a warning for every surviving issue.

        *options* are translated into Periphery flags (see
        ``periphery_review.options.translate``). Run ``periphery help scan``
        for what is available.

        *callback* receives each Issue; a falsy return value suppresses it.
        It applies to this call only and takes precedence over a
        postprocessor registered through the deprecated API.

        Returns the issues that were emitted.
        """
        # Fails on an unsupported format before anything is spawned
        parser = get_parser(self.format, self.base_dir)
        strategy = self._select_strategy(callback)

        output = Runner(self.binary_path, timeout=self.timeout).scan(translate(options, self.format))
        issues = parser.parse(output)
        kept = apply(issues, strategy)
        logger.info("Periphery reported %d issue(s), %d kept", len(issues), len(kept))

        for issue in kept:
            self.host.warn(issue.message, file=issue.path, line=issue.line)
        return kept

    def install(self, version: str = "latest", path: str | os.PathLike = "periphery",
                force: bool = False) -> None:
        """Download Periphery and use it for subsequent scans.

        Raises:
            FileExistsError: *path* exists and *force* is False.
        """
        Installer(version).install(path, force=force)
        self.binary_path = os.path.abspath(path)

    # ------------------------------------------------------------------
    # Deprecated postprocessor API
    # ------------------------------------------------------------------

    @property
    def postprocessor(self) -> LegacyPostprocessor | None:
        """Deprecated: pass a callback to :meth:`scan` instead.

        Callable receiving ``(path, line, column, message)`` and returning
        None/False to suppress the warning, True to keep it, or a
        ``[path, line, column, message]`` sequence to replace it.

        Registering one emits a FutureWarning, shown under default warning
        filters, and a host annotation at the calling line.
        """
        return self._legacy.postprocessor if self._legacy else None

    @postprocessor.setter
    def postprocessor(self, postprocessor: LegacyPostprocessor) -> None:
        self._deprecate_in_favor_of_scan("postprocessor")
        self._register_legacy(postprocessor)

    def process_warnings(self, postprocessor: LegacyPostprocessor) -> LegacyPostprocessor:
        """Deprecated: same as assigning :attr:`postprocessor`; usable as a decorator."""
        self._deprecate_in_favor_of_scan("process_warnings")
        self._register_legacy(postprocessor)
        return postprocessor

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _register_legacy(self, postprocessor: LegacyPostprocessor) -> None:
        with self._lock:
            self._legacy = LegacyStrategy(postprocessor)

    def _select_strategy(self, callback: IssueCallback | None) -> Strategy:
        if callback is not None:
            return CallbackStrategy(callback)
        with self._lock:
            legacy = self._legacy
        return legacy or PassThroughStrategy()

    def _deprecate_in_favor_of_scan(self, name: str) -> None:
        # [caller, public entry point, this method]
        caller = traceback.extract_stack(limit=3)[0]
        cls = type(self).__name__
        message = (
            f"`{cls}.{name}` is deprecated; use `{cls}.scan` with a callback instead. "
            "It will be removed from future releases."
        )
        warnings.warn(message, FutureWarning, stacklevel=3)
        self.host.warn(message, file=_display_path(caller.filename), line=caller.lineno)


def _display_path(filename: str) -> str:
    try:
        return Path(filename).resolve().relative_to(Path.cwd().resolve()).as_posix()
    except ValueError:
        return filename
