"""Exception hierarchy shared by every stage of the scan pipeline."""


class PeripheryError(Exception):
    """Base exception for all periphery-review errors."""


class ExecutableNotFound(PeripheryError):
    """Raised when the Periphery binary cannot be resolved."""


class ToolExecutionError(PeripheryError):
    """Raised when Periphery exits non-zero or does not finish in time."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class ParseError(PeripheryError):
    """Raised when Periphery output cannot be parsed."""


class UnsupportedFormatError(PeripheryError):
    """Raised when the output format is neither checkstyle nor json."""


class InvalidPostprocessorResult(PeripheryError):
    """Raised when a legacy postprocessor returns an unexpected value."""


class InstallError(PeripheryError):
    """Raised when the Periphery binary cannot be downloaded or extracted."""


class ConfigError(PeripheryError):
    """Raised when the configuration is missing or invalid."""
