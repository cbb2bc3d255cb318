"""Configuration loading and validation.

Usage:
    config = load("periphery.yaml")         # raises ConfigError on bad config
    config.options                          # {"schemes": ["App"], ...}
    generate_template("periphery.yaml")     # writes example file to disk
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from periphery_review.errors import ConfigError
from periphery_review.runner import DEFAULT_TIMEOUT


# ---------------------------------------------------------------------------
# Config dataclass
# ---------------------------------------------------------------------------

@dataclass
class Config:
    binary_path: str | None = None
    format: str = "checkstyle"
    timeout: float | None = DEFAULT_TIMEOUT
    options: dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def load(config_path: str = "periphery.yaml") -> Config:
    """Load and validate configuration from a YAML file.

    Environment variables PERIPHERY_BINARY and PERIPHERY_FORMAT override
    file values.

    Raises:
        ConfigError: if the file is missing, malformed, or has sections of
                     the wrong shape.
    """
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(
            f"Config file not found: '{config_path}'\n"
            "Run `periphery-review init` to generate a template."
        )

    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse '{config_path}': {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"'{config_path}' must be a YAML mapping at the top level.")

    section = raw.get("periphery") or {}
    options = raw.get("options") or {}
    if not isinstance(section, dict):
        raise ConfigError("'periphery' must be a mapping.")
    if not isinstance(options, dict):
        raise ConfigError("'options' must be a mapping of Periphery option names to values.")

    binary_path = os.environ.get("PERIPHERY_BINARY") or section.get("binary_path")
    output_format = os.environ.get("PERIPHERY_FORMAT") or section.get("format") or "checkstyle"

    return Config(
        binary_path=str(binary_path) if binary_path else None,
        format=str(output_format).strip(),
        timeout=_timeout(section.get("timeout", DEFAULT_TIMEOUT)),
        options=options,
    )


def _timeout(value: Any) -> float | None:
    """Validate the timeout; None disables it."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"'periphery.timeout' must be a positive number of seconds, got {value!r}")
    return value


# ---------------------------------------------------------------------------
# Template generator (used by `init` command)
# ---------------------------------------------------------------------------

TEMPLATE = """\
periphery:
  binary_path: null        # null = search $PATH; or run `periphery-review install`
  format: checkstyle       # checkstyle | json
  timeout: 1800            # seconds

options:
  # Passed to `periphery scan`: underscores become hyphens, lists are
  # comma-joined, true is a bare flag, false is omitted.
  project: "App.xcodeproj"
  schemes: ["App"]
  targets: ["App"]
  clean_build: true
"""


def generate_template(output_path: str = "periphery.yaml") -> None:
    """Write a template periphery.yaml to *output_path*.

    Raises:
        ConfigError: if the file already exists.
    """
    path = Path(output_path)
    if path.exists():
        raise ConfigError(
            f"'{output_path}' already exists. Remove it first or choose a different path."
        )
    path.write_text(TEMPLATE, encoding="utf-8")
