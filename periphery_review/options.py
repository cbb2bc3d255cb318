"""Translation of option mappings into Periphery command-line flags.

Usage:
    args = translate({"schemes": ["Foo", "Bar"], "clean_build": True})
    # ["--schemes=Foo,Bar", "--clean-build", "--disable-update-check",
    #  "--quiet", "--format=checkstyle"]
"""

from collections.abc import Mapping
from typing import Any

# Always sent to Periphery, whatever the caller asked for
OPTION_OVERRIDES: Mapping[str, Any] = {
    "disable_update_check": True,
    "quiet": True,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def merge_options(options: Mapping[str, Any] | None, output_format: str) -> dict[str, Any]:
    """Return *options* with the override set and the output format applied.

    Caller keys naming the same flag as an override ("quiet", "disable-update-check",
    "format ", ...) are dropped, so each fixed flag appears once with its fixed value.
    """
    fixed = {_flag_name(key) for key in (*OPTION_OVERRIDES, "format")}
    caller = {key: value for key, value in (options or {}).items() if _flag_name(key) not in fixed}
    return {**caller, **OPTION_OVERRIDES, "format": output_format}


def translate(options: Mapping[str, Any] | None, output_format: str = "checkstyle") -> list[str]:
    """Translate an option mapping into Periphery ``scan`` arguments.

    Rules:
        1. Underscores in keys become hyphens, and ``--`` is prepended.
        2. ``True`` produces a bare flag; ``False`` or ``None`` drops it.
        3. Lists and tuples are joined with commas.
        4. Any other value is rendered with ``str()``.
        5. Keys from OPTION_OVERRIDES and ``format`` cannot be overridden.
    """
    args: list[str] = []
    for key, value in merge_options(options, output_format).items():
        flag = "--" + str(key).replace("_", "-")
        if value is True:
            args.append(flag)
        elif value is False or value is None:
            continue
        elif isinstance(value, (list, tuple)):
            args.append(f"{flag}={','.join(str(v) for v in value)}")
        else:
            args.append(f"{flag}={value}")
    return args


def _flag_name(key: Any) -> str:
    return str(key).strip().replace("_", "-")
