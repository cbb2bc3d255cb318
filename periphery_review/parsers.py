"""Parsers for Periphery's checkstyle and JSON reports.

Usage:
    parser = get_parser("json")        # raises UnsupportedFormatError early
    issues = parser.parse(raw_output)  # -> list[Issue], in report order
"""

import json
import os
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any

from periphery_review.errors import ParseError, UnsupportedFormatError
from periphery_review.models import Issue

SUPPORTED_FORMATS = ("checkstyle", "json")

# Periphery's native JSON: "/abs/path/File.swift:12:5"
_LOCATION_RE = re.compile(r"^(?P<path>.*):(?P<line>\d+):(?P<column>\d+)$")

# Normalised key -> field, for flat JSON entries in any case convention
_FIELD_ALIASES = {
    "path": "path",
    "file": "path",
    "filepath": "path",
    "filename": "path",
    "line": "line",
    "linenumber": "line",
    "column": "column",
    "col": "column",
    "columnnumber": "column",
    "message": "message",
    "msg": "message",
}

_KIND_NAMES = {
    "enumelement": "Enum case",
    "function.constructor": "Initializer",
    "var.parameter": "Parameter",
    "generic_type_param": "Generic type parameter",
    "associatedtype": "Associated type",
}

_HINT_SUFFIXES = {
    "unused": " is unused",
    "assignOnlyProperty": " is assigned, but never used",
    "redundantProtocol": " is redundant as it's never used as an existential type",
    "redundantConformance": " is redundant",
    "redundantPublicAccessibility": " is declared public, but not used outside of its module",
}


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------

class Parser:
    """Turn raw Periphery output into a list of issues."""

    def __init__(self, base_dir: str | os.PathLike | None = None) -> None:
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()

    def parse(self, text: str) -> list[Issue]:
        raise NotImplementedError

    def _issue(self, path: Any, line: Any, column: Any, message: Any) -> Issue:
        return Issue(
            path=self._relative_path(str(path)),
            line=_position(line, "line"),
            column=_position(column, "column"),
            message=str(message),
        )

    def _relative_path(self, path: str) -> str:
        """Make absolute paths under base_dir relative to it; leave others alone."""
        candidate = Path(path)
        if not candidate.is_absolute():
            return path
        try:
            return candidate.resolve().relative_to(self.base_dir.resolve()).as_posix()
        except ValueError:
            return path


# ---------------------------------------------------------------------------
# Checkstyle
# ---------------------------------------------------------------------------

class CheckstyleParser(Parser):
    """Parse ``<checkstyle><file name=...><error .../></file></checkstyle>``."""

    def parse(self, text: str) -> list[Issue]:
        try:
            root = ET.fromstring(text)
        except ET.ParseError as exc:
            raise ParseError(f"Malformed checkstyle XML: {exc}") from exc

        issues: list[Issue] = []
        for file_element in root.iter("file"):
            name = file_element.get("name")
            if name is None:
                raise ParseError("<file> element without a 'name' attribute")
            for error in file_element.iter("error"):
                line = error.get("line")
                message = error.get("message")
                if line is None or message is None:
                    raise ParseError(f"<error> element in '{name}' lacks 'line' or 'message'")
                # Periphery omits the column for some declarations
                issues.append(self._issue(name, line, error.get("column", 1), message))
        return issues


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

class JsonParser(Parser):
    """Parse a JSON array of issue objects.

    Two entry shapes are accepted:
        - flat objects with path/line/column/message (any case convention)
        - Periphery's native objects with location/kind/name/hints
    """

    def parse(self, text: str) -> list[Issue]:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Malformed JSON output: {exc}") from exc

        if not isinstance(data, list):
            raise ParseError(f"Expected a JSON array, got {type(data).__name__}")

        return [self._parse_entry(index, entry) for index, entry in enumerate(data)]

    def _parse_entry(self, index: int, entry: Any) -> Issue:
        if not isinstance(entry, dict):
            raise ParseError(f"Entry #{index} is not a JSON object")

        if "location" in entry:
            match = _LOCATION_RE.match(str(entry["location"]))
            if match is None:
                raise ParseError(f"Entry #{index} has an unreadable location: {entry['location']!r}")
            return self._issue(
                match["path"],
                match["line"],
                match["column"],
                entry.get("message") or _compose_message(entry.get("name"), entry.get("kind"), entry.get("hints")),
            )

        fields: dict[str, Any] = {}
        for key, value in entry.items():
            field = _FIELD_ALIASES.get(_normalize_key(key))
            if field is not None:
                fields.setdefault(field, value)

        missing = [f for f in ("path", "line", "message") if f not in fields]
        if missing:
            raise ParseError(f"Entry #{index} is missing {', '.join(missing)}")
        return self._issue(fields["path"], fields["line"], fields.get("column", 1), fields["message"])


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def get_parser(output_format: str, base_dir: str | os.PathLike | None = None) -> Parser:
    """Return the parser for *output_format*.

    Raises:
        UnsupportedFormatError: for anything but "checkstyle" or "json".
    """
    if output_format == "checkstyle":
        return CheckstyleParser(base_dir)
    if output_format == "json":
        return JsonParser(base_dir)
    raise UnsupportedFormatError(
        f"Unsupported format '{output_format}'. Supported: {', '.join(SUPPORTED_FORMATS)}"
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _normalize_key(key: str) -> str:
    """"filePath", "file_path", "File-Path" -> "filepath"."""
    return re.sub(r"[\s_-]", "", str(key)).lower()


def _position(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ParseError(f"Invalid {name}: {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"Invalid {name}: {value!r}") from exc
    if number < 1:
        raise ParseError(f"Invalid {name}: {value!r} (must be >= 1)")
    return number


def _compose_message(name: str | None, kind: str | None, hints: list[str] | None) -> str:
    if not name:
        return "unused"
    # Periphery reports a single hint per declaration
    hint = hints[0] if hints else None
    return f"{_display_name(kind or '')} '{name}'{_HINT_SUFFIXES.get(hint, '')}"


def _display_name(kind: str) -> str:
    """"function.method.instance" -> "Function"."""
    if kind in _KIND_NAMES:
        return _KIND_NAMES[kind]
    return kind.split(".", 1)[0].capitalize()
