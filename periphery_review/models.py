"""Data model for Periphery scan results."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Issue:
    """One unused-code finding reported by Periphery."""

    path: str
    line: int
    column: int
    message: str
