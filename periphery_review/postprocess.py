"""Per-issue postprocessing strategies.

Every strategy maps one Issue to a decision:
    Keep()          show the issue unchanged
    Drop()          suppress it
    Replace(issue)  show a rewritten issue instead

Usage:
    kept = apply(issues, CallbackStrategy(lambda issue: "Generated" not in issue.path))
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Union

from periphery_review.errors import InvalidPostprocessorResult
from periphery_review.models import Issue

IssueCallback = Callable[[Issue], Any]
LegacyPostprocessor = Callable[[str, int, int, str], Any]


# ---------------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Keep:
    pass


@dataclass(frozen=True)
class Drop:
    pass


@dataclass(frozen=True)
class Replace:
    issue: Issue


Decision = Union[Keep, Drop, Replace]


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

class PassThroughStrategy:
    """Keep every issue."""

    def decide(self, issue: Issue) -> Decision:
        return Keep()


class CallbackStrategy:
    """Accept or reject each issue with a single-argument callback."""

    def __init__(self, callback: IssueCallback) -> None:
        self.callback = callback

    def decide(self, issue: Issue) -> Decision:
        return Keep() if self.callback(issue) else Drop()


class LegacyStrategy:
    """Adapter for the deprecated ``postprocessor(path, line, column, message)`` contract.

    The callable must return one of:
        - None or False           -> the issue is suppressed
        - True                    -> the issue is shown unchanged
        - [path, line, column, message] (list or tuple)
                                  -> the issue is replaced
    """

    def __init__(self, postprocessor: LegacyPostprocessor) -> None:
        self.postprocessor = postprocessor

    def decide(self, issue: Issue) -> Decision:
        result = self.postprocessor(issue.path, issue.line, issue.column, issue.message)
        if result is None or result is False:
            return Drop()
        if result is True:
            return Keep()
        if isinstance(result, (list, tuple)) and len(result) == 4 and _valid_fields(*result):
            return Replace(Issue(*result))
        raise InvalidPostprocessorResult(
            "postprocessor must return None, True, False or a sequence of "
            f"[path: str, line: int >= 1, column: int >= 1, message: str]; got {result!r}"
        )


def _valid_fields(path: Any, line: Any, column: Any, message: Any) -> bool:
    return (
        isinstance(path, str)
        and isinstance(message, str)
        and all(isinstance(n, int) and not isinstance(n, bool) and n >= 1 for n in (line, column))
    )


Strategy = Union[PassThroughStrategy, CallbackStrategy, LegacyStrategy]


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def apply(issues: Iterable[Issue], strategy: Strategy) -> list[Issue]:
    """Run *strategy* over *issues*, preserving order.

    The whole input is processed before anything is returned, so a failing
    decision leaves nothing half-emitted.
    """
    results: list[Issue] = []
    for issue in issues:
        decision = strategy.decide(issue)
        if isinstance(decision, Keep):
            results.append(issue)
        elif isinstance(decision, Replace):
            results.append(decision.issue)
    return results
