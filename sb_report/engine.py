"""Cross-client comparison: state root agreement and relative speed."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, Union

from sb_common.errors import ReportError
from sb_runner.models import ClientFailure, ClientSuccess, Result

VERDICT_MATCH = "all match"
VERDICT_MISMATCH = "MISMATCH"
VERDICT_INCOMPLETE = "incomplete"


@dataclass(frozen=True)
class RootCheck:
    """Agreement verdict plus every client's literal root."""

    matching: bool
    roots: tuple[tuple[str, str], ...]

    @property
    def distinct_roots(self) -> set[str]:
        return {root for _, root in self.roots}


@dataclass
class ComparisonRow:
    result: Result
    speedup: float

    @property
    def client(self) -> str:
        return self.result.client


@dataclass
class Comparison:
    """Everything a renderer needs, in configured client order.

    ``entries`` interleaves successful rows and failures exactly as the
    clients were configured.
    """

    root_check: RootCheck
    fastest_ms: int
    entries: list[Union[ComparisonRow, ClientFailure]] = field(default_factory=list)

    @property
    def rows(self) -> list[ComparisonRow]:
        return [e for e in self.entries if isinstance(e, ComparisonRow)]

    @property
    def failures(self) -> list[ClientFailure]:
        return [e for e in self.entries if isinstance(e, ClientFailure)]

    @property
    def results(self) -> list[Result]:
        return [row.result for row in self.rows]

    @property
    def verdict(self) -> str:
        """Agreement verdict; any failed client makes a match incomplete.

        A disagreement among the clients that did report wins over failures.
        """
        if not self.root_check.matching:
            return VERDICT_MISMATCH
        if self.failures:
            return VERDICT_INCOMPLETE
        return VERDICT_MATCH


def check_state_roots(results: Sequence[Result]) -> RootCheck:
    """Exact string equality across all roots; fewer than two is a match."""
    roots = tuple((r.client, r.state_root) for r in results)
    if len(results) < 2:
        return RootCheck(matching=True, roots=roots)
    first = results[0].state_root
    return RootCheck(
        matching=all(r.state_root == first for r in results[1:]),
        roots=roots,
    )


def fastest_elapsed(results: Sequence[Result]) -> int:
    """Smallest strictly positive elapsed_ms, or 0 when there is none."""
    positive = [r.elapsed_ms for r in results if r.elapsed_ms > 0]
    return min(positive) if positive else 0


def speedup(result: Result, fastest_ms: int) -> float:
    """Elapsed time relative to the fastest run (1.0 for the fastest)."""
    if fastest_ms > 0 and result.elapsed_ms > 0:
        return result.elapsed_ms / fastest_ms
    return 1.0


ReportItem = Union[Result, ClientSuccess, ClientFailure]


def _normalize(item: ReportItem) -> Union[Result, ClientFailure]:
    if isinstance(item, (Result, ClientFailure)):
        return item
    if isinstance(item, ClientSuccess):
        return item.result
    raise ReportError(f"unsupported report item {type(item).__name__}")


def build_comparison(items: Sequence[ReportItem]) -> Comparison:
    """Build a Comparison from Results or client outcomes.

    Failed outcomes are carried for display only; they never take part in
    the agreement check or the speedup baseline.

    Raises:
        ReportError: ``items`` is empty.
    """
    if not items:
        raise ReportError("no results to report")

    normalized = [_normalize(item) for item in items]
    results = [item for item in normalized if isinstance(item, Result)]
    fastest = fastest_elapsed(results)

    entries: list[Union[ComparisonRow, ClientFailure]] = []
    for item in normalized:
        if isinstance(item, Result):
            entries.append(ComparisonRow(result=item, speedup=speedup(item, fastest)))
        else:
            entries.append(item)

    return Comparison(
        root_check=check_state_roots(results),
        fastest_ms=fastest,
        entries=entries,
    )
