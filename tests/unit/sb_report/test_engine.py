"""Tests for root agreement and speedup computation."""

from __future__ import annotations

import pytest

from sb_common.errors import ReportError
from sb_report.api import (
    VERDICT_INCOMPLETE,
    VERDICT_MATCH,
    VERDICT_MISMATCH,
    build_comparison,
    check_state_roots,
    fastest_elapsed,
    speedup,
)
from sb_runner.api import ClientFailure, ClientSuccess, Result

pytestmark = pytest.mark.unit_report


def _result(client: str, root: str = "0xaa", elapsed: int = 1000) -> Result:
    return Result(client=client, state_root=root, elapsed_ms=elapsed)


def test_single_result_matches() -> None:
    assert check_state_roots([_result("geth")]).matching


def test_empty_roots_are_compared_literally() -> None:
    assert check_state_roots([_result("a", ""), _result("b", "")]).matching
    assert not check_state_roots([_result("a", ""), _result("b", "0x00")]).matching


def test_roots_compare_as_exact_strings() -> None:
    check = check_state_roots([_result("geth", "0xAA"), _result("reth", "0xaa")])
    assert not check.matching
    assert check.roots == (("geth", "0xAA"), ("reth", "0xaa"))
    assert check.distinct_roots == {"0xAA", "0xaa"}


def test_speedup_relative_to_fastest() -> None:
    results = [_result("geth", elapsed=1000), _result("reth", elapsed=2000)]
    fastest = fastest_elapsed(results)
    assert fastest == 1000
    assert [speedup(r, fastest) for r in results] == [1.0, 2.0]


def test_zero_elapsed_is_neutral() -> None:
    results = [_result("geth", elapsed=0), _result("reth", elapsed=500)]
    fastest = fastest_elapsed(results)
    assert fastest == 500
    assert speedup(results[0], fastest) == 1.0
    assert fastest_elapsed([_result("geth", elapsed=0)]) == 0
    assert speedup(_result("geth", elapsed=10), 0) == 1.0


def test_empty_input_raises() -> None:
    with pytest.raises(ReportError, match="no results"):
        build_comparison([])


def test_failures_are_excluded_from_agreement_and_baseline() -> None:
    items = [
        ClientSuccess(_result("geth", "0x1", 3000)),
        ClientFailure(client="besu", error_type="HarnessTimeoutError", message="timed out"),
        ClientSuccess(_result("reth", "0x1", 1500)),
    ]
    comparison = build_comparison(items)

    assert comparison.root_check.matching
    assert comparison.fastest_ms == 1500
    assert [entry.client for entry in comparison.entries] == ["geth", "besu", "reth"]
    assert [row.speedup for row in comparison.rows] == [2.0, 1.0]
    assert comparison.failures[0].client == "besu"
    assert [r.client for r in comparison.results] == ["geth", "reth"]
    assert comparison.verdict == VERDICT_INCOMPLETE


@pytest.mark.parametrize(
    "items, verdict",
    [
        ([_result("geth"), _result("reth")], VERDICT_MATCH),
        ([_result("geth", "0x1"), _result("reth", "0x2")], VERDICT_MISMATCH),
        (
            [
                _result("geth", "0x1"),
                _result("reth", "0x2"),
                ClientFailure(client="besu", error_type="HarnessError", message="exit 1"),
            ],
            VERDICT_MISMATCH,
        ),
        ([ClientFailure(client="besu", error_type="HarnessError", message="exit 1")], VERDICT_INCOMPLETE),
    ],
)
def test_verdict(items, verdict: str) -> None:
    assert build_comparison(items).verdict == verdict


def test_unsupported_item() -> None:
    with pytest.raises(ReportError, match="unsupported"):
        build_comparison([object()])  # type: ignore[list-item]
