"""Tests for result aggregation."""

from datetime import timedelta

import pytest

from specsuite.core.summary import ExecutionSummary, collect_outcomes, summarize
from specsuite.errors import ActionFailure
from specsuite.schema import PASSED, BranchResult, Cancelled, Failed, LeafResult, Skipped


def make_failed() -> Failed:
    """Build a failed outcome."""
    return Failed(cause=ActionFailure(AssertionError('mismatch')))


@pytest.fixture
def results() -> list[BranchResult | LeafResult]:
    """Provide a mixed outcome forest."""
    return [
        BranchResult(description='group', children=(
            LeafResult(description='a', outcome=PASSED),
            LeafResult(description='b', outcome=make_failed()),
            BranchResult(description='nested', children=(
                LeafResult(description='c', outcome=Skipped()),
                LeafResult(description='d', outcome=PASSED),
            )),
        )),
        LeafResult(description='e', outcome=PASSED),
    ]


def test_collect_outcomes(results: list[BranchResult | LeafResult]) -> None:
    """Flatten outcomes in execution order."""
    assert [outcome.status for outcome in collect_outcomes(results)] == [
        'passed',
        'failed',
        'skipped',
        'passed',
        'passed',
    ]


def test_summary_counts(results: list[BranchResult | LeafResult]) -> None:
    """Count outcomes by status."""
    summary = summarize(results, timedelta(seconds=1.5))

    assert summary == ExecutionSummary(
        total=5,
        passed=3,
        failed=1,
        skipped=1,
        cancelled=0,
        duration=timedelta(seconds=1.5),
    )
    assert summary.any_failed
    assert not summary.all_passed
    assert summary.exit_code == 1
    assert summary.format() == '5 examples, 1 failures, 1 skipped (1.50s)'


def test_summary_counts_are_consistent(results: list[BranchResult | LeafResult]) -> None:
    """Add up per-status counts to the total."""
    summary = summarize(results)

    assert summary.total == summary.passed + summary.failed + summary.skipped + summary.cancelled


def test_cancelled_summary() -> None:
    """Mention cancelled examples and fail the run."""
    summary = summarize([LeafResult(description='slow', outcome=Cancelled())])

    assert summary.cancelled == 1
    assert not summary.any_failed
    assert summary.exit_code == 1
    assert summary.format() == '1 examples, 0 failures, 0 skipped, 1 cancelled (0.00s)'


@pytest.mark.parametrize('outcomes, expected', (
    pytest.param([], 0, id='empty'),
    pytest.param([PASSED, PASSED], 0, id='all passed'),
    pytest.param([PASSED, Skipped()], 0, id='skipped'),
    pytest.param([PASSED, make_failed()], 1, id='failed'),
))
def test_exit_code(outcomes: list, expected: int) -> None:
    """Fail the run only on failures or cancellation."""
    results = [
        LeafResult(description=f'example {index}', outcome=outcome)
        for index, outcome in enumerate(outcomes)
    ]

    assert summarize(results).exit_code == expected
