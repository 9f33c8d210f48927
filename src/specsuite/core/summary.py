"""Aggregation of outcome trees into run statistics."""

from collections import Counter
from datetime import timedelta
from typing import TYPE_CHECKING

from pydantic import Field

from specsuite.models import SchemaModel

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from typing import Self

if TYPE_CHECKING:
    from specsuite.schema import Outcome, OutcomeNode


def collect_outcomes(nodes: 'Iterable[OutcomeNode]') -> list['Outcome']:
    """Flatten an outcome forest into leaf outcomes, in execution order."""
    return [
        outcome
        for node in nodes
        for outcome in node.iter_outcomes()
    ]


class ExecutionSummary(SchemaModel):
    """Statistics of a run.

    Synthetic hook entries are counted like examples: a failing
    `beforeAll` hook is one failure, whatever the number of examples
    it prevented from running.
    """

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    cancelled: int = 0

    duration: timedelta = Field(
        default=timedelta(0),
        title='Wall-clock duration',
        description=(
            'Measured once around the whole run. Per-example durations '
            'may include overlapping awaits and are not summed.'
        ),
    )

    @classmethod
    def from_results(cls, results: 'Sequence[OutcomeNode]',
                     duration: timedelta = timedelta(0)) -> 'Self':
        """Fold an outcome forest into a summary.

        Args:
            results: Outcome forest of a run.
            duration: Wall-clock duration of the run.

        Returns:
            The run statistics.
        """
        statuses = Counter(outcome.status for outcome in collect_outcomes(results))

        return cls(
            total=statuses.total(),
            passed=statuses['passed'],
            failed=statuses['failed'],
            skipped=statuses['skipped'],
            cancelled=statuses['cancelled'],
            duration=duration,
        )

    @property
    def all_passed(self) -> bool:
        """Whether every example passed; skipped ones count against it."""
        return self.passed == self.total

    @property
    def any_failed(self) -> bool:
        """Whether any example or hook failed."""
        return self.failed > 0

    @property
    def exit_code(self) -> int:
        """Process exit code: 1 on failures or cancellation, 0 otherwise."""
        if self.any_failed or self.cancelled:
            return 1
        return 0

    def format(self) -> str:
        """Render a one-line human-readable summary."""
        message = (
            f'{self.total} examples, {self.failed} failures, '
            f'{self.skipped} skipped'
        )
        if self.cancelled:
            message += f', {self.cancelled} cancelled'

        return f'{message} ({self.duration.total_seconds():.2f}s)'


def summarize(results: 'Sequence[OutcomeNode]',
              duration: timedelta = timedelta(0)) -> ExecutionSummary:
    """Fold an outcome forest into `ExecutionSummary` statistics."""
    return ExecutionSummary.from_results(results, duration)
