"""Execution engine for specification forests.

The executor walks a forest depth-first, one step at a time, and
produces a fresh outcome tree. Hook context is threaded explicitly
through the walk as two chains:

- `pre` hooks: `before_each` hooks of all enclosing branches, outer to inner;
- `post` hooks: `after_each` hooks of all enclosing branches, inner to outer.

Failures raised by actions and hooks are captured into outcomes and
never escape the executor. Cancellation (an external cancel or the
configured timeout) marks the step in flight as cancelled, lets the
active teardown hooks run, and abandons the remaining siblings.
"""

import asyncio
import logging
from datetime import timedelta
from functools import partial
from inspect import isawaitable
from time import perf_counter
from typing import TYPE_CHECKING, TypeAlias

from pydantic import Field

from specsuite.errors import ActionFailure, HookFailure, HookPhase
from specsuite.models import SchemaModel
from specsuite.schema import (
    EMPTY_METADATA,
    PASSED,
    Branch,
    BranchResult,
    Cancelled,
    Failed,
    Leaf,
    LeafResult,
    OutcomeNode,
    Passed,
    Skipped,
)

from .filters import validate_forest
from .summary import ExecutionSummary

if TYPE_CHECKING:
    from collections.abc import Sequence

if TYPE_CHECKING:
    from specsuite.schema import Action, Hook, Metadata, Outcome, SpecNode

log = logging.getLogger(__name__)

CANCELLED_REASON = 'Run cancelled'
TIMEOUT_REASON = 'Run timed out'

#: Ordered hooks accumulated from enclosing branches.
HookChain: TypeAlias = tuple['Hook', ...]

#: Description path from the root to the current node.
Path: TypeAlias = tuple[str, ...]


async def invoke(action: 'Action') -> None:
    """Call an action and await its result when it is awaitable."""
    result = action()
    if isawaitable(result):
        await result


class ExecutionReport(SchemaModel):
    """Outcome forest of a run together with its statistics."""

    results: tuple[OutcomeNode, ...] = ()
    summary: ExecutionSummary = Field(default_factory=ExecutionSummary)

    cancelled: bool = Field(
        default=False,
        title='Cancelled',
        description=(
            'Set when the run was interrupted. Examples that never '
            'started are omitted from the results.'
        ),
    )


class RunState:
    """Mutable state of a single run.

    A new instance is created for every run and passed down the walk,
    so concurrent or nested runs never share state.
    """

    def __init__(self, scope: asyncio.Timeout | None = None) -> None:
        """Initialize run state.

        Args:
            scope: Timeout scope enforcing the run deadline.
        """
        self.scope = scope
        self.cancelled = False
        self.reason = CANCELLED_REASON

    def cancel(self) -> None:
        """Record a cancellation and its reason."""
        if self.cancelled:
            return

        self.cancelled = True
        if self.scope is not None and self.scope.expired():
            self.reason = TIMEOUT_REASON

        log.warning('%s, abandoning remaining examples', self.reason)

    @property
    def timed_out(self) -> bool:
        """Whether the run was interrupted by its own deadline."""
        return self.reason == TIMEOUT_REASON


class Executor:
    """Sequential executor of specification forests.

    Examples run strictly one after another in declaration order; every
    action and hook is awaited to completion before the next one starts.
    """

    def __init__(self, *, timeout: float | None = None) -> None:
        """Initialize an executor.

        Args:
            timeout: Optional limit for the whole run, in seconds.
        """
        self.timeout = timeout

    def run(self, nodes: 'Sequence[SpecNode]') -> ExecutionReport:
        """Execute a forest in a new event loop."""
        return asyncio.run(self.execute(nodes))

    async def execute(self, nodes: 'Sequence[SpecNode]') -> ExecutionReport:
        """Execute a forest and summarize the results.

        Args:
            nodes: Root forest, already filtered.

        Returns:
            The outcome forest, statistics and cancellation flag.

        Raises:
            ConfigurationError: If the forest is malformed. Nothing
                has been executed in that case.
        """
        validate_forest(nodes)

        log.info('Running %d example(s)', sum(node.count_leaves() for node in nodes))

        started = perf_counter()
        async with asyncio.timeout(self.timeout) as scope:
            state = RunState(scope)
            results = await self.execute_nodes(nodes, state=state)
        duration = timedelta(seconds=perf_counter() - started)

        summary = ExecutionSummary.from_results(results, duration)
        log.info('Finished: %s', summary.format())

        return ExecutionReport(
            results=tuple(results),
            summary=summary,
            cancelled=state.cancelled,
        )

    async def execute_nodes(self, nodes: 'Sequence[SpecNode]', *,
                            state: RunState | None = None) -> list[OutcomeNode]:
        """Execute root nodes in order, without summarizing.

        Args:
            nodes: Root forest.
            state: Run state; a fresh one is created when omitted.

        Returns:
            Outcome nodes of the nodes that started.
        """
        if state is None:
            state = RunState()

        results: list[OutcomeNode] = []
        for node in nodes:
            if state.cancelled:
                break
            results.append(await self.execute_node(node, (), (), state=state))

        return results

    async def execute_node(self, node: 'SpecNode', pre: HookChain, post: HookChain, *,
                           state: RunState, path: Path = ()) -> OutcomeNode:
        """Execute a node with the hook chains of its ancestors."""
        path = (*path, node.description)

        if isinstance(node, Branch):
            return await self.execute_branch(node, pre, post, state=state, path=path)

        return await self.execute_leaf(node, pre, post, state=state, path=path)

    async def execute_branch(self, node: Branch, pre: HookChain, post: HookChain, *,
                             state: RunState, path: Path) -> BranchResult:
        """Execute a group between its `before_all` and `after_all` hooks.

        A failing `before_all` hook prevents every child from running;
        `after_all` hooks run regardless. Failures of both are reported
        as synthetic entries around the child results.
        """
        results: list[OutcomeNode] = []

        if not node.children:
            return BranchResult(description=node.description, metadata=node.metadata)

        if await self.run_before_all(node, results, state=state, path=path):
            child_pre = (*pre, *node.hooks.before_each)
            child_post = (*node.hooks.after_each, *post)

            for child in node.children:
                if state.cancelled:
                    break
                results.append(await self.execute_node(
                    child,
                    child_pre,
                    child_post,
                    state=state,
                    path=path,
                ))

        await self.run_after_all(node, results, state=state, path=path)

        return BranchResult(
            description=node.description,
            children=tuple(results),
            metadata=node.metadata,
        )

    async def run_before_all(self, node: Branch, results: list[OutcomeNode], *,
                             state: RunState, path: Path) -> bool:
        """Run `before_all` hooks until the first failure.

        Returns:
            True when every hook succeeded.
        """
        for hook in node.hooks.before_all:
            if (error := await self.guard(hook, state)) is not None:
                results.append(self.hook_entry(
                    HookPhase.BEFORE_ALL,
                    error,
                    node.metadata,
                    state=state,
                    path=path,
                ))
                return False

        return True

    async def run_after_all(self, node: Branch, results: list[OutcomeNode], *,
                            state: RunState, path: Path) -> None:
        """Run every `after_all` hook, reporting each failure."""
        for hook in node.hooks.after_all:
            if (error := await self.guard(hook, state)) is not None:
                results.append(self.hook_entry(
                    HookPhase.AFTER_ALL,
                    error,
                    node.metadata,
                    state=state,
                    path=path,
                ))

    async def execute_leaf(self, node: Leaf, pre: HookChain, post: HookChain, *,
                           state: RunState, path: Path) -> LeafResult:
        """Execute an example between its accumulated hooks."""
        started = perf_counter()

        if node.skipped:
            return LeafResult(
                description=node.description,
                outcome=Skipped(reason=node.skip_reason),
                metadata=node.metadata,
            )

        outcome = await self.run_leaf(node, pre, post, state=state, path=path)
        elapsed = timedelta(seconds=perf_counter() - started)

        log.debug('%s: %s', ' > '.join(path), outcome.status)

        return LeafResult(
            description=node.description,
            outcome=outcome,
            duration=elapsed,
            metadata=node.metadata,
        )

    async def run_leaf(self, node: Leaf, pre: HookChain, post: HookChain, *,
                       state: RunState, path: Path) -> 'Outcome':
        """Run pre hooks, the action and post hooks of an example.

        The first failure decides the outcome. Post hooks always run;
        once the outcome is decided their failures are only logged.
        """
        if await self.guard(partial(asyncio.sleep, 0), state) is not None:
            return Cancelled(reason=state.reason)

        for hook in pre:
            if (error := await self.guard(hook, state)) is not None:
                await self.run_cleanup(post, state=state, path=path)
                return self.hook_outcome(HookPhase.BEFORE_EACH, error, node.metadata,
                                         state=state, path=path)

        outcome: Outcome = PASSED
        if (error := await self.guard(node.action, state)) is not None:
            outcome = self.action_outcome(error, node.metadata, state=state, path=path)

        for hook in post:
            if (error := await self.guard(hook, state)) is None:
                continue
            if isinstance(outcome, Passed):
                outcome = self.hook_outcome(HookPhase.AFTER_EACH, error, node.metadata,
                                            state=state, path=path)
            else:
                log.debug('Suppressed afterEach failure of %s: %r', ' > '.join(path), error)

        return outcome

    async def run_cleanup(self, post: HookChain, *, state: RunState, path: Path) -> None:
        """Run post hooks after a failed pre hook, logging their failures only."""
        for hook in post:
            if (error := await self.guard(hook, state)) is not None:
                log.debug('Suppressed afterEach failure of %s: %r', ' > '.join(path), error)

    async def guard(self, action: 'Action', state: RunState) -> BaseException | None:
        """Await an action and capture what it raised.

        `KeyboardInterrupt` and `SystemExit` propagate; cancellation is
        recorded on the run state. An external cancel request is consumed
        here, so the task running the executor can keep using
        `asyncio.timeout` or task groups afterwards. A request issued by
        the run deadline is released by the timeout scope itself.

        Returns:
            The captured exception, or None on success.
        """
        try:
            await invoke(action)
        except asyncio.CancelledError as error:
            state.cancel()
            if not state.timed_out and (task := asyncio.current_task()) is not None:
                task.uncancel()
            return error
        except Exception as error:  # noqa: BLE001
            return error

        return None

    def action_outcome(self, error: BaseException, metadata: 'Metadata', *,
                       state: RunState, path: Path) -> 'Outcome':
        """Convert an exception raised by an action into an outcome."""
        if isinstance(error, asyncio.CancelledError):
            return Cancelled(reason=state.reason)

        return Failed(cause=ActionFailure.from_metadata(error, metadata, path=list(path)))

    def hook_outcome(self, phase: HookPhase, error: BaseException, metadata: 'Metadata', *,
                     state: RunState, path: Path) -> 'Outcome':
        """Convert an exception raised by a hook into an outcome."""
        if isinstance(error, asyncio.CancelledError):
            return Cancelled(reason=state.reason)

        return Failed(cause=HookFailure.from_metadata(
            error,
            metadata,
            phase=phase,
            path=list(path),
        ))

    def hook_entry(self, phase: HookPhase, error: BaseException, metadata: 'Metadata', *,
                   state: RunState, path: Path) -> LeafResult:
        """Build the synthetic result of a failing branch-level hook."""
        return LeafResult(
            description=phase.entry_name,
            outcome=self.hook_outcome(phase, error, metadata, state=state, path=path),
            metadata=EMPTY_METADATA,
        )


def execute_tests(nodes: 'Sequence[SpecNode]', *, timeout: float | None = None) -> ExecutionReport:
    """Execute an already selected forest in a new event loop.

    Unlike `specsuite.core.run_forest`, no filtering or shuffling happens.
    """
    return Executor(timeout=timeout).run(nodes)
