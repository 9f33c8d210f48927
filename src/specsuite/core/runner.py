"""Run pipeline: selection of examples followed by execution.

Selection happens once, before anything executes:

1. validation of the forest;
2. description filter;
3. tag filter;
4. focus filter;
5. optional seeded shuffle.
"""

import logging
from typing import TYPE_CHECKING
from warnings import warn

from specsuite.errors import ConfigurationError, SpecWarning
from specsuite.settings import RunnerSettings

from .executor import Executor
from .filters import filter_by_description, filter_by_tags, filter_focused, has_focused, validate_forest
from .shuffle import shuffle

if TYPE_CHECKING:
    from collections.abc import Sequence

if TYPE_CHECKING:
    from specsuite.schema import SpecNode

    from .executor import ExecutionReport

log = logging.getLogger(__name__)


def prepare_forest(nodes: 'Sequence[SpecNode]',
                   settings: RunnerSettings | None = None) -> 'Sequence[SpecNode]':
    """Select and order the examples of a run.

    Args:
        nodes: Root forest as declared.
        settings: Selection options; resolved from the environment if omitted.

    Returns:
        The forest to execute.

    Raises:
        ConfigurationError: If the forest is malformed, or contains
            focused nodes while focus is forbidden.
    """
    if settings is None:
        settings = RunnerSettings()

    validate_forest(nodes)

    nodes = filter_by_description(nodes, settings.example)
    nodes = filter_by_tags(nodes, settings.tags)

    if any(has_focused(node) for node in nodes):
        if settings.forbid_focus:
            raise ConfigurationError('Focused examples are present while focus is forbidden')
        warn('Focused examples present, running only focused subtrees',
             category=SpecWarning, stacklevel=2)
        nodes = filter_focused(nodes)

    if settings.seed is not None:
        log.info('Randomized with seed %d', settings.seed)
        nodes = shuffle(nodes, settings.seed)

    return nodes


async def execute_forest(nodes: 'Sequence[SpecNode]',
                         settings: RunnerSettings | None = None) -> 'ExecutionReport':
    """Select examples and execute them in the running event loop."""
    if settings is None:
        settings = RunnerSettings()

    prepared = prepare_forest(nodes, settings)
    return await Executor(timeout=settings.timeout).execute(prepared)


def run_forest(nodes: 'Sequence[SpecNode]',
               settings: RunnerSettings | None = None) -> 'ExecutionReport':
    """Select examples and execute them in a new event loop."""
    if settings is None:
        settings = RunnerSettings()

    prepared = prepare_forest(nodes, settings)
    return Executor(timeout=settings.timeout).run(prepared)
