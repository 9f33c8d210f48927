"""Command-line runner for registered specification forests.

Forests are not discovered: each target names a module attribute
holding a node or a sequence of nodes, for example
`myproject.specs:all_specs`.
"""

import logging
import os
import sys
from importlib import import_module
from typing import TYPE_CHECKING

from click import BadParameter, Choice, ClickException, FloatRange, argument, echo, group, option, pass_context
from pydantic import ValidationError

from specsuite.core import run_forest
from specsuite.errors import ConfigurationError
from specsuite.schema import Branch, BranchResult, Failed, Leaf
from specsuite.settings import RunnerSettings

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

if TYPE_CHECKING:
    from click import Context

if TYPE_CHECKING:
    from specsuite.schema import OutcomeNode, SpecNode

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')

STATUS_LABELS = {
    'passed': 'PASS',
    'failed': 'FAIL',
    'skipped': 'SKIP',
    'cancelled': 'CANCEL',
}

INDENT = '  '


def load_target(target: str) -> list['SpecNode']:
    """Resolve a `module:attribute` reference into root nodes.

    Modules are importable from the current working directory, as with
    `python -m specsuite`.

    Args:
        target: Module path and dotted attribute name separated by a colon.

    Returns:
        Root nodes found at the target.

    Raises:
        BadParameter: If the target can not be imported or does not
            hold specification nodes.
    """
    module_name, _, attribute = target.partition(':')
    if not module_name or not attribute:
        raise BadParameter(f'{target!r} is not in the form module:attribute')

    if (cwd := os.getcwd()) not in sys.path:
        sys.path.insert(0, cwd)

    try:
        value = import_module(module_name)
    except ImportError as error:
        raise BadParameter(f'Can not import {module_name!r}: {error}') from error

    for name in attribute.split('.'):
        try:
            value = getattr(value, name)
        except AttributeError as error:
            raise BadParameter(f'{target!r} has no attribute {name!r}') from error

    if isinstance(value, (Leaf, Branch)):
        return [value]

    if isinstance(value, (list, tuple)) and all(isinstance(item, (Leaf, Branch)) for item in value):
        return list(value)

    raise BadParameter(f'{target!r} does not hold specification nodes')


def render_results(nodes: 'Sequence[OutcomeNode]', depth: int = 0) -> 'Iterator[str]':
    """Render an outcome forest as indented lines."""
    indent = INDENT * depth

    for node in nodes:
        if isinstance(node, BranchResult):
            yield f'{indent}{node.description}'
            yield from render_results(node.children, depth + 1)
            continue

        yield f'{indent}{STATUS_LABELS[node.outcome.status]} {node.description}'
        if isinstance(node.outcome, Failed):
            for line in node.outcome.cause.message.splitlines():
                yield f'{indent}{INDENT * 2}{line}'


@group(help='Run behavior-driven specification forests.')
def cli() -> None:
    """Root CLI group for specsuite tools."""
    return None


@cli.command(
    name='run',
    help='Run the forests registered at TARGET (module:attribute).',
)
@argument('targets', metavar='TARGET...', nargs=-1, required=True)
@option('-e', '--example', help='Run only examples whose description path contains this text.')
@option('-t', '--tag', 'tags', multiple=True, help='Run only examples carrying this tag.')
@option('--seed', type=int, help='Shuffle examples using this seed.')
@option('--timeout', type=FloatRange(min=0, min_open=True), help='Cancel the run after this many seconds.')
@option('--forbid-focus', is_flag=True, default=None, help='Fail when focused examples exist.')
@option('--log-level', type=Choice(LOG_LEVELS, case_sensitive=False),
        default='WARNING', show_default=True, help='Logging verbosity.')
@pass_context
def run_specs(ctx: 'Context', targets: tuple[str, ...], log_level: str,
              **overrides: object) -> None:
    """Run specification forests and exit with the run status."""
    logging.basicConfig(
        level=log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )

    try:
        settings = RunnerSettings(**{
            key: value
            for key, value in overrides.items()
            if value is not None and value is not False and value != ()
        })
    except ValidationError as error:
        raise ClickException(f'Invalid runner settings: {error}') from error

    nodes = [node for target in targets for node in load_target(target)]

    try:
        report = run_forest(nodes, settings)
    except ConfigurationError as error:
        raise ClickException(str(error)) from error

    for line in render_results(report.results):
        echo(line)

    echo()
    echo(report.summary.format())
    ctx.exit(report.summary.exit_code)


if __name__ == '__main__':
    cli()
