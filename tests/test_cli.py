"""Tests for the command-line runner."""

import sys
from typing import TYPE_CHECKING

import pytest
from click.testing import CliRunner

from specsuite.__main__ import cli
from tests.examples import specs

if TYPE_CHECKING:
    from pathlib import Path

PASSING = 'tests.examples.specs:passing'
FAILING = 'tests.examples.specs:failing'
FOCUSED = 'tests.examples.specs:focused'


@pytest.fixture
def runner(monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    """Provide a CLI runner isolated from runner environment variables."""
    for name in ('SEED', 'TAGS', 'EXAMPLE', 'TIMEOUT', 'FORBID_FOCUS'):
        monkeypatch.delenv(f'SPECSUITE_{name}', raising=False)

    specs.JOURNAL.clear()
    return CliRunner()


def test_run_passing(runner: CliRunner) -> None:
    """Print results and exit successfully."""
    result = runner.invoke(cli, ['run', PASSING])

    assert result.exit_code == 0, result.output
    assert '\n'.join((
        'calculator',
        '  PASS adds',
        '  PASS subtracts',
        '  SKIP divides by zero',
    )) in result.output
    assert '3 examples, 0 failures, 1 skipped' in result.output
    assert specs.JOURNAL == ['setup', 'teardown', 'setup', 'teardown']


def test_run_failing(runner: CliRunner) -> None:
    """Report failure details and exit with an error."""
    result = runner.invoke(cli, ['run', FAILING])

    assert result.exit_code == 1
    assert '  FAIL reads words' in result.output
    assert "AssertionError('arithmetic is broken')" in result.output
    assert 'PASS standalone' in result.output
    assert '3 examples, 1 failures, 0 skipped' in result.output


def test_run_several_targets(runner: CliRunner) -> None:
    """Run the forests of every target in order."""
    result = runner.invoke(cli, ['run', PASSING, FAILING])

    assert result.exit_code == 1
    assert result.output.index('calculator') < result.output.index('parser')
    assert '6 examples, 1 failures, 1 skipped' in result.output


@pytest.mark.parametrize('options, expected', (
    pytest.param(['-t', 'slow'], ['FAIL reads words'], id='tag'),
    pytest.param(['--example', 'standalone'], ['PASS standalone'], id='example'),
    pytest.param(['-e', 'parser', '--tag', 'SLOW'], ['FAIL reads words'], id='both'),
))
def test_run_selection(runner: CliRunner, options: list[str], expected: list[str]) -> None:
    """Narrow the run with tag and description options."""
    result = runner.invoke(cli, ['run', FAILING, *options])

    lines = [
        line.strip()
        for line in result.output.splitlines()
        if line.strip().startswith(('PASS', 'FAIL', 'SKIP'))
    ]
    assert lines == expected


def test_run_seed_from_environment(runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    """Accept settings from the environment."""
    monkeypatch.setenv('SPECSUITE_SEED', '3')

    first = runner.invoke(cli, ['run', PASSING])
    second = runner.invoke(cli, ['run', PASSING, '--seed', '3'])

    assert first.exit_code == 0
    assert first.output.splitlines()[:4] == second.output.splitlines()[:4]


def test_run_focused(runner: CliRunner) -> None:
    """Run only focused examples."""
    with pytest.warns(UserWarning, match='Focused examples'):
        result = runner.invoke(cli, ['run', FOCUSED])

    assert result.exit_code == 0, result.output
    assert 'PASS only this' in result.output
    assert 'not this' not in result.output
    assert '1 examples, 0 failures, 0 skipped' in result.output


def test_run_forbid_focus(runner: CliRunner) -> None:
    """Refuse focused examples when focus is forbidden."""
    result = runner.invoke(cli, ['run', FOCUSED, '--forbid-focus'])

    assert result.exit_code == 1
    assert 'Focused examples are present while focus is forbidden' in result.output
    assert 'PASS' not in result.output


@pytest.mark.parametrize('target, message', (
    pytest.param('tests.examples.specs', 'module:attribute', id='no attribute'),
    pytest.param('tests.examples.missing:forest', 'Can not import', id='no module'),
    pytest.param('tests.examples.specs:missing', "has no attribute 'missing'", id='missing'),
    pytest.param('tests.examples.specs:not_a_forest', 'does not hold specification nodes', id='foreign'),
))
def test_run_invalid_target(runner: CliRunner, target: str, message: str) -> None:
    """Report unusable targets as usage errors."""
    result = runner.invoke(cli, ['run', target])

    assert result.exit_code == 2
    assert message in result.output


def test_run_invalid_timeout(runner: CliRunner) -> None:
    """Reject non-positive timeouts."""
    result = runner.invoke(cli, ['run', PASSING, '--timeout', '0'])

    assert result.exit_code == 2
    assert 'PASS' not in result.output


def test_run_invalid_environment(runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    """Report invalid settings coming from the environment."""
    monkeypatch.setenv('SPECSUITE_TIMEOUT', '-1')

    result = runner.invoke(cli, ['run', PASSING])

    assert result.exit_code == 1
    assert 'Invalid runner settings' in result.output


def test_run_module_from_working_directory(runner: CliRunner, tmp_path: 'Path',
                                           monkeypatch: pytest.MonkeyPatch) -> None:
    """Import targets from the current directory without installing them."""
    (tmp_path / 'local_specs.py').write_text(
        'from specsuite import describe, it\n'
        '\n'
        "forest = describe('local', [it('works', lambda: None)])\n",
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, 'path', [path for path in sys.path if path not in ('', str(tmp_path))])
    monkeypatch.delitem(sys.modules, 'local_specs', raising=False)

    result = runner.invoke(cli, ['run', 'local_specs:forest'])

    assert result.exit_code == 0, result.output
    assert '  PASS works' in result.output
