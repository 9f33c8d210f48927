"""Tests for tree, outcome and result models."""

from datetime import timedelta

import pydantic
import pytest

from specsuite.errors import ActionFailure, HookPhase
from specsuite.schema import (
    EMPTY_HOOKS,
    PASSED,
    Branch,
    BranchResult,
    Cancelled,
    Failed,
    HookSet,
    Leaf,
    LeafResult,
    Location,
    Metadata,
    Skipped,
)


def noop() -> None:
    """Do nothing."""


@pytest.mark.parametrize('tags, expected', (
    pytest.param(('Slow', ' db ', 'slow'), ('slow', 'db'), id='normalized and unique'),
    pytest.param(('', '   '), (), id='blank dropped'),
    pytest.param('smoke', ('smoke',), id='single string'),
))
def test_metadata_tags_normalization(tags: tuple[str, ...] | str,
                                     expected: tuple[str, ...]) -> None:
    """Normalize tags on construction."""
    assert Metadata(tags=tags).tags == expected


def test_metadata_tag_helpers() -> None:
    """Add, remove and query tags without mutating the original."""
    metadata = Metadata.of_tags('api')
    tagged = metadata.with_tags('DB', 'api')

    assert metadata.tags == ('api',)
    assert tagged.tags == ('api', 'db')
    assert tagged.has_tag('Db')
    assert tagged.has_all_tags(['api', 'db'])
    assert not tagged.has_all_tags(['api', 'slow'])
    assert tagged.has_any_tag(['slow', 'api'])
    assert not tagged.has_tag('  ')
    assert tagged.without_tag('API').tags == ('db',)


def test_metadata_traits() -> None:
    """Set and read traits."""
    metadata = Metadata().with_trait('owner', 'payments')

    assert metadata.get_trait('owner') == 'payments'
    assert metadata.get_trait('missing') is None
    assert Metadata().traits == {}


def test_location_string() -> None:
    """Render a location as `filename:line`."""
    assert str(Location(filename='specs.py', line_num=12)) == 'specs.py:12'


def test_nodes_are_immutable() -> None:
    """Reject attribute assignment on built nodes."""
    node = Leaf(description='example', action=noop)

    with pytest.raises(pydantic.ValidationError):
        node.description = 'changed'  # type: ignore[misc]


def test_leaf_requires_callable_action() -> None:
    """Reject non-callable actions."""
    with pytest.raises(pydantic.ValidationError):
        Leaf(description='example', action='not callable')  # type: ignore[arg-type]


def test_nodes_counting() -> None:
    """Count leaves and branches of a tree."""
    tree = Branch(description='root', children=(
        Leaf(description='a', action=noop),
        Branch(description='nested', children=(
            Leaf(description='b', action=noop),
            Leaf(description='c', action=noop),
        )),
        Branch(description='empty'),
    ))

    assert tree.count_leaves() == 3
    assert tree.count_branches() == 3
    assert tree.children[0].count_branches() == 0


def test_node_metadata_copies() -> None:
    """Return updated copies when changing node metadata."""
    node = Leaf(description='example', action=noop)
    tagged = node.with_tags('smoke').with_trait('ticket', 'BUG-1')

    assert node.metadata == Metadata()
    assert tagged.metadata.tags == ('smoke',)
    assert tagged.metadata.get_trait('ticket') == 'BUG-1'
    assert tagged.action is node.action


def test_hook_set_add_keeps_order() -> None:
    """Append hooks per phase in registration order."""
    def first() -> None:
        """First hook."""

    def second() -> None:
        """Second hook."""

    hooks = EMPTY_HOOKS.add(HookPhase.BEFORE_EACH, first).add(HookPhase.BEFORE_EACH, second)

    assert hooks.before_each == (first, second)
    assert hooks.for_phase(HookPhase.AFTER_ALL) == ()
    assert not hooks.is_empty
    assert EMPTY_HOOKS.is_empty
    assert HookSet() == EMPTY_HOOKS


def test_result_outcomes_iteration() -> None:
    """Yield leaf outcomes of a result tree in order."""
    failure = Failed(cause=ActionFailure(ValueError('boom')))
    tree = BranchResult(description='root', children=(
        LeafResult(description='a', outcome=PASSED, duration=timedelta(seconds=1)),
        BranchResult(description='nested', children=(
            LeafResult(description='b', outcome=failure),
            LeafResult(description='c', outcome=Skipped(reason='later')),
        )),
        LeafResult(description='d', outcome=Cancelled()),
    ))

    assert [outcome.status for outcome in tree.iter_outcomes()] == [
        'passed',
        'failed',
        'skipped',
        'cancelled',
    ]


def test_outcome_discriminator() -> None:
    """Validate outcomes by their status."""
    result = LeafResult.model_validate({
        'description': 'example',
        'outcome': {'status': 'skipped', 'reason': 'flaky'},
    })

    assert result.outcome == Skipped(reason='flaky')
    assert result.duration == timedelta(0)
