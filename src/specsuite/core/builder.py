"""Declaration DSL for specification trees.

The functions of this module turn nested declarations into immutable
trees::

    specs = forest([
        describe('stack', [
            before_each(reset),
            it('starts empty', lambda: ...),
            context('after push', [
                it('is not empty', lambda: ...),
                xit('pops in LIFO order', lambda: ...),
            ]),
        ]),
    ])

Hook registrations may appear anywhere among the children of a group;
they are removed from the exposed children and concatenated, per phase,
into the group hooks in registration order. The declaration site of
every node is captured into its metadata.
"""

from inspect import currentframe
from typing import TYPE_CHECKING, TypeAlias, TypeVar

from pydantic import ValidationError

from specsuite.errors import ConfigurationError, HookPhase
from specsuite.schema import (
    EMPTY_HOOKS,
    EMPTY_METADATA,
    PENDING_REASON,
    Branch,
    HookRegistration,
    Leaf,
    Location,
    Metadata,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from typing import Any

if TYPE_CHECKING:
    from specsuite.schema import Action, Hook, HookSet, SpecNode

#: Description of the group wrapping hooks declared outside of any group.
ROOT_DESCRIPTION = '<root>'

#: Anything accepted among the children of a group.
Declaration: TypeAlias = 'SpecNode | HookRegistration'


def _caller_location() -> Location | None:
    """Locate the first stack frame outside of this module."""
    frame = currentframe()
    while frame is not None and frame.f_globals.get('__name__') == __name__:
        frame = frame.f_back

    if frame is None:  # pragma: no cover
        return None

    return Location(
        filename=frame.f_code.co_filename,
        line_num=frame.f_lineno,
    )


def _make_metadata(metadata: Metadata | None, tags: 'Iterable[str]') -> Metadata:
    """Merge explicit metadata, tags and the declaration site."""
    result = metadata or EMPTY_METADATA
    if tags:
        result = result.with_tags(*tags)
    if result.location is None:
        result = result.with_location(_caller_location())

    return result


T = TypeVar('T', Leaf, Branch)


def _build(model: type[T], description: str, **fields: 'Any') -> T:
    """Instantiate a node, converting validation errors to configuration errors."""
    try:
        return model(description=description, **fields)
    except ValidationError as error:
        raise ConfigurationError.from_pydantic_error(
            error,
            description=description,
        ) from error


def _register(phase: HookPhase, hook: 'Hook') -> HookRegistration:
    """Create a hook registration, converting validation errors."""
    try:
        return HookRegistration(phase=phase, hook=hook)
    except ValidationError as error:
        raise ConfigurationError.from_pydantic_error(
            error,
            description=phase.entry_name,
        ) from error


def collect_hooks(declarations:'Iterable[Declaration]') -> tuple['HookSet', list['SpecNode']]:
    """Split declarations into a hook set and the remaining children.

    Args:
        declarations: Children declared for a group.

    Returns:
        Hooks folded per phase in registration order, and the
        non-hook children in declaration order.
    """
    hooks = EMPTY_HOOKS
    children: list[SpecNode] = []

    for item in declarations:
        if isinstance(item, HookRegistration):
            hooks = hooks.add(item.phase, item.hook)
        else:
            children.append(item)

    return hooks, children


def leaf(description: str, action: 'Action', *,
         metadata: Metadata | None = None,
         tags: 'Iterable[str]' = ()) -> Leaf:
    """Declare an example.

    Args:
        description: Name of the example.
        action: Zero-argument body; may be a coroutine function.
        metadata: Optional explicit metadata.
        tags: Tags added to the metadata.

    Returns:
        A leaf node.

    Raises:
        ConfigurationError: If the action is not callable.
    """
    return _build(
        Leaf,
        description,
        action=action,
        metadata=_make_metadata(metadata, tags),
    )


def focused_leaf(description: str, action: 'Action', *,
                 metadata: Metadata | None = None,
                 tags: 'Iterable[str]' = ()) -> Leaf:
    """Declare a focused example.

    When any focused node exists in a forest, only focused nodes
    (and everything below focused groups) are executed.
    """
    return _build(
        Leaf,
        description,
        action=action,
        focused=True,
        metadata=_make_metadata(metadata, tags),
    )


def skipped_leaf(description: str, action: 'Action',
                 reason: str = PENDING_REASON, *,
                 metadata: Metadata | None = None,
                 tags: 'Iterable[str]' = ()) -> Leaf:
    """Declare an example that is reported as skipped and never runs.

    The action is kept in the tree so that un-skipping is a one-word
    change, but the engine never invokes it.
    """
    return _build(
        Leaf,
        description,
        action=action,
        skipped=True,
        skip_reason=reason,
        metadata=_make_metadata(metadata, tags),
    )


def branch(description: str, children: 'Sequence[Declaration]', *,
           metadata: Metadata | None = None,
           tags: 'Iterable[str]' = ()) -> Branch:
    """Declare a group of examples.

    Args:
        description: Name of the group.
        children: Nodes and hook registrations, in any order.
        metadata: Optional explicit metadata.
        tags: Tags added to the metadata.

    Returns:
        A branch owning the declared hooks.

    Raises:
        ConfigurationError: If a child is neither a node nor a hook.
    """
    hooks, nodes = collect_hooks(children)

    return _build(
        Branch,
        description,
        hooks=hooks,
        children=tuple(nodes),
        metadata=_make_metadata(metadata, tags),
    )


def focused_branch(description: str, children: 'Sequence[Declaration]', *,
                   metadata: Metadata | None = None,
                   tags: 'Iterable[str]' = ()) -> Branch:
    """Declare a focused group; all of its descendants are kept by focus filtering."""
    hooks, nodes = collect_hooks(children)

    return _build(
        Branch,
        description,
        hooks=hooks,
        children=tuple(nodes),
        focused=True,
        metadata=_make_metadata(metadata, tags),
    )


def before_all(hook: 'Hook') -> HookRegistration:
    """Register a hook run once before the first child of the group."""
    return _register(HookPhase.BEFORE_ALL, hook)


def before_each(hook: 'Hook') -> HookRegistration:
    """Register a hook run before every example of the group."""
    return _register(HookPhase.BEFORE_EACH, hook)


def after_each(hook: 'Hook') -> HookRegistration:
    """Register a hook run after every example of the group."""
    return _register(HookPhase.AFTER_EACH, hook)


def after_all(hook: 'Hook') -> HookRegistration:
    """Register a hook run once after the last child of the group."""
    return _register(HookPhase.AFTER_ALL, hook)


def forest(declarations: 'Sequence[Declaration]') -> list['SpecNode']:
    """Build a root forest.

    Hooks declared outside of any group belong to an implicit root
    group wrapping every top-level node.

    Args:
        declarations: Top-level nodes and hook registrations.

    Returns:
        The root nodes, ready to be executed.
    """
    hooks, nodes = collect_hooks(declarations)
    if hooks.is_empty:
        return nodes

    return [_build(
        Branch,
        ROOT_DESCRIPTION,
        hooks=hooks,
        children=tuple(nodes),
        metadata=_make_metadata(None, ()),
    )]


it = leaf
fit = focused_leaf
xit = pending = skipped_leaf

describe = context = branch
fdescribe = fcontext = focused_branch
