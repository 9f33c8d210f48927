"""Forest selection transforms.

All filters are pure: they return new forests sharing untouched
subtrees, and never modify hooks of the branches they keep. A kept
branch still governs its surviving descendants through its hooks.
"""

from typing import TYPE_CHECKING

from specsuite.errors import ConfigurationError
from specsuite.schema import Branch, Leaf
from specsuite.schema.metadata import normalize_tags

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

if TYPE_CHECKING:
    from specsuite.schema import SpecNode


def has_focused(node: 'SpecNode') -> bool:
    """Check whether a node is focused or has a focused descendant."""
    if node.focused:
        return True

    if isinstance(node, Branch):
        return any(has_focused(child) for child in node.children)

    return False


def _prune_focused(node: 'SpecNode') -> 'SpecNode | None':
    """Keep focused subtrees and the branches leading to them."""
    if node.focused:
        return node

    if isinstance(node, Leaf):
        return None

    children = tuple(
        child
        for child in map(_prune_focused, node.children)
        if child is not None
    )
    if not children:
        return None

    return node.with_children(children)


def filter_focused(nodes: 'Sequence[SpecNode]') -> 'Sequence[SpecNode]':
    """Restrict a forest to focused nodes.

    When no node of the forest is focused the forest is returned as is.
    Otherwise focused nodes are kept whole, unfocused leaves are dropped
    and unfocused branches survive only with their focused descendants.

    Args:
        nodes: Root forest.

    Returns:
        The filtered forest.
    """
    if not any(has_focused(node) for node in nodes):
        return nodes

    return [
        node
        for node in map(_prune_focused, nodes)
        if node is not None
    ]


def filter_by_tags(nodes: 'Sequence[SpecNode]', tags: 'Iterable[str]') -> 'Sequence[SpecNode]':
    """Keep examples carrying every requested tag.

    Tags of a branch are inherited by all of its descendants. A branch is
    kept when it carries every tag itself or when any child survives.

    Args:
        nodes: Root forest.
        tags: Required tags; blank tags are ignored.

    Returns:
        The filtered forest, or the original one when no tag is required.
    """
    required = normalize_tags(tags)
    if not required:
        return nodes

    def traverse(node: 'SpecNode', inherited: frozenset[str]) -> 'SpecNode | None':
        combined = inherited.union(node.metadata.tags)
        satisfies = all(tag in combined for tag in required)

        if isinstance(node, Leaf):
            return node if satisfies else None

        children = tuple(
            child
            for child in (traverse(item, combined) for item in node.children)
            if child is not None
        )
        if satisfies or children:
            return node.with_children(children)

        return None

    return [
        node
        for node in (traverse(item, frozenset()) for item in nodes)
        if node is not None
    ]


def filter_by_description(nodes: 'Sequence[SpecNode]', pattern: str | None) -> 'Sequence[SpecNode]':
    """Keep examples whose description path contains a pattern.

    The description path is the space-separated chain of descriptions
    from the root down to a node; matching is case-insensitive. A
    matching branch is kept whole.

    Args:
        nodes: Root forest.
        pattern: Substring to look for.

    Returns:
        The filtered forest, or the original one for an empty pattern.
    """
    if not pattern:
        return nodes

    needle = pattern.casefold()

    def traverse(node: 'SpecNode', prefix: str) -> 'SpecNode | None':
        path = f'{prefix} {node.description}' if prefix else node.description
        if needle in path.casefold():
            return node

        if isinstance(node, Leaf):
            return None

        children = tuple(
            child
            for child in (traverse(item, path) for item in node.children)
            if child is not None
        )
        if not children:
            return None

        return node.with_children(children)

    return [
        node
        for node in (traverse(item, '') for item in nodes)
        if node is not None
    ]


def validate_forest(nodes: 'Iterable[object]') -> None:
    """Reject anything that is not a specification node.

    Builders already validate what they produce; this check guards
    forests assembled by hand or supplied by discovery.

    Args:
        nodes: Root forest.

    Raises:
        ConfigurationError: If the forest contains foreign objects.
    """
    for index, node in enumerate(nodes):
        if not isinstance(node, (Leaf, Branch)):
            raise ConfigurationError(
                f'Entry {index} is not a specification node: {node!r}',
            )
        if isinstance(node, Branch):
            validate_forest(node.children)
