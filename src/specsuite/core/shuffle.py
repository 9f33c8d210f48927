"""Seeded reordering of a forest.

Running examples in random order exposes hidden dependencies between
them. The order is derived from a seed so a failing order can be
reproduced exactly. Hooks are left untouched.
"""

from random import Random
from typing import TYPE_CHECKING

from specsuite.schema import Branch

if TYPE_CHECKING:
    from collections.abc import Sequence

if TYPE_CHECKING:
    from specsuite.schema import SpecNode


def _shuffle_level(random: Random, nodes: 'Sequence[SpecNode]') -> list['SpecNode']:
    """Shuffle one level, then recurse into branches."""
    shuffled = list(nodes)
    random.shuffle(shuffled)

    return [
        node.with_children(tuple(_shuffle_level(random, node.children)))
        if isinstance(node, Branch) else node
        for node in shuffled
    ]


def shuffle(nodes: 'Sequence[SpecNode]', seed: int) -> list['SpecNode']:
    """Shuffle siblings at every level of a forest.

    Args:
        nodes: Root forest.
        seed: Seed of the pseudo-random generator.

    Returns:
        A reordered forest; the same seed always yields the same order.
    """
    return _shuffle_level(Random(seed), nodes)
