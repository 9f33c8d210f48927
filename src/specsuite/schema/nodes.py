"""Specification tree model.

A specification tree is made of leaves (single examples) and branches
(named groups owning lifecycle hooks). Nodes are frozen Pydantic models:
a tree is built once at declaration time and never mutated afterwards.
Every transformation (filtering, shuffling, re-tagging) produces new
nodes and shares untouched subtrees.
"""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Annotated, Any, Literal

from pydantic import Field

from specsuite.errors import HookPhase
from specsuite.models import SchemaModel

from .metadata import EMPTY_METADATA, Metadata
from .outcomes import PENDING_REASON

if TYPE_CHECKING:
    from typing import Self

#: Zero-argument operation; may return an awaitable that is awaited to completion.
Action = Callable[[], Awaitable[Any] | Any]

#: Hooks share the action contract.
Hook = Action

_PHASE_FIELDS = {
    HookPhase.BEFORE_ALL: 'before_all',
    HookPhase.BEFORE_EACH: 'before_each',
    HookPhase.AFTER_EACH: 'after_each',
    HookPhase.AFTER_ALL: 'after_all',
}


class HookSet(SchemaModel):
    """Ordered lifecycle hooks of a branch.

    Each list keeps registration order. Hooks apply only to the
    subtree of the branch owning them.
    """

    before_all: tuple[Hook, ...] = Field(
        default=(),
        title='Before-all hooks',
        description='Run once before the first child of the branch.',
    )

    before_each: tuple[Hook, ...] = Field(
        default=(),
        title='Before-each hooks',
        description='Run before every example of the subtree, outer to inner.',
    )

    after_each: tuple[Hook, ...] = Field(
        default=(),
        title='After-each hooks',
        description='Run after every example of the subtree, inner to outer.',
    )

    after_all: tuple[Hook, ...] = Field(
        default=(),
        title='After-all hooks',
        description='Run once after the last child of the branch.',
    )

    def for_phase(self, phase: HookPhase) -> tuple[Hook, ...]:
        """Return hooks registered for a phase."""
        return getattr(self, _PHASE_FIELDS[phase])  # type: ignore[no-any-return]

    def add(self, phase: HookPhase, hook: Hook) -> 'Self':
        """Return a copy with a hook appended to a phase."""
        name = _PHASE_FIELDS[phase]
        return self.model_copy(update={
            name: (*getattr(self, name), hook),
        })

    @property
    def is_empty(self) -> bool:
        """Whether no hook is registered at all."""
        return not any(self.for_phase(phase) for phase in HookPhase)


EMPTY_HOOKS = HookSet()


class HookRegistration(SchemaModel):
    """Hook declared among the children of a branch.

    Registrations exist only while a branch is being built; the builder
    folds them into the branch `HookSet`.
    """

    phase: HookPhase
    hook: Hook


class BaseNode(SchemaModel):
    """Fields shared by leaves and branches."""

    description: str = Field(
        title='Description',
        description='Human-readable name of the example or group.',
    )

    metadata: Metadata = Field(
        default=EMPTY_METADATA,
        title='Metadata',
        description='Pass-through data never inspected by the engine.',
    )

    focused: bool = Field(
        default=False,
        title='Focused',
        description=(
            'Declaration-time focus marker. When any node of a forest '
            'is focused, only focused subtrees are executed.'
        ),
    )

    def with_metadata(self, metadata: Metadata) -> 'Self':
        """Return a copy with the metadata replaced."""
        return self.model_copy(update={'metadata': metadata})

    def with_tags(self, *tags: str) -> 'Self':
        """Return a copy with tags added to the metadata."""
        return self.with_metadata(self.metadata.with_tags(*tags))

    def with_trait(self, key: str, value: str) -> 'Self':
        """Return a copy with a metadata trait set."""
        return self.with_metadata(self.metadata.with_trait(key, value))


class Leaf(BaseNode):
    """A single executable example."""

    kind: Literal['leaf'] = 'leaf'

    action: Action = Field(
        title='Action',
        description='Body of the example.',
    )

    skipped: bool = Field(
        default=False,
        title='Skipped',
        description='When set, the action is never invoked.',
    )

    skip_reason: str = Field(
        default=PENDING_REASON,
        title='Skip reason',
    )

    def count_leaves(self) -> int:
        """Number of examples in this subtree."""
        return 1

    def count_branches(self) -> int:
        """Number of groups in this subtree."""
        return 0


class Branch(BaseNode):
    """A named group of examples and nested groups."""

    kind: Literal['branch'] = 'branch'

    hooks: HookSet = Field(
        default=EMPTY_HOOKS,
        title='Hooks',
        description='Lifecycle hooks scoped to this subtree.',
    )

    children: tuple['SpecNode', ...] = Field(
        default=(),
        title='Children',
        description='Child nodes in execution order.',
    )

    def with_children(self, children: 'tuple[SpecNode, ...]') -> 'Self':
        """Return a copy with children replaced; hooks are kept."""
        return self.model_copy(update={'children': children})

    def count_leaves(self) -> int:
        """Number of examples in this subtree."""
        return sum(child.count_leaves() for child in self.children)

    def count_branches(self) -> int:
        """Number of groups in this subtree, including this one."""
        return 1 + sum(child.count_branches() for child in self.children)


#: A node of the specification tree.
SpecNode = Annotated[
    Leaf | Branch,
    Field(discriminator='kind'),
]

Branch.model_rebuild()
