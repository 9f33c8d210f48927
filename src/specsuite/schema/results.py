"""Outcome tree produced by a run.

Result nodes mirror the shape of the executed specification tree. A
fresh tree is produced for every run. Failures of branch-level hooks
appear as synthetic leaf results named after the hook phase.
"""

from datetime import timedelta
from typing import TYPE_CHECKING, Annotated, Literal

from pydantic import Field

from specsuite.models import SchemaModel

from .metadata import EMPTY_METADATA, Metadata
from .outcomes import Outcome  # noqa: TC001

if TYPE_CHECKING:
    from collections.abc import Iterator


class LeafResult(SchemaModel):
    """Result of a single example or of a failing branch-level hook."""

    kind: Literal['leaf'] = 'leaf'

    description: str
    outcome: Outcome

    duration: timedelta = Field(
        default=timedelta(0),
        title='Duration',
        description='Elapsed time of the example, hooks included.',
    )

    metadata: Metadata = EMPTY_METADATA

    def iter_outcomes(self) -> 'Iterator[Outcome]':
        """Yield the outcome of this result."""
        yield self.outcome


class BranchResult(SchemaModel):
    """Results of a group, in execution order."""

    kind: Literal['branch'] = 'branch'

    description: str
    children: tuple['OutcomeNode', ...] = ()
    metadata: Metadata = EMPTY_METADATA

    def iter_outcomes(self) -> 'Iterator[Outcome]':
        """Yield outcomes of every leaf result of this subtree."""
        for child in self.children:
            yield from child.iter_outcomes()


#: A node of the outcome tree.
OutcomeNode = Annotated[
    LeafResult | BranchResult,
    Field(discriminator='kind'),
]

BranchResult.model_rebuild()
