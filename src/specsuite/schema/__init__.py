"""Specification and outcome tree models.

Defines the immutable Pydantic models describing what is declared
(leaves, branches, hooks, metadata) and what a run produces (outcomes
and result trees). The models carry no execution logic; they are
consumed by the builder, the filters and the executor.
"""

from .metadata import EMPTY_METADATA, Location, Metadata
from .nodes import EMPTY_HOOKS, Action, Branch, Hook, HookRegistration, HookSet, Leaf, SpecNode
from .outcomes import PASSED, PENDING_REASON, Cancelled, Failed, Outcome, Passed, Skipped
from .results import BranchResult, LeafResult, OutcomeNode

__all__ = (
    'EMPTY_HOOKS',
    'EMPTY_METADATA',
    'PASSED',
    'PENDING_REASON',
    'Action',
    'Branch',
    'BranchResult',
    'Cancelled',
    'Failed',
    'Hook',
    'HookRegistration',
    'HookSet',
    'Leaf',
    'LeafResult',
    'Location',
    'Metadata',
    'Outcome',
    'OutcomeNode',
    'Passed',
    'Skipped',
    'SpecNode',
)
