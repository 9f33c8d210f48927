"""Core runtime: declaration DSL, selection and execution.

It provides:
- the builder functions turning nested declarations into trees;
- pure filters (focus, tags, description) and a seeded shuffle;
- the sequential executor producing outcome trees;
- the aggregator folding outcomes into run statistics.

The primary entry points are the DSL functions (`describe`, `it`,
`before_each`, ...) and `run_forest`, which selects and executes the
examples of a forest.
"""

from .builder import (
    after_all,
    after_each,
    before_all,
    before_each,
    branch,
    context,
    describe,
    fcontext,
    fdescribe,
    fit,
    focused_branch,
    focused_leaf,
    forest,
    it,
    leaf,
    pending,
    skipped_leaf,
    xit,
)
from .executor import ExecutionReport, Executor, execute_tests
from .filters import filter_by_description, filter_by_tags, filter_focused, has_focused, validate_forest
from .runner import execute_forest, prepare_forest, run_forest
from .shuffle import shuffle
from .summary import ExecutionSummary, collect_outcomes, summarize

__all__ = (
    'ExecutionReport',
    'ExecutionSummary',
    'Executor',
    'after_all',
    'after_each',
    'before_all',
    'before_each',
    'branch',
    'collect_outcomes',
    'context',
    'describe',
    'execute_forest',
    'execute_tests',
    'fcontext',
    'fdescribe',
    'filter_by_description',
    'filter_by_tags',
    'filter_focused',
    'fit',
    'focused_branch',
    'focused_leaf',
    'forest',
    'has_focused',
    'it',
    'leaf',
    'pending',
    'prepare_forest',
    'run_forest',
    'shuffle',
    'skipped_leaf',
    'summarize',
    'validate_forest',
    'xit',
)
