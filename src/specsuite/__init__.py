"""Behavior-driven specification trees and their execution engine.

The `specsuite` package lets examples be declared as nested groups with
lifecycle hooks and runs them with strict ordering guarantees.

Key features:
- immutable specification trees built from `describe`/`it` declarations;
- `before_all`/`before_each`/`after_each`/`after_all` hooks scoped to
  their group, with guaranteed teardown;
- focus (`fit`, `fdescribe`), skip (`xit`), tag and description selection;
- synchronous and asynchronous examples, executed strictly in order;
- structured outcome trees and run statistics for reporters.

Importing the DSL from the package root is the usual entry point::

    from specsuite import describe, it, run_forest
"""

from specsuite.core import (
    ExecutionReport,
    ExecutionSummary,
    Executor,
    after_all,
    after_each,
    before_all,
    before_each,
    context,
    describe,
    fcontext,
    fdescribe,
    fit,
    forest,
    it,
    pending,
    run_forest,
    xit,
)

__all__ = (
    'ExecutionReport',
    'ExecutionSummary',
    'Executor',
    'after_all',
    'after_each',
    'before_all',
    'before_each',
    'context',
    'describe',
    'fcontext',
    'fdescribe',
    'fit',
    'forest',
    'it',
    'pending',
    'run_forest',
    'xit',
)
