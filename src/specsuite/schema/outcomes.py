"""Outcome of a single executed example.

An outcome is a discriminated union over the `status` field. Failures
always carry a typed exception, never a bare message.
"""

from typing import Annotated, Literal

from pydantic import Field

from specsuite.errors import ExecutionFailure  # noqa: TC001
from specsuite.models import SchemaModel

#: Default reason for examples declared as pending.
PENDING_REASON = 'Marked as pending'


class Passed(SchemaModel):
    """The example completed without raising."""

    status: Literal['passed'] = 'passed'


class Failed(SchemaModel):
    """The example or one of its hooks raised."""

    status: Literal['failed'] = 'failed'

    cause: ExecutionFailure = Field(
        title='Failure cause',
        description=(
            'Captured failure. The exception raised by user code '
            'is available as `cause.original_cause`.'
        ),
    )


class Skipped(SchemaModel):
    """The example was declared skipped and its action never ran."""

    status: Literal['skipped'] = 'skipped'

    reason: str = Field(
        default=PENDING_REASON,
        title='Skip reason',
    )


class Cancelled(SchemaModel):
    """The example was interrupted by cancellation or a run timeout."""

    status: Literal['cancelled'] = 'cancelled'

    reason: str = Field(
        default='Run cancelled',
        title='Cancellation reason',
    )


#: Tri-state result of an example, extended with cancellation.
Outcome = Annotated[
    Passed | Failed | Skipped | Cancelled,
    Field(discriminator='status'),
]

#: Shared instance for successful examples.
PASSED = Passed()
