"""Runner configuration resolved from the environment.

Every option can be provided through a `SPECSUITE_`-prefixed
environment variable, for example `SPECSUITE_SEED=42` or
`SPECSUITE_TAGS='["slow", "db"]'`. Explicit keyword arguments (as passed
by the command line) take precedence over the environment.
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from specsuite.models import SettingsModel


class RunnerSettings(SettingsModel):
    """Selection and execution options of a run."""

    model_config = SettingsConfigDict(
        env_prefix='SPECSUITE_',
        frozen=True,
        extra='ignore',
    )

    seed: int | None = Field(
        default=None,
        title='Shuffle seed',
        description=(
            'When set, siblings are shuffled at every level using this seed. '
            'The same seed always reproduces the same order.'
        ),
    )

    tags: tuple[str, ...] = Field(
        default=(),
        title='Required tags',
        description='Only examples carrying all of these tags (inherited included) run.',
    )

    example: str | None = Field(
        default=None,
        title='Description filter',
        description='Case-insensitive substring of the description path.',
    )

    timeout: float | None = Field(
        default=None,
        gt=0,
        title='Run timeout',
        description='Limit for the whole run, in seconds.',
    )

    forbid_focus: bool = Field(
        default=False,
        title='Forbid focus',
        description=(
            'Reject forests containing focused nodes instead of narrowing '
            'the run. Intended for CI, where a forgotten focus marker would '
            'silently disable most of the suite.'
        ),
    )
