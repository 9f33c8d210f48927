"""Base Pydantic models for specification elements.

This module defines the foundational model classes used by the tree,
outcome and settings structures. It enforces immutability and strict
schema validation so that a built specification tree is deterministic
and cannot change between declaration and execution.
"""

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for all specification elements.

    This class serves as the root for all Pydantic models representing
    specification nodes, hook sets, metadata, outcomes and results.

    Design principles enforced by this model:
        - Immutability: nodes cannot be modified after creation.
          A tree built at declaration time is exactly the tree that runs.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos in declarations.

    Arbitrary types are allowed because actions, hooks and failure
    causes are plain Python callables and exceptions.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for runner settings.

    This class serves as the root for all settings models responsible for
    resolving runtime configuration (for example, environment variables,
    CI-provided values, or local overrides).

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra fields are ignored.
          This allows the surrounding environment to contain unrelated
          variables without breaking configuration resolution.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
