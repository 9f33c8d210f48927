"""Tests configurations and fixtures."""

from typing import TYPE_CHECKING

import pytest

from specsuite.core import Executor

if TYPE_CHECKING:
    from collections.abc import Callable


@pytest.fixture
def calls() -> list[str]:
    """Provide an ordered journal of hook and action invocations."""
    return []


@pytest.fixture
def record(calls: list[str]) -> 'Callable[[str], Callable[[], None]]':
    """Provide a factory of actions appending a label to `calls`.

    The produced actions are plain synchronous callables, usable both
    as hooks and as example bodies.
    """
    def factory(label: str) -> 'Callable[[], None]':
        def action() -> None:
            calls.append(label)

        return action

    return factory


@pytest.fixture
def explode(calls: list[str]) -> 'Callable[[str], Callable[[], None]]':
    """Provide a factory of actions recording a label, then raising.

    Each produced action raises a `RuntimeError` whose message is the
    label, so tests can check which failure was reported.
    """
    def factory(label: str) -> 'Callable[[], None]':
        def action() -> None:
            calls.append(label)
            raise RuntimeError(label)

        return action

    return factory


@pytest.fixture
def executor() -> Executor:
    """Provide an executor without timeout."""
    return Executor()
