"""Core exception hierarchy.

This module defines the error and warning types used across the library.
Malformed specification trees are reported with `ConfigurationError`
before a run starts. Failures of leaf actions and hooks are captured as
`ExecutionFailure` values and stored inside outcomes; they are never
raised out of the execution engine.
"""

from enum import StrEnum
from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from yaml import dump

if TYPE_CHECKING:
    from typing import Self

if TYPE_CHECKING:
    from pydantic import ValidationError

if TYPE_CHECKING:
    from specsuite.schema.metadata import Metadata

SNIPPET_ELLIPSIS = f' ...{linesep}'
SNIPPET_INDENT = 2

FORMAT_REPLACER = '<runtime object>'
FORMAT_FILENAME = '<unknown>'
FORMAT_INDENT = 4

MAPPINGS = (dict,)
SCALARS = (str, bytes, int, float, bool)
SEQUENCES = (list, tuple, set, frozenset)


class HookPhase(StrEnum):
    """Lifecycle phase a hook is registered for."""

    BEFORE_ALL = 'beforeAll'
    BEFORE_EACH = 'beforeEach'
    AFTER_EACH = 'afterEach'
    AFTER_ALL = 'afterAll'

    @property
    def entry_name(self) -> str:
        """Description of the synthetic result entry for this phase."""
        return f'{self.value} hook'


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Name of the source file where the node was declared.
    filename: str | None
    #: Line number of the declaration (1-based).
    line_num: int | None

    #: Descriptions from the root down to the failing node.
    path: list[str] | None
    #: Hook phase, when the failure happened inside a hook.
    phase: HookPhase | None

    #: Underlying exception that triggered formatting.
    error: BaseException | None
    #: Serializable element associated with the error.
    element: Any


class ErrorFormatter:
    """Utility class for formatting specification errors.

    Produces human-readable messages with optional declaration site,
    description path and a YAML snippet of the related element.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location and data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        message += linesep
        message += cls.get_location_string(context, indent=FORMAT_INDENT)
        message += cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        return message.rstrip()

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format declaration site and description path.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string with filename, line, phase and
            description path when available.
        """
        indent = cls._ensure_indent(indent)

        filename = context.get('filename') or FORMAT_FILENAME
        message = f'{indent}in "{filename}"'
        if (line_num := context.get('line_num')) is not None:
            message += f', line {line_num}'
        message += linesep

        if path := context.get('path'):
            message += f'{indent}at {" > ".join(path)}'
            if phase := context.get('phase'):
                message += f' ({phase.entry_name})'
            message += linesep

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a YAML snippet of the element attached to the context.

        Args:
            context: Error context containing element data.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted multi-line snippet, or an empty string
            if no element is available.
        """
        indent = cls._ensure_indent(indent)

        if not (element := context.get('element')):
            return ''

        snippet = f'{indent}{SNIPPET_ELLIPSIS}'
        snippet += cls._make_yaml(element, indent)
        snippet += linesep

        return snippet

    @classmethod
    def _filter_unsafe(cls, value: Any) -> Any:  # noqa: ANN401
        """Recursively replace non-serializable values with a placeholder.

        Args:
            value: Arbitrary value to sanitize.

        Returns:
            A YAML-safe representation of the value.
        """
        if value is None or isinstance(value, SCALARS):
            return value

        if isinstance(value, MAPPINGS):
            return {
                str(key): cls._filter_unsafe(item)
                for key, item in value.items()
            }

        if isinstance(value, SEQUENCES):
            return [cls._filter_unsafe(item) for item in value]

        return FORMAT_REPLACER

    @classmethod
    def _make_yaml(cls, value: Any, indent: str = '') -> str:  # noqa: ANN401
        """Serialize a sanitized value to an indented YAML string."""
        data = dump(
            cls._filter_unsafe(value),
            indent=SNIPPET_INDENT,
            sort_keys=False,
        )

        return cls._make_indent(data, indent)

    @staticmethod
    def _make_indent(value: str, indent: str) -> str:
        """Indent every non-blank line of a multi-line string."""
        if not indent:
            return value

        return linesep.join(
            f'{indent}{line}'
            for line in value.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation given as a string or number of spaces."""
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class SpecWarning(UserWarning):
    """Warning emitted for non-fatal specification issues.

    Used, for example, when focus markers restrict a run to a subset
    of the declared examples.
    """


class SpecError(Exception, ErrorFormatter):
    """Base exception for all specsuite errors.

    All custom exceptions of the library inherit from this class to allow
    unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Optional formatting context.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return self.format(self.message, self.context)

    @staticmethod
    def context_from_metadata(metadata: 'Metadata | None', **extra: Any) -> ErrorContext:  # noqa: ANN401
        """Build an error context from node metadata.

        Args:
            metadata: Metadata of the node related to the error.
            **extra: Additional `ErrorContext` fields.

        Returns:
            Error context with declaration site and metadata snippet.
        """
        context = ErrorContext(**extra)  # type: ignore[typeddict-item]
        if metadata is None:
            return context

        if metadata.location:
            context['filename'] = metadata.location.filename
            context['line_num'] = metadata.location.line_num

        element = metadata.model_dump(exclude={'location'}, exclude_defaults=True)
        if element:
            context['element'] = element

        return context


class ConfigurationError(SpecError):
    """Error raised when a specification tree is malformed.

    This is the only error the library raises on its own: it is reported
    at declaration time by the builder, or before a run starts by
    forest validation. No test code has been executed at that point.
    """

    @classmethod
    def from_pydantic_error(cls, error: 'ValidationError', *,
                            description: str | None = None) -> 'Self':
        """Create a configuration error from a Pydantic validation failure.

        Only the first reported problem is surfaced; it is enough to point
        at the offending declaration.

        Args:
            error: ValidationError raised while building a node.
            description: Description of the node being built.

        Returns:
            ConfigurationError describing the validation failure.
        """
        message = 'Invalid specification'
        if description:
            message += f' {description!r}'

        for item in error.errors(include_url=False, include_input=False):
            location = '.'.join(str(key) for key in item['loc'])
            detail = (item.get('msg') or '').strip()
            message += f'{linesep}{" " * FORMAT_INDENT}{location}: {detail}'
            break

        return cls(message)


class ExecutionFailure(SpecError):
    """Failure captured while running a leaf or a hook.

    Instances are not raised by the engine; they are stored as the cause
    of a `Failed` outcome. The exception raised by user code is kept in
    `original_cause` and chained as `__cause__`.
    """

    def __init__(self, original_cause: BaseException, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize a captured failure.

        Args:
            original_cause: Exception raised by user code.
            context: Optional formatting context.
        """
        self.original_cause = original_cause

        super().__init__(self.describe(original_cause), context=context)

        self.__cause__ = original_cause

    def describe(self, original_cause: BaseException) -> str:
        """Build the headline message for a failure."""
        return f'{original_cause!r}'

    @classmethod
    def from_metadata(cls, original_cause: BaseException,
                      metadata: 'Metadata | None' = None, *,
                      path: list[str] | None = None) -> 'Self':
        """Create a failure bound to the node it happened in.

        Args:
            original_cause: Exception raised by user code.
            metadata: Metadata of the affected node.
            path: Description path of the affected node.

        Returns:
            A captured failure with formatting context.
        """
        context = cls.context_from_metadata(metadata, path=path, error=original_cause)
        return cls(original_cause, context=context)


class ActionFailure(ExecutionFailure):
    """A leaf action raised."""


class HookFailure(ExecutionFailure):
    """A hook raised during one of the lifecycle phases."""

    def __init__(self, original_cause: BaseException, *,
                 phase: HookPhase,
                 context: ErrorContext | None = None) -> None:
        """Initialize a hook failure.

        Args:
            original_cause: Exception raised by the hook.
            phase: Phase of the failing hook.
            context: Optional formatting context.
        """
        self.phase = phase

        if context is not None:
            context = ErrorContext({**context, 'phase': phase})

        super().__init__(original_cause, context=context)

    def describe(self, original_cause: BaseException) -> str:
        """Build the headline message for a hook failure."""
        return f'{self.phase.value} hook failed: {original_cause!r}'

    @classmethod
    def from_metadata(cls, original_cause: BaseException,  # type: ignore[override]
                      metadata: 'Metadata | None' = None, *,
                      phase: HookPhase,
                      path: list[str] | None = None) -> 'Self':
        """Create a hook failure bound to the node it happened in.

        Args:
            original_cause: Exception raised by the hook.
            metadata: Metadata of the node owning or affected by the hook.
            phase: Phase of the failing hook.
            path: Description path of the affected node.

        Returns:
            A captured hook failure with formatting context.
        """
        context = cls.context_from_metadata(metadata, path=path, error=original_cause)
        return cls(original_cause, phase=phase, context=context)
