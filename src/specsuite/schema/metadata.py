"""Metadata attached to specification nodes and results.

Metadata is an opaque bag from the engine's point of view: it is carried
from declarations to results unchanged and never inspected during a run.
Filters and reporters use it for tags, free-form traits and the source
location of a declaration.
"""

from typing import TYPE_CHECKING

from pydantic import Field, field_validator

from specsuite.models import SchemaModel

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import Self


def normalize_tag(tag: str) -> str | None:
    """Normalize a tag for storage and comparison.

    Args:
        tag: Raw tag value.

    Returns:
        The stripped, lower-cased tag, or None for blank tags.
    """
    tag = tag.strip()
    if not tag:
        return None

    return tag.lower()


def normalize_tags(tags: 'Iterable[str]') -> tuple[str, ...]:
    """Normalize tags preserving first-seen order and dropping duplicates."""
    result: list[str] = []
    for tag in tags:
        normalized = normalize_tag(tag)
        if normalized and normalized not in result:
            result.append(normalized)

    return tuple(result)


class Location(SchemaModel):
    """Source location of a declaration."""

    filename: str = Field(
        title='Filename',
        description='Path of the file containing the declaration.',
    )

    line_num: int = Field(
        ge=1,
        title='Line number',
        description='1-based line number of the declaration.',
    )

    def __str__(self) -> str:
        """Render as `filename:line`."""
        return f'{self.filename}:{self.line_num}'


class Metadata(SchemaModel):
    """Pass-through key/value bag of a node.

    Tags are stored normalized (stripped, lower-cased, unique, in
    declaration order). Traits are arbitrary string pairs.
    """

    tags: tuple[str, ...] = Field(
        default=(),
        title='Tags',
        description='Normalized tags used for selecting examples.',
    )

    traits: dict[str, str] = Field(
        default_factory=dict,
        title='Traits',
        description='Free-form key/value annotations.',
    )

    location: Location | None = Field(
        default=None,
        title='Location',
        description='Declaration site captured by the builder.',
    )

    @field_validator('tags', mode='before')
    @classmethod
    def _normalize_tags(cls, value: 'Iterable[str]') -> tuple[str, ...]:
        if isinstance(value, str):
            value = (value,)
        return normalize_tags(value)

    @classmethod
    def of_tags(cls, *tags: str) -> 'Self':
        """Create metadata containing the supplied tags."""
        return cls(tags=tags)

    def with_tags(self, *tags: str) -> 'Self':
        """Return a copy with tags appended, skipping existing ones."""
        return self.model_copy(update={
            'tags': normalize_tags((*self.tags, *tags)),
        })

    def without_tag(self, tag: str) -> 'Self':
        """Return a copy without the given tag."""
        normalized = normalize_tag(tag)
        return self.model_copy(update={
            'tags': tuple(item for item in self.tags if item != normalized),
        })

    def with_trait(self, key: str, value: str) -> 'Self':
        """Return a copy with a trait set or replaced."""
        return self.model_copy(update={
            'traits': {**self.traits, key: value},
        })

    def with_location(self, location: Location | None) -> 'Self':
        """Return a copy with the declaration site replaced."""
        return self.model_copy(update={'location': location})

    def get_trait(self, key: str) -> str | None:
        """Look up a trait value."""
        return self.traits.get(key)

    def has_tag(self, tag: str) -> bool:
        """Check whether the metadata is tagged with a specific value."""
        normalized = normalize_tag(tag)
        return normalized is not None and normalized in self.tags

    def has_all_tags(self, tags: 'Iterable[str]') -> bool:
        """Check that every given tag is present; blank tags are ignored."""
        return all(tag in self.tags for tag in normalize_tags(tags))

    def has_any_tag(self, tags: 'Iterable[str]') -> bool:
        """Check that at least one of the given tags is present."""
        return any(tag in self.tags for tag in normalize_tags(tags))


#: Metadata of synthetic hook entries and of nodes declared without any.
EMPTY_METADATA = Metadata()
