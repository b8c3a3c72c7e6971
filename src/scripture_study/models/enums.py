"""Enumerations for the scripture_study data model."""

from __future__ import annotations

from enum import Enum


class EntityCategory(str, Enum):
    """Category of an entity a verse can link to.

    The set is closed: ``verse_links.entity_type`` must hold one of these
    values, and each value owns exactly one identifier prefix.
    """

    PERSON = "person"
    PLACE = "place"
    TOPIC = "topic"
    EVENT = "event"
    LEXICON = "lexicon"

    @property
    def prefix(self) -> str:
        """Identifier prefix (without the dash), e.g. ``PER``."""
        return _CATEGORY_PREFIXES[self]


class UidKind(str, Enum):
    """What an identifier refers to, as told by its prefix."""

    VERSE = "verse"
    PERSON = "person"
    PLACE = "place"
    TOPIC = "topic"
    EVENT = "event"
    LEXICON = "lexicon"

    @property
    def prefix(self) -> str:
        return _KIND_PREFIXES[self]

    @property
    def category(self) -> EntityCategory | None:
        """The link category for this kind; verses are not linkable."""
        if self is UidKind.VERSE:
            return None
        return EntityCategory(self.value)


_CATEGORY_PREFIXES: dict[EntityCategory, str] = {
    EntityCategory.PERSON: "PER",
    EntityCategory.PLACE: "PLC",
    EntityCategory.TOPIC: "TOP",
    EntityCategory.EVENT: "EVT",
    EntityCategory.LEXICON: "LEX",
}

_KIND_PREFIXES: dict[UidKind, str] = {
    UidKind.VERSE: "VR",
    **{UidKind(category.value): prefix for category, prefix in _CATEGORY_PREFIXES.items()},
}
