"""Pydantic records returned by the data access layer.

Records are immutable snapshots of stored rows, normalized so that callers
see identical shapes whichever backend served them.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from scripture_study.models.enums import EntityCategory

DEFAULT_TRANSLATION = "KJV"


def _default_translation(v: Any) -> Any:
    """Absent or empty stored translations read as KJV."""
    if v is None or v == "":
        return DEFAULT_TRANSLATION
    return v


def _none_to_empty(v: Any) -> Any:
    if v is None:
        return ()
    return v


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class VerseRecord(_Record):
    """One verse of one translation."""

    uid: str
    book: str
    chapter: int = Field(ge=1)
    verse: int = Field(ge=1)
    text: str
    translation: Annotated[str, BeforeValidator(_default_translation)] = DEFAULT_TRANSLATION

    @property
    def reference(self) -> str:
        """Human-readable reference, e.g. ``Genesis 1:1``."""
        return f"{self.book} {self.chapter}:{self.verse}"


class NamedEntityRecord(_Record):
    """A person, place, topic or event.

    The four categories share this shape; ``category`` tells them apart.
    """

    uid: str
    category: EntityCategory
    name: str
    description: str | None = None
    references: Annotated[tuple[str, ...], BeforeValidator(_none_to_empty)] = ()


class LexiconRecord(_Record):
    """A lexicon entry for word studies."""

    uid: str
    word: str
    original: str
    transliteration: str | None = None
    definition: str
    strongs_number: str | None = None


class CommentaryRecord(_Record):
    uid: str
    verse_uid: str
    author: str
    text: str
    source: str | None = None


class VerseLinkRecord(_Record):
    """A (verse, entity) link row with its declared category."""

    verse_uid: str
    entity_uid: str
    entity_type: EntityCategory


class LinkedEntitySet(_Record):
    """Everything one verse links to, grouped by category.

    Each sequence follows link-table order. Links whose target no longer
    exists are absent.
    """

    people: tuple[NamedEntityRecord, ...] = ()
    places: tuple[NamedEntityRecord, ...] = ()
    topics: tuple[NamedEntityRecord, ...] = ()
    events: tuple[NamedEntityRecord, ...] = ()
    lexicon: tuple[LexiconRecord, ...] = ()

    def for_category(
        self, category: EntityCategory
    ) -> tuple[NamedEntityRecord, ...] | tuple[LexiconRecord, ...]:
        return getattr(self, CATEGORY_FIELDS[category])

    def is_empty(self) -> bool:
        return not any(self.for_category(category) for category in EntityCategory)


# LinkedEntitySet field holding each category
CATEGORY_FIELDS: dict[EntityCategory, str] = {
    EntityCategory.PERSON: "people",
    EntityCategory.PLACE: "places",
    EntityCategory.TOPIC: "topics",
    EntityCategory.EVENT: "events",
    EntityCategory.LEXICON: "lexicon",
}
