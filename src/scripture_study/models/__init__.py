"""Database models for scripture_study."""

from scripture_study.models.base import Base
from scripture_study.models.commentary import Commentary
from scripture_study.models.entity import (
    NAMED_ENTITY_MODELS,
    Event,
    NamedEntityMixin,
    Person,
    Place,
    Topic,
)
from scripture_study.models.enums import EntityCategory, UidKind
from scripture_study.models.lexicon import LexiconEntry
from scripture_study.models.verse import Verse
from scripture_study.models.verse_link import AudioMapping, VerseLink

__all__ = [
    "NAMED_ENTITY_MODELS",
    "AudioMapping",
    "Base",
    "Commentary",
    "EntityCategory",
    "Event",
    "LexiconEntry",
    "NamedEntityMixin",
    "Person",
    "Place",
    "Topic",
    "UidKind",
    "Verse",
    "VerseLink",
]
