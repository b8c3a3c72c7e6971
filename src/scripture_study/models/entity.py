"""Named entity models: people, places, topics and events.

The four tables share one shape and differ only by category and uid prefix.
``references`` holds a JSON-encoded list of reference strings.
"""

from __future__ import annotations

from typing import ClassVar

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from scripture_study.models.base import Base
from scripture_study.models.enums import EntityCategory


class NamedEntityMixin:
    """Columns shared by every named entity table."""

    category: ClassVar[EntityCategory]

    uid: Mapped[str] = mapped_column(String(16), primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text)
    references: Mapped[str | None] = mapped_column(Text)


class Person(NamedEntityMixin, Base):
    __tablename__ = "people"
    category = EntityCategory.PERSON


class Place(NamedEntityMixin, Base):
    __tablename__ = "places"
    category = EntityCategory.PLACE


class Topic(NamedEntityMixin, Base):
    __tablename__ = "topics"
    category = EntityCategory.TOPIC


class Event(NamedEntityMixin, Base):
    __tablename__ = "events"
    category = EntityCategory.EVENT


NAMED_ENTITY_MODELS: dict[EntityCategory, type[NamedEntityMixin]] = {
    EntityCategory.PERSON: Person,
    EntityCategory.PLACE: Place,
    EntityCategory.TOPIC: Topic,
    EntityCategory.EVENT: Event,
}
