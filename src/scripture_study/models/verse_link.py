"""Verse link and audio mapping models."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from scripture_study.models.base import Base


class VerseLink(Base):
    """Many-to-many join between a verse and a linked entity.

    ``entity_uid`` carries no foreign key: links may outlive the entity they
    point to, and readers treat such links as dangling. ``link_id`` fixes the
    storage order that resolution preserves.
    """

    __tablename__ = "verse_links"

    link_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    verse_uid: Mapped[str] = mapped_column(ForeignKey("verses.uid"), index=True)
    entity_uid: Mapped[str] = mapped_column(String(16), index=True)
    entity_type: Mapped[str] = mapped_column(String(16))


class AudioMapping(Base):
    """Narrated audio file for a verse."""

    __tablename__ = "audio_map"

    audio_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    verse_uid: Mapped[str] = mapped_column(ForeignKey("verses.uid"), index=True)
    file_path: Mapped[str] = mapped_column(String(1024))
    narrator: Mapped[str | None] = mapped_column(String(255))
