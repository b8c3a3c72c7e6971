"""Verse model."""

from __future__ import annotations

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from scripture_study.models.base import Base


class Verse(Base):
    """A single verse of one translation.

    ``uid`` encodes (translation, book, chapter, verse); the remaining
    columns repeat that information in queryable form.
    """

    __tablename__ = "verses"
    __table_args__ = (Index("ix_verses_book_chapter", "book", "chapter"),)

    uid: Mapped[str] = mapped_column(String(32), primary_key=True)
    book: Mapped[str] = mapped_column(String(64))
    chapter: Mapped[int] = mapped_column(Integer)
    verse: Mapped[int] = mapped_column(Integer)
    text: Mapped[str] = mapped_column(Text)
    translation: Mapped[str | None] = mapped_column(String(16))
