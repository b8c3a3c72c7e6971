"""Lexicon model for word studies."""

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from scripture_study.models.base import Base


class LexiconEntry(Base):
    """An original-language word with its definition.

    ``strongs_number`` is an optional canonical numbering reference
    (e.g. ``H430``).
    """

    __tablename__ = "lexicon"

    uid: Mapped[str] = mapped_column(String(16), primary_key=True)
    word: Mapped[str] = mapped_column(String(255))
    original: Mapped[str] = mapped_column(String(255))
    transliteration: Mapped[str | None] = mapped_column(String(255))
    definition: Mapped[str] = mapped_column(Text)
    strongs_number: Mapped[str | None] = mapped_column(String(16))
