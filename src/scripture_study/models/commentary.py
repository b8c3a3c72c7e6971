"""Commentary model."""

from __future__ import annotations

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from scripture_study.models.base import Base


class Commentary(Base):
    """A commentary note attached to one verse."""

    __tablename__ = "commentary"

    uid: Mapped[str] = mapped_column(String(64), primary_key=True)
    verse_uid: Mapped[str] = mapped_column(ForeignKey("verses.uid"), index=True)
    author: Mapped[str] = mapped_column(String(255))
    text: Mapped[str] = mapped_column(Text)
    source: Mapped[str | None] = mapped_column(String(512))
