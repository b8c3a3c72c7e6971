"""Explicit per-caller study context.

A StudyContext bundles the settings, the data store and the AI assistant
that one caller works with. There is no module-level state; several contexts
can run side by side.

Usage:
    async with StudyContext.from_settings(Settings()) as ctx:
        study = await ctx.open_verse("VR-KJV-010101-AA")
        answer = await ctx.ask("Who is speaking here?", verse_uid=study.verse.uid)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType

from scripture_study.clients.assistant import StudyAssistant
from scripture_study.config import Settings
from scripture_study.exceptions import ConfigurationError
from scripture_study.notes import write_verse_note
from scripture_study.resolution.linker import EntityLinkResolver
from scripture_study.schemas import CommentaryRecord, LinkedEntitySet, VerseRecord
from scripture_study.store import VerseStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerseStudy:
    """Everything shown alongside a selected verse."""

    verse: VerseRecord
    linked: LinkedEntitySet
    commentary: tuple[CommentaryRecord, ...]
    audio_path: Path | None


class StudyContext:
    """Settings, store and assistant for one caller."""

    def __init__(
        self,
        settings: Settings,
        store: VerseStore,
        assistant: StudyAssistant | None = None,
        *,
        concurrent_links: bool = False,
    ) -> None:
        self.settings = settings
        self.store = store
        self.assistant = assistant
        self._resolver = EntityLinkResolver(store, concurrent=concurrent_links)

    @classmethod
    def from_settings(cls, settings: Settings) -> StudyContext:
        return cls(settings, VerseStore.from_settings(settings), StudyAssistant(settings))

    async def __aenter__(self) -> StudyContext:
        await self.store.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            await self.store.disconnect()
        finally:
            if self.assistant is not None:
                await self.assistant.aclose()

    async def open_verse(self, uid: str) -> VerseStudy | None:
        """Load a verse with its links, commentary and audio, or None if unknown."""
        verse = await self.store.get_verse(uid)
        if verse is None:
            return None

        linked = await self._resolver.resolve(uid)
        commentary = await self.store.get_commentary(uid)
        stored_audio = await self.store.get_audio_path(uid)

        return VerseStudy(
            verse=verse,
            linked=linked,
            commentary=tuple(commentary),
            audio_path=self.resolve_audio_path(stored_audio) if stored_audio else None,
        )

    def resolve_audio_path(self, stored_path: str) -> Path:
        """Anchor relative audio paths at ``settings.audio_base_path``."""
        path = Path(stored_path)
        if path.is_absolute():
            return path
        return self.settings.audio_base_path / path

    async def surrounding_verses(self, verse: VerseRecord) -> list[VerseRecord]:
        """Up to ``context_verses`` verses on each side, from the same chapter."""
        window = self.settings.context_verses
        if window == 0:
            return []
        chapter = await self.store.get_verses_by_chapter(
            verse.book, verse.chapter, translation=verse.translation
        )
        return [v for v in chapter if abs(v.verse - verse.verse) <= window]

    async def ask(
        self,
        question: str,
        *,
        verse_uid: str | None = None,
        additional_context: str | None = None,
    ) -> str:
        """Ask the assistant, optionally about a specific verse.

        An unknown ``verse_uid`` sends the question without passage context.
        """
        if self.assistant is None:
            raise ConfigurationError("No AI assistant configured")

        current = await self.store.get_verse(verse_uid) if verse_uid else None
        if verse_uid and current is None:
            logger.warning("Verse %s not found; asking without passage context", verse_uid)
        surrounding = await self.surrounding_verses(current) if current else []

        return await self.assistant.query(
            question,
            current_verse=current,
            surrounding_verses=surrounding,
            additional_context=additional_context,
        )

    async def export_note(
        self,
        uid: str,
        directory: Path | None = None,
        *,
        overwrite: bool = False,
    ) -> Path | None:
        """Write the study note for a verse; None if the verse does not exist."""
        verse = await self.store.get_verse(uid)
        if verse is None:
            return None
        linked = await self._resolver.resolve(uid)
        return write_verse_note(
            directory or self.settings.notes_dir, verse, linked, overwrite=overwrite
        )
