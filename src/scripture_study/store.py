"""Backend-agnostic data access for verses and their linked entities.

``VerseStore`` is the single implementation of the data access contract. The
storage backend is chosen by the database URL alone; the SQLAlchemy dialect
absorbs the differences between PostgreSQL and SQLite (placeholder syntax,
ILIKE, row shapes) so every read returns identical records.

Usage:
    async with VerseStore(settings.database_url) as store:
        verse = await store.get_verse("VR-KJV-010101-AA")
        linked = await store.get_linked_entities(verse.uid)
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from types import TracebackType
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy import Select, or_, select, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from scripture_study.db import create_db_engine, init_db
from scripture_study.exceptions import MalformedRowError, NotConnectedError
from scripture_study.models import (
    NAMED_ENTITY_MODELS,
    AudioMapping,
    Commentary,
    EntityCategory,
    LexiconEntry,
    NamedEntityMixin,
    Verse,
    VerseLink,
)
from scripture_study.resolution.linker import EntityLinkResolver
from scripture_study.schemas import (
    DEFAULT_TRANSLATION,
    CommentaryRecord,
    LexiconRecord,
    LinkedEntitySet,
    NamedEntityRecord,
    VerseLinkRecord,
    VerseRecord,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import URL

    from scripture_study.config import Settings

logger = logging.getLogger(__name__)

# Maximum number of verses returned by search_verses
SEARCH_LIMIT = 100

RecordT = TypeVar("RecordT", bound=BaseModel)


def decode_references(raw: Any, *, table: str, key: str) -> tuple[str, ...]:
    """Decode a stored reference list.

    Accepts JSON text (SQLite, text columns) or an already-decoded list
    (native array/JSON columns). Absent values decode to an empty tuple.
    """
    if raw is None or raw == "":
        return ()
    if isinstance(raw, (list, tuple)):
        values: Any = raw
    else:
        try:
            values = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise MalformedRowError(table, key, f"references is not valid JSON: {e}") from e
    if values is None:
        return ()
    if not isinstance(values, (list, tuple)) or not all(isinstance(v, str) for v in values):
        raise MalformedRowError(table, key, "references must be a list of strings")
    return tuple(values)


def _build(record_cls: type[RecordT], table: str, key: str, **fields: Any) -> RecordT:
    try:
        return record_cls(**fields)
    except ValidationError as e:
        raise MalformedRowError(table, key, str(e)) from e


def _verse_record(row: Verse) -> VerseRecord:
    return _build(
        VerseRecord,
        Verse.__tablename__,
        row.uid,
        uid=row.uid,
        book=row.book,
        chapter=row.chapter,
        verse=row.verse,
        text=row.text,
        translation=row.translation,
    )


def _named_record(row: NamedEntityMixin, category: EntityCategory) -> NamedEntityRecord:
    table = NAMED_ENTITY_MODELS[category].__tablename__  # type: ignore[attr-defined]
    return _build(
        NamedEntityRecord,
        table,
        row.uid,
        uid=row.uid,
        category=category,
        name=row.name,
        description=row.description,
        references=decode_references(row.references, table=table, key=row.uid),
    )


def _lexicon_record(row: LexiconEntry) -> LexiconRecord:
    return _build(
        LexiconRecord,
        LexiconEntry.__tablename__,
        row.uid,
        uid=row.uid,
        word=row.word,
        original=row.original,
        transliteration=row.transliteration,
        definition=row.definition,
        strongs_number=row.strongs_number,
    )


class VerseStore:
    """Read-only access to a Scripture database.

    One instance exclusively owns one engine (connection pool). ``connect``
    and ``disconnect`` are idempotent; every read raises NotConnectedError
    until ``connect`` has succeeded. Lookups that find nothing return None
    or an empty list. Driver errors propagate unchanged.
    """

    def __init__(
        self,
        url: str | URL,
        *,
        echo: bool = False,
        default_translation: str = DEFAULT_TRANSLATION,
        **engine_options: Any,
    ) -> None:
        self._url = url
        self.default_translation = default_translation
        self._echo = echo
        self._engine_options = engine_options
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> VerseStore:
        return cls(
            settings.database_url,
            echo=settings.database_echo,
            default_translation=settings.default_translation,
        )

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def backend(self) -> str | None:
        """Dialect name of the connected backend (``postgresql`` or ``sqlite``)."""
        return self._engine.dialect.name if self._engine is not None else None

    # ── Lifecycle ───────────────────────────────────────────────────────────

    async def connect(self) -> None:
        """Open the engine and verify the database is reachable."""
        if self._engine is not None:
            return

        engine = create_db_engine(self._url, echo=self._echo, **self._engine_options)
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except BaseException:
            await engine.dispose()
            raise

        self._engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info("Connected to %s database", engine.dialect.name)

    async def disconnect(self) -> None:
        """Release the engine. No-op when not connected."""
        if self._engine is None:
            return
        engine = self._engine
        self._engine = None
        self._session_factory = None
        await engine.dispose()
        logger.info("Disconnected from %s database", engine.dialect.name)

    async def __aenter__(self) -> VerseStore:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.disconnect()

    async def create_schema(self) -> None:
        """Create any missing tables (bootstrap for a fresh local database)."""
        if self._engine is None:
            raise NotConnectedError("create_schema")
        await init_db(self._engine)

    # ── Query plumbing ──────────────────────────────────────────────────────

    def _session(self, operation: str) -> AsyncSession:
        if self._session_factory is None:
            raise NotConnectedError(operation)
        return self._session_factory()

    async def _fetch_all(self, operation: str, stmt: Select[Any]) -> Sequence[Any]:
        async with self._session(operation) as session:
            result = await session.execute(stmt)
            return result.scalars().all()

    async def _fetch_one(self, operation: str, stmt: Select[Any]) -> Any | None:
        async with self._session(operation) as session:
            result = await session.execute(stmt)
            return result.scalars().first()

    # ── Verses ──────────────────────────────────────────────────────────────

    async def get_verse(self, uid: str) -> VerseRecord | None:
        row = await self._fetch_one("get_verse", select(Verse).where(Verse.uid == uid))
        return _verse_record(row) if row is not None else None

    async def get_verses_by_chapter(
        self, book: str, chapter: int, *, translation: str | None = None
    ) -> list[VerseRecord]:
        """Verses of one chapter in ascending verse order.

        Only one translation is listed: ``translation`` or, when omitted, the
        store's ``default_translation``. Rows without a stored translation
        count as KJV.
        """
        translation = translation or self.default_translation
        stmt = select(Verse).where(Verse.book == book, Verse.chapter == chapter)
        if translation == DEFAULT_TRANSLATION:
            stmt = stmt.where(
                or_(
                    Verse.translation == translation,
                    Verse.translation.is_(None),
                    Verse.translation == "",
                )
            )
        else:
            stmt = stmt.where(Verse.translation == translation)
        stmt = stmt.order_by(Verse.verse, Verse.uid)

        rows = await self._fetch_all("get_verses_by_chapter", stmt)
        return [_verse_record(row) for row in rows]

    async def search_verses(self, query: str) -> list[VerseRecord]:
        """Case-insensitive substring search over verse text.

        ``%`` and ``_`` in the query match literally. At most SEARCH_LIMIT
        verses are returned, ordered by uid.
        """
        stmt = (
            select(Verse)
            .where(Verse.text.icontains(query, autoescape=True))
            .order_by(Verse.uid)
            .limit(SEARCH_LIMIT)
        )
        rows = await self._fetch_all("search_verses", stmt)
        return [_verse_record(row) for row in rows]

    # ── Entities ────────────────────────────────────────────────────────────

    async def get_named_entity(
        self, category: EntityCategory, uid: str
    ) -> NamedEntityRecord | None:
        """Fetch a person, place, topic or event by uid."""
        model = NAMED_ENTITY_MODELS.get(category)
        if model is None:
            raise ValueError(f"{category.value} is not a named entity category")
        row = await self._fetch_one(
            f"get_{category.value}",
            select(model).where(model.uid == uid),
        )
        return _named_record(row, category) if row is not None else None

    async def get_person(self, uid: str) -> NamedEntityRecord | None:
        return await self.get_named_entity(EntityCategory.PERSON, uid)

    async def get_place(self, uid: str) -> NamedEntityRecord | None:
        return await self.get_named_entity(EntityCategory.PLACE, uid)

    async def get_topic(self, uid: str) -> NamedEntityRecord | None:
        return await self.get_named_entity(EntityCategory.TOPIC, uid)

    async def get_event(self, uid: str) -> NamedEntityRecord | None:
        return await self.get_named_entity(EntityCategory.EVENT, uid)

    async def get_lexicon_entry(self, uid: str) -> LexiconRecord | None:
        row = await self._fetch_one(
            "get_lexicon_entry",
            select(LexiconEntry).where(LexiconEntry.uid == uid),
        )
        return _lexicon_record(row) if row is not None else None

    # ── Links ───────────────────────────────────────────────────────────────

    async def get_verse_links(self, verse_uid: str) -> list[VerseLinkRecord]:
        """Link rows for a verse in storage order.

        Raises MalformedRowError for an entity_type outside the five known
        categories.
        """
        stmt = (
            select(VerseLink)
            .where(VerseLink.verse_uid == verse_uid)
            .order_by(VerseLink.link_id)
        )
        rows = await self._fetch_all("get_verse_links", stmt)
        return [
            _build(
                VerseLinkRecord,
                VerseLink.__tablename__,
                f"{row.verse_uid} -> {row.entity_uid}",
                verse_uid=row.verse_uid,
                entity_uid=row.entity_uid,
                entity_type=row.entity_type,
            )
            for row in rows
        ]

    async def get_linked_entities(self, verse_uid: str) -> LinkedEntitySet:
        return await EntityLinkResolver(self).resolve(verse_uid)

    # ── Commentary / audio ──────────────────────────────────────────────────

    async def get_commentary(self, verse_uid: str) -> list[CommentaryRecord]:
        rows = await self._fetch_all(
            "get_commentary",
            select(Commentary).where(Commentary.verse_uid == verse_uid),
        )
        return [
            _build(
                CommentaryRecord,
                Commentary.__tablename__,
                row.uid,
                uid=row.uid,
                verse_uid=row.verse_uid,
                author=row.author,
                text=row.text,
                source=row.source,
            )
            for row in rows
        ]

    async def get_audio_path(self, verse_uid: str) -> str | None:
        """Stored audio file path for a verse (first mapping), or None."""
        stmt = (
            select(AudioMapping)
            .where(AudioMapping.verse_uid == verse_uid)
            .order_by(AudioMapping.audio_id)
            .limit(1)
        )
        row = await self._fetch_one("get_audio_path", stmt)
        return row.file_path if row is not None else None
