"""Entity-link resolution: one verse uid in, one LinkedEntitySet out.

Algorithm:
1. Fetch the verse's link rows (errors here propagate to the caller).
2. For each link, dispatch on its declared EntityCategory to the matching
   single-entity fetch. A link whose uid prefix disagrees with its declared
   category is skipped without any fetch.
3. Drop links whose target no longer exists (dangling references).
4. Group survivors by category, keeping link-table order.

Fetches run one after another by default. With ``concurrent=True`` they are
fanned out with ``asyncio.gather``, which returns results in input order, so
the per-category ordering is unchanged. A failed fetch cancels the rest.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from scripture_study.models.enums import EntityCategory
from scripture_study.schemas import (
    CATEGORY_FIELDS,
    LexiconRecord,
    LinkedEntitySet,
    NamedEntityRecord,
    VerseLinkRecord,
)
from scripture_study.utils.uids import category_of

logger = logging.getLogger(__name__)

LinkedRecord = NamedEntityRecord | LexiconRecord
Fetcher = Callable[[str], Awaitable[LinkedRecord | None]]


class LinkSource(Protocol):
    """The slice of the data access contract the resolver needs."""

    async def get_verse_links(self, verse_uid: str) -> list[VerseLinkRecord]: ...

    async def get_person(self, uid: str) -> NamedEntityRecord | None: ...

    async def get_place(self, uid: str) -> NamedEntityRecord | None: ...

    async def get_topic(self, uid: str) -> NamedEntityRecord | None: ...

    async def get_event(self, uid: str) -> NamedEntityRecord | None: ...

    async def get_lexicon_entry(self, uid: str) -> LexiconRecord | None: ...


def category_fetchers(source: LinkSource) -> dict[EntityCategory, Fetcher]:
    """Map every link category to the fetch that dereferences it."""
    return {
        EntityCategory.PERSON: source.get_person,
        EntityCategory.PLACE: source.get_place,
        EntityCategory.TOPIC: source.get_topic,
        EntityCategory.EVENT: source.get_event,
        EntityCategory.LEXICON: source.get_lexicon_entry,
    }


def link_matches_category(link: VerseLinkRecord) -> bool:
    """True iff the link's uid prefix names its declared category."""
    kind = category_of(link.entity_uid)
    return kind is not None and kind.category is link.entity_type


class EntityLinkResolver:
    """Resolve a verse's links into a LinkedEntitySet.

    Usage:
        resolver = EntityLinkResolver(store)
        linked = await resolver.resolve("VR-KJV-010101-AA")
    """

    def __init__(self, source: LinkSource, *, concurrent: bool = False) -> None:
        self._source = source
        self._concurrent = concurrent
        self._fetchers = category_fetchers(source)

    async def resolve(self, verse_uid: str) -> LinkedEntitySet:
        links = await self._source.get_verse_links(verse_uid)

        usable: list[VerseLinkRecord] = []
        for link in links:
            if link_matches_category(link):
                usable.append(link)
            else:
                logger.warning(
                    "Skipping link %s -> %s: uid does not match declared type %s",
                    link.verse_uid,
                    link.entity_uid,
                    link.entity_type.value,
                )

        if self._concurrent:
            fetched = await self._fetch_concurrently(usable)
        else:
            fetched = [await self._fetch(link) for link in usable]

        grouped: dict[EntityCategory, list[LinkedRecord]] = {c: [] for c in EntityCategory}
        for link, record in zip(usable, fetched):
            if record is None:
                logger.debug(
                    "Dropping dangling link %s -> %s", link.verse_uid, link.entity_uid
                )
                continue
            grouped[link.entity_type].append(record)

        return LinkedEntitySet(
            **{CATEGORY_FIELDS[category]: tuple(records) for category, records in grouped.items()}
        )

    async def _fetch(self, link: VerseLinkRecord) -> LinkedRecord | None:
        return await self._fetchers[link.entity_type](link.entity_uid)

    async def _fetch_concurrently(self, links: list[VerseLinkRecord]) -> list[LinkedRecord | None]:
        """Fetch all links at once; results come back in input order.

        If any fetch fails, the others are cancelled and awaited before the
        original error is re-raised, so no fetch outlives ``resolve``.
        """
        tasks = [asyncio.ensure_future(self._fetch(link)) for link in links]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
