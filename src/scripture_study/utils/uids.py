"""Parsing and validation of scripture_study identifiers.

Identifier formats:

- Verse: ``VR-<TRANSLATION>-<BB><CC><VV>-<SUFFIX>``, e.g. ``VR-KJV-010101-AA``.
  TRANSLATION is one or more uppercase letters, BB/CC/VV are exactly two
  digits (book index, chapter, verse) and SUFFIX is two uppercase letters.
- Named entities: ``<PREFIX>-<NNNNNN>``, e.g. ``PER-000001``, with PREFIX one
  of PER, PLC, TOP, EVT, LEX.

Two levels of checking:

- ``category_of`` / ``is_valid`` look only at the prefix. ``PER-abc`` is
  "valid" because it names the person category.
- ``parse_*`` / ``is_well_formed`` require the full literal pattern and never
  return partial parses.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from scripture_study.models.enums import UidKind

# ASCII digits and letters only
VERSE_UID_PATTERN = re.compile(r"VR-([A-Z]+)-([0-9]{2})([0-9]{2})([0-9]{2})-([A-Z]{2})")

_NAMED_UID_PATTERNS: dict[UidKind, re.Pattern[str]] = {
    kind: re.compile(rf"{kind.prefix}-([0-9]{{6}})")
    for kind in UidKind
    if kind is not UidKind.VERSE
}


@dataclass(frozen=True)
class VerseUid:
    """Fields encoded in a verse identifier."""

    translation: str
    book: int
    chapter: int
    verse: int
    suffix: str


def parse_verse_uid(uid: str) -> VerseUid | None:
    """Parse a verse identifier, or return None if it does not match exactly."""
    match = VERSE_UID_PATTERN.fullmatch(uid)
    if match is None:
        return None
    translation, book, chapter, verse, suffix = match.groups()
    return VerseUid(
        translation=translation,
        book=int(book),
        chapter=int(chapter),
        verse=int(verse),
        suffix=suffix,
    )


def format_verse_uid(parsed: VerseUid) -> str:
    """Build a verse identifier from its fields.

    Inverse of ``parse_verse_uid``. Raises ValueError for fields the
    two-digit format cannot represent.
    """
    for label, value in (("book", parsed.book), ("chapter", parsed.chapter), ("verse", parsed.verse)):
        if not 0 <= value <= 99:
            raise ValueError(f"{label} index {value} does not fit the two-digit verse uid format")
    uid = (
        f"VR-{parsed.translation}-"
        f"{parsed.book:02d}{parsed.chapter:02d}{parsed.verse:02d}-{parsed.suffix}"
    )
    if VERSE_UID_PATTERN.fullmatch(uid) is None:
        raise ValueError(f"Cannot format verse uid from {parsed!r}")
    return uid


def parse_named_uid(uid: str, kind: UidKind) -> int | None:
    """Return the sequence number of a named-entity identifier of ``kind``."""
    if kind is UidKind.VERSE:
        raise ValueError("Verse identifiers are parsed with parse_verse_uid")
    match = _NAMED_UID_PATTERNS[kind].fullmatch(uid)
    return int(match.group(1)) if match else None


def parse_person_uid(uid: str) -> int | None:
    return parse_named_uid(uid, UidKind.PERSON)


def parse_place_uid(uid: str) -> int | None:
    return parse_named_uid(uid, UidKind.PLACE)


def parse_topic_uid(uid: str) -> int | None:
    return parse_named_uid(uid, UidKind.TOPIC)


def parse_event_uid(uid: str) -> int | None:
    return parse_named_uid(uid, UidKind.EVENT)


def parse_lexicon_uid(uid: str) -> int | None:
    return parse_named_uid(uid, UidKind.LEXICON)


def category_of(uid: str) -> UidKind | None:
    """Identify what ``uid`` refers to from its prefix alone."""
    for kind in UidKind:
        if uid.startswith(f"{kind.prefix}-"):
            return kind
    return None


def is_valid(uid: str) -> bool:
    """True iff the identifier carries a known prefix.

    The remainder of the string is not checked; use ``is_well_formed`` for
    full-pattern validation.
    """
    return category_of(uid) is not None


def is_well_formed(uid: str) -> bool:
    """True iff the identifier matches the full pattern for its prefix."""
    kind = category_of(uid)
    if kind is None:
        return False
    if kind is UidKind.VERSE:
        return parse_verse_uid(uid) is not None
    return parse_named_uid(uid, kind) is not None
