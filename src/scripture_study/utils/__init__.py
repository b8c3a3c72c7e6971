"""Utility modules for scripture_study."""

from scripture_study.utils.uids import (
    VerseUid,
    category_of,
    format_verse_uid,
    is_valid,
    is_well_formed,
    parse_named_uid,
    parse_verse_uid,
)

__all__ = [
    "VerseUid",
    "category_of",
    "format_verse_uid",
    "is_valid",
    "is_well_formed",
    "parse_named_uid",
    "parse_verse_uid",
]
