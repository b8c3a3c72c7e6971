"""Tests for identifier parsing and validation."""

from __future__ import annotations

import pytest

from scripture_study.models import EntityCategory, UidKind
from scripture_study.utils.uids import (
    VerseUid,
    category_of,
    format_verse_uid,
    is_valid,
    is_well_formed,
    parse_event_uid,
    parse_lexicon_uid,
    parse_named_uid,
    parse_person_uid,
    parse_place_uid,
    parse_topic_uid,
    parse_verse_uid,
)


class TestParseVerseUid:
    """Tests for parse_verse_uid."""

    def test_genesis_1_1(self) -> None:
        assert parse_verse_uid("VR-KJV-010101-AA") == VerseUid(
            translation="KJV", book=1, chapter=1, verse=1, suffix="AA"
        )

    def test_multi_letter_translation(self) -> None:
        parsed = parse_verse_uid("VR-NASB-432316-ZB")
        assert parsed is not None
        assert parsed.translation == "NASB"
        assert (parsed.book, parsed.chapter, parsed.verse) == (43, 23, 16)
        assert parsed.suffix == "ZB"

    @pytest.mark.parametrize(
        "uid",
        [
            "VR-kjv-010101-AA",  # lowercase translation
            "VR--010101-AA",  # empty translation
            "VR-KJV-01011-AA",  # five digits
            "VR-KJV-0101011-AA",  # seven digits
            "VR-KJV-010101-A",  # one-letter suffix
            "VR-KJV-010101-AAA",  # three-letter suffix
            "VR-KJV-010101-aa",  # lowercase suffix
            "VR-KJV-010101-AA\n",  # trailing newline
            " VR-KJV-010101-AA",  # leading space
            "VR-KJV-٠١٠١٠١-AA",  # non-ASCII digits
            "PER-000001",
            "",
        ],
    )
    def test_rejects_non_matching(self, uid: str) -> None:
        assert parse_verse_uid(uid) is None


class TestVerseUidRoundTrip:
    """Reconstructing a parsed verse uid yields the original string."""

    @pytest.mark.parametrize(
        "uid",
        [
            "VR-KJV-010101-AA",
            "VR-ESV-663222-ZZ",
            "VR-NIV-190101-AB",
            "VR-A-999999-QQ",
            "VR-KJV-000000-AA",
        ],
    )
    def test_round_trip(self, uid: str) -> None:
        parsed = parse_verse_uid(uid)
        assert parsed is not None
        assert format_verse_uid(parsed) == uid

    def test_format_rejects_three_digit_fields(self) -> None:
        with pytest.raises(ValueError, match="two-digit"):
            format_verse_uid(VerseUid(translation="KJV", book=1, chapter=150, verse=1, suffix="AA"))

    def test_format_rejects_bad_translation(self) -> None:
        with pytest.raises(ValueError):
            format_verse_uid(VerseUid(translation="kjv", book=1, chapter=1, verse=1, suffix="AA"))


class TestParseNamedUid:
    """Tests for the named-entity parsers."""

    @pytest.mark.parametrize(
        ("parser", "uid", "expected"),
        [
            (parse_person_uid, "PER-000001", 1),
            (parse_place_uid, "PLC-000045", 45),
            (parse_topic_uid, "TOP-000101", 101),
            (parse_event_uid, "EVT-123456", 123456),
            (parse_lexicon_uid, "LEX-000000", 0),
        ],
    )
    def test_valid(self, parser, uid: str, expected: int) -> None:
        assert parser(uid) == expected

    @pytest.mark.parametrize(
        "uid",
        ["PER-1", "PER-0000001", "PER-00000A", "PER000001", "per-000001", "PER-000001 "],
    )
    def test_rejects_malformed(self, uid: str) -> None:
        assert parse_person_uid(uid) is None

    def test_wrong_prefix(self) -> None:
        assert parse_place_uid("PER-000001") is None
        assert parse_named_uid("PLC-000045", UidKind.PERSON) is None

    def test_verse_kind_not_accepted(self) -> None:
        with pytest.raises(ValueError):
            parse_named_uid("VR-KJV-010101-AA", UidKind.VERSE)


class TestCategoryOf:
    """Tests for category_of and is_valid."""

    @pytest.mark.parametrize(
        ("uid", "kind"),
        [
            ("VR-KJV-010101-AA", UidKind.VERSE),
            ("PER-000001", UidKind.PERSON),
            ("PLC-000045", UidKind.PLACE),
            ("TOP-000101", UidKind.TOPIC),
            ("EVT-000001", UidKind.EVENT),
            ("LEX-000001", UidKind.LEXICON),
        ],
    )
    def test_known_prefixes(self, uid: str, kind: UidKind) -> None:
        assert category_of(uid) is kind

    @pytest.mark.parametrize("uid", ["", "XYZ-000001", "PER000001", "per-000001", "VR"])
    def test_unknown_prefixes(self, uid: str) -> None:
        assert category_of(uid) is None

    @pytest.mark.parametrize(
        "uid",
        ["VR-KJV-010101-AA", "PER-000001", "PER-garbage", "LEX-", "XYZ-1", "", "VR-x"],
    )
    def test_is_valid_iff_category_found(self, uid: str) -> None:
        assert is_valid(uid) == (category_of(uid) is not None)

    def test_kind_category_mapping(self) -> None:
        assert UidKind.VERSE.category is None
        for category in EntityCategory:
            assert UidKind(category.value).category is category
            assert UidKind(category.value).prefix == category.prefix


class TestPrefixOnlyValidation:
    """is_valid checks the prefix only; parse_* and is_well_formed check everything."""

    @pytest.mark.parametrize(
        ("uid", "parser"),
        [
            ("PER-abc", parse_person_uid),
            ("PLC-12", parse_place_uid),
            ("TOP-", parse_topic_uid),
            ("EVT-0000001", parse_event_uid),
            ("LEX-00000x", parse_lexicon_uid),
            ("VR-KJV-1-AA", parse_verse_uid),
        ],
    )
    def test_valid_prefix_but_unparseable(self, uid: str, parser) -> None:
        assert is_valid(uid) is True
        assert parser(uid) is None
        assert is_well_formed(uid) is False

    @pytest.mark.parametrize("uid", ["VR-KJV-010101-AA", "PER-000001", "LEX-000123"])
    def test_well_formed(self, uid: str) -> None:
        assert is_valid(uid) is True
        assert is_well_formed(uid) is True

    def test_unknown_prefix_not_well_formed(self) -> None:
        assert is_well_formed("ABC-000001") is False
