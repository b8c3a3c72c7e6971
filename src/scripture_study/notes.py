"""Markdown study notes for verses.

A note is YAML-style frontmatter followed by a markdown body:

    ---
    uid: VR-KJV-010101-AA
    book: Genesis
    chapter: 1
    verse: 1
    translation: KJV
    linked_people: [PER-000001]
    ---

    # Genesis 1:1

    > In the beginning God created the heaven and the earth.

    ## People

    - [[PER-000001|God]]

    ## Study Notes

    _Add your personal study notes here..._

Rendering is pure: the same verse and links give byte-identical text.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from scripture_study.schemas import LinkedEntitySet, NamedEntityRecord, VerseRecord

logger = logging.getLogger(__name__)

NOTE_EXTENSION = ".md"
STUDY_NOTES_PLACEHOLDER = "_Add your personal study notes here..._"

# (frontmatter key, body heading, LinkedEntitySet field) for named categories
_NAMED_SECTIONS: tuple[tuple[str, str, str], ...] = (
    ("linked_people", "People", "people"),
    ("linked_places", "Places", "places"),
    ("linked_topics", "Topics", "topics"),
    ("linked_events", "Events", "events"),
)

_WHITESPACE = re.compile(r"\s+")


def render_frontmatter(verse: VerseRecord, linked: LinkedEntitySet) -> str:
    lines = [
        f"uid: {verse.uid}",
        f"book: {verse.book}",
        f"chapter: {verse.chapter}",
        f"verse: {verse.verse}",
        f"translation: {verse.translation}",
    ]
    for key, _, field in _NAMED_SECTIONS:
        records: tuple[NamedEntityRecord, ...] = getattr(linked, field)
        if records:
            lines.append(f"{key}: [{', '.join(r.uid for r in records)}]")
    if linked.lexicon:
        lines.append(f"linked_lexicon: [{', '.join(entry.uid for entry in linked.lexicon)}]")
    return "\n".join(lines) + "\n"


def render_body(verse: VerseRecord, linked: LinkedEntitySet) -> str:
    parts = [f"# {verse.reference}\n\n", f"> {verse.text}\n\n"]

    for _, heading, field in _NAMED_SECTIONS:
        records: tuple[NamedEntityRecord, ...] = getattr(linked, field)
        if records:
            parts.append(f"## {heading}\n\n")
            parts.extend(f"- [[{r.uid}|{r.name}]]\n" for r in records)
            parts.append("\n")

    if linked.lexicon:
        parts.append("## Word Studies\n\n")
        parts.extend(
            f"- **{entry.word}** ({entry.original}): {entry.definition}\n"
            for entry in linked.lexicon
        )
        parts.append("\n")

    parts.append("## Study Notes\n\n")
    parts.append(f"{STUDY_NOTES_PLACEHOLDER}\n\n")
    return "".join(parts)


def render_verse_note(verse: VerseRecord, linked: LinkedEntitySet) -> str:
    """Render the full note for a verse and its linked entities."""
    return f"---\n{render_frontmatter(verse, linked)}---\n\n{render_body(verse, linked)}"


def note_filename(book: str, chapter: int, verse: int) -> str:
    """Filename for a verse note, e.g. ``Song_of_Solomon_2_4.md``."""
    return f"{_WHITESPACE.sub('_', book)}_{chapter}_{verse}{NOTE_EXTENSION}"


def write_verse_note(
    directory: Path,
    verse: VerseRecord,
    linked: LinkedEntitySet,
    *,
    overwrite: bool = False,
) -> Path:
    """Write a verse note into ``directory`` and return its path.

    An existing note is left untouched unless ``overwrite`` is set.
    """
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / note_filename(verse.book, verse.chapter, verse.verse)
    if path.exists() and not overwrite:
        logger.info("Note %s already exists, leaving it unchanged", path)
        return path
    path.write_text(render_verse_note(verse, linked), encoding="utf-8")
    logger.info("Wrote note %s", path)
    return path
