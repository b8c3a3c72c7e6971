"""CLI for scripture_study.

Commands:
    init-db                  - Create tables in the configured database
    verse <uid>              - Show a verse with links, commentary and audio
    chapter <book> <n>       - List the verses of a chapter
    search <query>           - Case-insensitive text search
    links <uid>              - Show the entities a verse links to
    commentary <uid>         - Show commentary for a verse
    note <uid>               - Write the markdown study note for a verse
    ask <question>           - Ask the AI study assistant
    parse-uid <uid>          - Explain an identifier
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Annotated, TypeVar

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from scripture_study.config import Settings
from scripture_study.context import StudyContext
from scripture_study.exceptions import ScriptureStudyError
from scripture_study.models import UidKind
from scripture_study.schemas import LinkedEntitySet, VerseRecord
from scripture_study.utils.uids import (
    category_of,
    is_well_formed,
    parse_named_uid,
    parse_verse_uid,
)

T = TypeVar("T")

app = typer.Typer(
    name="scripture-study",
    help="Scripture study: verses linked to people, places, topics, events and word studies",
    no_args_is_help=True,
)
console = Console()


def run_async(coro):
    """Run an async coroutine in sync context."""
    return asyncio.run(coro)


def load_settings() -> Settings:
    settings = Settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return settings


def run_with_context(action: Callable[[StudyContext], Awaitable[T]]) -> T:
    """Open a StudyContext, run ``action`` in it and always disconnect.

    Library errors become a red message and exit code 1.
    """
    async def _run() -> T:
        async with StudyContext.from_settings(load_settings()) as ctx:
            return await action(ctx)

    try:
        return run_async(_run())
    except ScriptureStudyError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e
    except SQLAlchemyError as e:
        console.print(f"[red]Database error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e


def _verse_not_found(uid: str) -> typer.Exit:
    console.print(f"[red]Error:[/red] Verse not found: {escape(uid)}")
    return typer.Exit(1)


def _print_verses(verses: list[VerseRecord], title: str) -> None:
    table = Table(title=title)
    table.add_column("UID", no_wrap=True)
    table.add_column("Reference")
    table.add_column("Text")
    for verse in verses:
        table.add_row(verse.uid, escape(verse.reference), escape(verse.text))
    console.print(table)


def _print_links(linked: LinkedEntitySet) -> None:
    if linked.is_empty():
        console.print("[dim]No linked entities.[/dim]")
        return

    table = Table(title="Linked Entities")
    table.add_column("Category")
    table.add_column("UID", no_wrap=True)
    table.add_column("Name")
    table.add_column("Details")
    for group, records in (
        ("person", linked.people),
        ("place", linked.places),
        ("topic", linked.topics),
        ("event", linked.events),
    ):
        for record in records:
            table.add_row(group, record.uid, escape(record.name), escape(record.description or "-"))
    for entry in linked.lexicon:
        details = entry.definition
        if entry.strongs_number:
            details = f"{entry.strongs_number}: {details}"
        table.add_row("lexicon", entry.uid, escape(f"{entry.word} ({entry.original})"), escape(details))
    console.print(table)


@app.command("init-db")
def init_db_command() -> None:
    """Create any missing tables in the configured database."""
    async def _init(ctx: StudyContext) -> None:
        await ctx.store.create_schema()
        console.print(f"[green]OK[/green] schema ready on {ctx.store.backend}")

    run_with_context(_init)


@app.command()
def verse(
    uid: Annotated[str, typer.Argument(help="Verse UID, e.g. VR-KJV-010101-AA")],
) -> None:
    """Show a verse with its linked entities, commentary and audio."""
    async def _show(ctx: StudyContext) -> None:
        study = await ctx.open_verse(uid)
        if study is None:
            raise _verse_not_found(uid)

        v = study.verse
        panel_content = [
            f"[bold]UID:[/bold] {v.uid}",
            f"[bold]Translation:[/bold] {escape(v.translation)}",
            "",
            escape(v.text),
        ]
        if study.audio_path:
            panel_content.append("")
            panel_content.append(f"[bold]Audio:[/bold] {escape(str(study.audio_path))}")
        console.print(Panel("\n".join(panel_content), title=escape(v.reference)))

        _print_links(study.linked)

        for comment in study.commentary:
            title = comment.author if not comment.source else f"{comment.author} ({comment.source})"
            console.print(Panel(escape(comment.text), title=escape(title)))

    run_with_context(_show)


@app.command()
def chapter(
    book: Annotated[str, typer.Argument(help="Book name, e.g. Genesis")],
    chapter_number: Annotated[int, typer.Argument(help="Chapter number", min=1)],
    translation: Annotated[
        str | None, typer.Option("--translation", "-t", help="Translation code")
    ] = None,
) -> None:
    """List the verses of one chapter."""
    async def _list(ctx: StudyContext) -> None:
        verses = await ctx.store.get_verses_by_chapter(book, chapter_number, translation=translation)
        if not verses:
            console.print(f"[yellow]No verses found for {escape(book)} {chapter_number}.[/yellow]")
            raise typer.Exit(0)
        _print_verses(verses, f"{book} {chapter_number}")

    run_with_context(_list)


@app.command()
def search(
    query: Annotated[str, typer.Argument(help="Text to search for (case-insensitive)")],
) -> None:
    """Search verse text."""
    async def _search(ctx: StudyContext) -> None:
        verses = await ctx.store.search_verses(query)
        if not verses:
            console.print("[yellow]No matching verses.[/yellow]")
            return
        _print_verses(verses, f"Search: {query} ({len(verses)} results)")

    run_with_context(_search)


@app.command()
def links(
    uid: Annotated[str, typer.Argument(help="Verse UID")],
) -> None:
    """Show the entities a verse links to."""
    async def _links(ctx: StudyContext) -> None:
        _print_links(await ctx.store.get_linked_entities(uid))

    run_with_context(_links)


@app.command()
def commentary(
    uid: Annotated[str, typer.Argument(help="Verse UID")],
) -> None:
    """Show commentary for a verse."""
    async def _commentary(ctx: StudyContext) -> None:
        entries = await ctx.store.get_commentary(uid)
        if not entries:
            console.print("No commentary available for this verse.")
            return
        for entry in entries:
            console.print(Panel(escape(entry.text), title=escape(entry.author)))

    run_with_context(_commentary)


@app.command()
def note(
    uid: Annotated[str, typer.Argument(help="Verse UID")],
    out: Annotated[
        Path | None, typer.Option("--out", "-o", help="Notes directory (default: notes_dir)")
    ] = None,
    overwrite: Annotated[
        bool, typer.Option("--overwrite", help="Replace an existing note")
    ] = False,
) -> None:
    """Write the markdown study note for a verse."""
    async def _note(ctx: StudyContext) -> None:
        path = await ctx.export_note(uid, out, overwrite=overwrite)
        if path is None:
            raise _verse_not_found(uid)
        console.print(f"[green]OK[/green] → {escape(str(path))}")

    run_with_context(_note)


@app.command()
def ask(
    question: Annotated[str, typer.Argument(help="Question for the study assistant")],
    verse_uid: Annotated[
        str | None, typer.Option("--verse", "-v", help="Verse UID to use as context")
    ] = None,
) -> None:
    """Ask the AI study assistant about a passage."""
    async def _ask(ctx: StudyContext) -> str:
        return await ctx.ask(question, verse_uid=verse_uid)

    console.print(Markdown(run_with_context(_ask)))


@app.command("parse-uid")
def parse_uid(
    uid: Annotated[str, typer.Argument(help="Identifier to explain")],
) -> None:
    """Explain what an identifier refers to."""
    kind = category_of(uid)
    if kind is None:
        console.print(f"[red]Unknown identifier:[/red] {escape(uid)}")
        raise typer.Exit(1)

    console.print(f"[bold]Kind:[/bold] {kind.value}")
    if not is_well_formed(uid):
        console.print(f"[yellow]Prefix is valid but {escape(uid)} is not well-formed[/yellow]")
        raise typer.Exit(1)

    if kind is UidKind.VERSE:
        parsed = parse_verse_uid(uid)
        assert parsed is not None
        console.print(f"[bold]Translation:[/bold] {parsed.translation}")
        console.print(f"[bold]Book index:[/bold] {parsed.book}")
        console.print(f"[bold]Chapter:[/bold] {parsed.chapter}")
        console.print(f"[bold]Verse:[/bold] {parsed.verse}")
        console.print(f"[bold]Suffix:[/bold] {parsed.suffix}")
    else:
        console.print(f"[bold]Sequence:[/bold] {parse_named_uid(uid, kind)}")


if __name__ == "__main__":
    app()
