"""Read-only browsing of deck notes: card by card, or as a list with details."""

from typing import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..models import Note
from ..utils.parsing import TextParser
from .prompter import Choice, Prompter

BACK = "back"


def render_note(console: Console, note: Note, title: str) -> None:
    """Print every field of a note with its tags."""
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column(style="bold cyan", no_wrap=True)
    table.add_column()
    for name, value in note.ordered_fields():
        table.add_row(Text(f"{name}:"), Text(TextParser.to_plain_text(value)))
    tags = ", ".join(note.tags) or "No tags"
    console.print(Panel(table, title=title, subtitle=Text(f"Tags: {tags}")))


def note_preview(note: Note) -> str:
    parts = [f"{name}: {TextParser.preview(value)}" for name, value in note.ordered_fields()]
    return " | ".join(parts) + "..."


async def view_cards(notes: Sequence[Note], prompter: Prompter, console: Console) -> None:
    """Step through notes one at a time."""
    if not notes:
        console.print("No cards found in this deck.")
        return

    index = 0
    while True:
        console.clear()
        render_note(console, notes[index], f"Card {index + 1} of {len(notes)}")

        action = await prompter.select("Navigation:", [
            Choice(name="Previous card", value="prev", disabled=index == 0),
            Choice(name="Next card", value="next", disabled=index == len(notes) - 1),
            Choice(name="Back to deck menu", value=BACK),
        ])
        if action == BACK:
            console.clear()
            return
        if action == "prev" and index > 0:
            index -= 1
        elif action == "next" and index < len(notes) - 1:
            index += 1


async def view_notes_list(notes: Sequence[Note], prompter: Prompter, console: Console) -> None:
    """List notes with previews; choosing one shows its details."""
    if not notes:
        console.print("No notes found in this deck.")
        return

    while True:
        console.clear()
        console.print(f"Total notes: {len(notes)}\n")
        choices = [Choice(name=f"{i + 1}. {note_preview(note)}", value=i) for i, note in enumerate(notes)]
        choices.append(Choice(name="Back to deck menu", value=BACK))
        picked = await prompter.select("Select a note to view details (or back to return):", choices)
        if picked == BACK:
            console.clear()
            return

        console.clear()
        render_note(console, notes[picked], f"Note {picked + 1} of {len(notes)}")
        await prompter.select("Navigation:", [Choice(name="Back to notes list", value=BACK)])
