"""Manual editing of metadata fields and tags for a single note."""

from dataclasses import dataclass, field
from typing import Dict, List

from ..config import METADATA_FIELDS, WORD_TYPES
from ..models import Note
from ..services import NoteStore
from ..ui.prompter import Choice, Prompter

TAGS = "tags"


def _not_blank(label: str):
    return lambda value: bool(value.strip()) or f"{label} cannot be empty"


@dataclass
class ModifyOptions:
    """What the user chose to change."""
    fields: List[str] = field(default_factory=list)
    add_tags: List[str] = field(default_factory=list)
    remove_tags: List[str] = field(default_factory=list)


class ModifyWorkflow:
    """Prompts for new field values and tag changes, then writes them."""

    def __init__(self, store: NoteStore, prompter: Prompter):
        self.store = store
        self.prompter = prompter

    async def select_options(self) -> ModifyOptions:
        choices = [Choice(name=meta.label, value=key) for key, meta in METADATA_FIELDS.items()]
        choices.append(Choice(name="Manage Tags", value=TAGS))
        picked = await self.prompter.checkbox("What information would you like to modify?", choices)

        options = ModifyOptions(fields=[key for key in picked if key in METADATA_FIELDS])
        if TAGS not in picked:
            return options

        action = await self.prompter.select("What would you like to do with tags?", [
            Choice(name="Add new tags", value="add"),
            Choice(name="Remove existing tags", value="remove"),
            Choice(name="Both add and remove tags", value="both"),
        ])
        if action in ("add", "both"):
            raw = await self.prompter.text(
                "Enter tags to add (space-separated):",
                lambda value: bool(value.strip()) or "Please enter at least one tag",
            )
            options.add_tags = raw.split()
        if action in ("remove", "both"):
            raw = await self.prompter.text(
                "Enter tags to remove (space-separated):",
                lambda value: bool(value.strip()) or "Please enter at least one tag",
            )
            options.remove_tags = raw.split()
        return options

    async def collect_values(self, note: Note, options: ModifyOptions) -> Dict[str, str]:
        """Ask for each chosen field's new value, keyed by Anki field name."""
        values = {}
        for key in options.fields:
            meta = METADATA_FIELDS[key]
            if key == "type":
                value = await self.prompter.select(
                    f'Select word type for "{note.front}":',
                    [Choice(name=word_type, value=word_type) for word_type in WORD_TYPES],
                )
            else:
                value = await self.prompter.text(
                    f'Enter {meta.label.lower()} for "{note.front}":',
                    _not_blank(meta.label),
                )
            values[meta.note_field] = value
        return values

    async def modify_note(self, note: Note) -> ModifyOptions:
        """Run the full edit for one note and write the changes."""
        options = await self.select_options()
        values = await self.collect_values(note, options)

        if values:
            await self.store.update_note_fields(note.note_id, values)
        if options.add_tags:
            await self.store.add_tags([note.note_id], options.add_tags)
        if options.remove_tags:
            await self.store.remove_tags([note.note_id], options.remove_tags)
        return options
