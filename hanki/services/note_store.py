"""
Note Store - typed note and deck operations over AnkiConnect.

No business logic lives here: each method shapes one or two requests
and passes AnkiConnect errors through unchanged.
"""

import base64
from typing import Dict, List, Optional, Sequence, Union

from ..models import Note
from .anki_connect import AnkiConnectClient

Tags = Union[str, Sequence[str]]


def join_tags(tags: Tags) -> str:
    """AnkiConnect takes several tags as one space-separated string."""
    if isinstance(tags, str):
        return tags.strip()
    return " ".join(tag.strip() for tag in tags if tag.strip())


class NoteStore:
    """Deck and note access for one AnkiConnect client."""

    def __init__(self, client: AnkiConnectClient):
        self.client = client

    async def deck_names(self) -> List[str]:
        return await self.client.invoke("deckNames")

    async def find_notes(self, deck_name: str) -> List[int]:
        """Get ids of all notes in a deck (exact name match)."""
        query = f'deck:"{deck_name}"'
        return await self.client.invoke("findNotes", {"query": query})

    async def notes_info(self, note_ids: Sequence[int]) -> List[Note]:
        """
        Fetch fields, tags and template name for several notes in one call.

        An empty id list returns immediately without contacting Anki.
        """
        if not note_ids:
            return []
        infos = await self.client.invoke("notesInfo", {"notes": list(note_ids)})
        # AnkiConnect returns an empty object for ids that no longer exist
        return [Note.from_api(info) for info in infos if info and "noteId" in info]

    async def notes_in_deck(self, deck_name: str) -> List[Note]:
        note_ids = await self.find_notes(deck_name)
        if not note_ids:
            return []
        return await self.notes_info(note_ids)

    async def get_note(self, note_id: int) -> Optional[Note]:
        """Fetch the current remote copy of a single note."""
        notes = await self.notes_info([note_id])
        return notes[0] if notes else None

    async def update_note_fields(self, note_id: int, fields: Dict[str, str]) -> None:
        """Set the named fields; fields not named are left untouched."""
        await self.client.invoke("updateNoteFields", {
            "note": {
                "id": note_id,
                "fields": dict(fields),
            }
        })

    async def add_tags(self, note_ids: Sequence[int], tags: Tags) -> None:
        await self.client.invoke("addTags", {"notes": list(note_ids), "tags": join_tags(tags)})

    async def remove_tags(self, note_ids: Sequence[int], tags: Tags) -> None:
        await self.client.invoke("removeTags", {"notes": list(note_ids), "tags": join_tags(tags)})

    async def store_media_file(self, filename: str, data: bytes) -> None:
        """Store a media blob in Anki's collection under ``filename``."""
        await self.client.invoke("storeMediaFile", {
            "filename": filename,
            "data": base64.b64encode(data).decode("ascii"),
        })
