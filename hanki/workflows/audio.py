"""Pronunciation audio for notes: synthesize, store in Anki, link from the Audio field."""

import logging
from pathlib import Path
from typing import Optional, Sequence

import aiofiles

from ..config import AUDIO_FIELD
from ..models import BatchOutcome, Note
from ..services import ContentGenerator, NoteStore
from ..utils.paths import MediaPathGenerator
from .base import ProgressCallback, ProgressReporter

logger = logging.getLogger(__name__)


class AudioWorkflow(ProgressReporter):
    """Adds generated speech to notes."""

    def __init__(
        self,
        store: NoteStore,
        generator: ContentGenerator,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        super().__init__(progress_callback)
        self.store = store
        self.generator = generator

    async def add_audio(self, note: Note) -> Optional[str]:
        """
        Generate audio for a note's Korean text and attach it.

        Args:
            note: Target note

        Returns:
            Stored media filename, or None when the note has no Korean text
        """
        korean = note.front.strip()
        if not korean:
            logger.warning("Note %s has no Korean text; skipping audio", note.note_id)
            self._emit("log", "No Korean text found in note")
            return None

        self._emit("log", f"Generating audio for: {korean}")
        audio_path = await self.generator.synthesize_speech(korean)
        try:
            filename = MediaPathGenerator.audio_filename(note.note_id)
            async with aiofiles.open(audio_path, "rb") as f:
                data = await f.read()
            await self.store.store_media_file(filename, data)
            await self.store.update_note_fields(note.note_id, {
                AUDIO_FIELD: MediaPathGenerator.sound_tag(filename),
            })
        finally:
            Path(audio_path).unlink(missing_ok=True)

        self._emit("log", "Successfully added audio to note")
        return filename

    async def add_audio_batch(self, notes: Sequence[Note]) -> BatchOutcome:
        """Add audio to several notes sequentially with per-note error isolation."""
        return await self.run_batch(notes, self.add_audio, verb="Generating audio for")
