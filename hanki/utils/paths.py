"""
Media naming utilities - single source of truth for audio file names.
"""

import time
from typing import Optional


class MediaPathGenerator:
    """Centralized media file name generator."""

    AUDIO_EXT = ".mp3"

    @classmethod
    def audio_filename(cls, note_id: int, timestamp_ms: Optional[int] = None) -> str:
        """
        Generate a collision-free filename for a note's audio.

        Args:
            note_id: Anki note id
            timestamp_ms: Milliseconds since the epoch (defaults to now)

        Returns:
            Filename like "note_1700000000000_1712345678901.mp3"
        """
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        return f"note_{note_id}_{timestamp_ms}{cls.AUDIO_EXT}"

    @staticmethod
    def sound_tag(filename: str) -> str:
        """Anki markup that plays a media file."""
        return f"[sound:{filename}]"
