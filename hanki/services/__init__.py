"""Services layer: AnkiConnect access and AI content generation."""

from .anki_connect import AnkiConnectClient, UNAVAILABLE_MESSAGE
from .note_store import NoteStore, join_tags
from .ai_service import BaseAIProvider, OpenAIProvider, ToolSchema
from .speech_service import BaseSpeechProvider, ElevenLabsProvider
from .content_generator import ContentGenerator

__all__ = [
    "AnkiConnectClient",
    "UNAVAILABLE_MESSAGE",
    "NoteStore",
    "join_tags",
    "BaseAIProvider",
    "OpenAIProvider",
    "ToolSchema",
    "BaseSpeechProvider",
    "ElevenLabsProvider",
    "ContentGenerator",
]
