"""Data models for hanki."""

from .note import Note, NoteField
from .generation import (
    WordPair,
    GeneratedSentence,
    GeneratedFields,
    EnhanceSelection,
    AudioKind,
    AudioPayload,
)
from .batch import BatchItemResult, BatchOutcome

__all__ = [
    'Note',
    'NoteField',
    'WordPair',
    'GeneratedSentence',
    'GeneratedFields',
    'EnhanceSelection',
    'AudioKind',
    'AudioPayload',
    'BatchItemResult',
    'BatchOutcome',
]
