"""hanki - AI-assisted enrichment for Korean vocabulary notes in Anki"""

__version__ = "1.0.0"
__author__ = "hanki Team"

from .config import Config
from .exceptions import (
    HankiError,
    ConfigurationError,
    AnkiConnectError,
    AnkiUnavailableError,
    AnkiRemoteError,
    AnkiTransportError,
    GenerationError,
    EnhancementError,
)
from .models import Note, NoteField, GeneratedFields, EnhanceSelection, BatchOutcome

__all__ = [
    'Config',
    'HankiError',
    'ConfigurationError',
    'AnkiConnectError',
    'AnkiUnavailableError',
    'AnkiRemoteError',
    'AnkiTransportError',
    'GenerationError',
    'EnhancementError',
    'Note',
    'NoteField',
    'GeneratedFields',
    'EnhanceSelection',
    'BatchOutcome',
]
