"""Transient values produced by the content generator."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Dict, FrozenSet, Iterable, Mapping, Optional

from ..config.fields import METADATA_FIELDS, REVIEW_TAG, get_metadata_keys


@dataclass(frozen=True)
class WordPair:
    """A Korean word and its English meaning."""
    korean: str
    english: str

    def __str__(self) -> str:
        return f"{self.korean} ({self.english})"


@dataclass(frozen=True)
class GeneratedSentence:
    """Practice sentence built from several deck words."""
    korean: str
    english: str
    grammar_notes: str


@dataclass
class GeneratedFields:
    """
    Metadata produced for one word.

    Only the known metadata keys can ever be set, so identity fields
    (front, back, image, audio) never reach a note through this type.
    """

    values: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "GeneratedFields":
        """Copy allow-listed, non-empty string values from a model payload."""
        values = {}
        for key in get_metadata_keys():
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                values[key] = value
        return cls(values=values)

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def as_dict(self) -> Dict[str, str]:
        return dict(self.values)


@dataclass(frozen=True)
class EnhanceSelection:
    """Which metadata to generate and whether to tag notes for review."""

    keys: FrozenSet[str] = frozenset(METADATA_FIELDS)
    add_review_tag: bool = False
    review_tag: str = REVIEW_TAG

    @classmethod
    def from_choices(cls, choices: Iterable[str]) -> "EnhanceSelection":
        """Build a selection from checkbox values (metadata keys plus the tag option)."""
        chosen = set(choices)
        return cls(
            keys=frozenset(k for k in get_metadata_keys() if k in chosen),
            add_review_tag=REVIEW_TAG in chosen,
        )

    def build_updates(self, generated: GeneratedFields) -> Dict[str, str]:
        """Map selected generated values onto Anki field names."""
        updates = {}
        for key in get_metadata_keys():
            value = generated.get(key)
            if key in self.keys and value:
                updates[METADATA_FIELDS[key].note_field] = value
        return updates

    @property
    def is_empty(self) -> bool:
        return not self.keys and not self.add_review_tag


class AudioKind(Enum):
    """Shape of the audio returned by the speech service."""
    STREAM = "stream"
    BUFFER = "buffer"


@dataclass
class AudioPayload:
    """Audio returned by a speech provider; exactly one of stream/data is set."""

    kind: AudioKind
    stream: Optional[AsyncIterator[bytes]] = None
    data: Optional[bytes] = None

    @classmethod
    def from_stream(cls, stream: AsyncIterator[bytes]) -> "AudioPayload":
        return cls(kind=AudioKind.STREAM, stream=stream)

    @classmethod
    def from_bytes(cls, data: bytes) -> "AudioPayload":
        return cls(kind=AudioKind.BUFFER, data=data)
