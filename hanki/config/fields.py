"""
Note Field Catalogue
--------------------

Maps the metadata keys produced by the language model onto the field names
of the Korean vocabulary note type in Anki.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

FRONT_FIELD = "Front"
BACK_FIELD = "Back"
AUDIO_FIELD = "Audio"
EXAMPLES_FIELD = "Examples"

REVIEW_TAG = "leech"

WORD_TYPES: Tuple[str, ...] = (
    "verb",
    "noun",
    "adjective",
    "adverb",
    "conjunction",
    "preposition",
    "pronoun",
    "other",
)


@dataclass(frozen=True)
class MetadataField:
    """Definition of a single generated metadata field."""

    key: str
    note_field: str
    label: str
    description: str
    required: bool = False


METADATA_FIELDS: Dict[str, MetadataField] = {
    "type": MetadataField(
        key="type",
        note_field="Type",
        label="Word Type (verb/noun/etc)",
        description="The part of speech of the word",
        required=True,
    ),
    "examples": MetadataField(
        key="examples",
        note_field=EXAMPLES_FIELD,
        label="Example Sentences",
        description="2-3 simple beginner-level sentences using the word (both Korean and English)",
    ),
    "relatedWordsRules": MetadataField(
        key="relatedWordsRules",
        note_field="Related Words/Rules",
        label="Related Words & Usage Rules",
        description="Usage rules and related words in English",
    ),
    "conjugations": MetadataField(
        key="conjugations",
        note_field="Conjugations",
        label="Conjugations",
        description="Common conjugations if it's a verb or adjective (like past, present, future, etc.)",
    ),
    "irregularRules": MetadataField(
        key="irregularRules",
        note_field="Irregular Rules",
        label="Irregular Rules",
        description="Any irregular patterns or rules when using this word in Korean",
    ),
    "additionalRules": MetadataField(
        key="additionalRules",
        note_field="Additional Rules",
        label="Additional Rules",
        description="Any other important usage rules or notes",
    ),
    "phonetics": MetadataField(
        key="phonetics",
        note_field="Phonetics",
        label="Phonetics",
        description="How to pronounce the word using English characters",
    ),
}


def get_metadata_keys() -> List[str]:
    """Get metadata keys in display order."""
    return list(METADATA_FIELDS.keys())


def get_required_keys() -> List[str]:
    """Metadata keys the model must always return."""
    return [key for key, meta in METADATA_FIELDS.items() if meta.required]
