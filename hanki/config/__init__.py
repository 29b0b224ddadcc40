"""Configuration module for hanki."""

from .settings import Config, AnkiConnectConfig, AIConfig, SpeechConfig
from .fields import (
    METADATA_FIELDS,
    MetadataField,
    WORD_TYPES,
    FRONT_FIELD,
    BACK_FIELD,
    AUDIO_FIELD,
    EXAMPLES_FIELD,
    REVIEW_TAG,
    get_metadata_keys,
    get_required_keys,
)

__all__ = [
    'Config',
    'AnkiConnectConfig',
    'AIConfig',
    'SpeechConfig',
    'METADATA_FIELDS',
    'MetadataField',
    'WORD_TYPES',
    'FRONT_FIELD',
    'BACK_FIELD',
    'AUDIO_FIELD',
    'EXAMPLES_FIELD',
    'REVIEW_TAG',
    'get_metadata_keys',
    'get_required_keys',
]
