"""
Content Generator - enrichment content for Korean vocabulary notes.

Provides:
- Linguistic metadata for a word (type, examples, conjugations, ...)
- Selection of deck words that combine into one sentence
- A practice sentence with translation and grammar notes
- Pronunciation audio via text-to-speech
"""

import logging
import tempfile
import uuid
from pathlib import Path
from typing import List, Optional, Sequence

import aiofiles

from ..config import METADATA_FIELDS, WORD_TYPES, Config, get_required_keys
from ..exceptions import ConfigurationError, GenerationError
from ..models import AudioKind, GeneratedFields, GeneratedSentence, WordPair
from .ai_service import BaseAIProvider, OpenAIProvider, ToolSchema
from .speech_service import BaseSpeechProvider, ElevenLabsProvider

logger = logging.getLogger(__name__)


def _card_info_properties() -> dict:
    properties = {}
    for key, meta in METADATA_FIELDS.items():
        prop = {"type": "string", "description": meta.description}
        if key == "type":
            prop["enum"] = list(WORD_TYPES)
        properties[key] = prop
    return properties


CARD_INFO_TOOL = ToolSchema(
    name="generateKoreanCardInfo",
    description="Generate structured information for a Korean vocabulary card",
    properties=_card_info_properties(),
    required=tuple(get_required_keys()),
)

SELECT_WORDS_TOOL = ToolSchema(
    name="selectWords",
    description="Select words that can be naturally used together",
    properties={
        "selectedIndices": {
            "type": "array",
            "items": {"type": "integer"},
            "description": "Indices of the selected words (0-based)",
        },
        "reason": {
            "type": "string",
            "description": "Brief explanation of why these words work well together",
        },
    },
    required=("selectedIndices",),
)

SENTENCE_TOOL = ToolSchema(
    name="generateSentence",
    description="Generate a Korean sentence with translation and grammar notes",
    properties={
        "korean": {"type": "string", "description": "The Korean sentence using the provided words"},
        "english": {"type": "string", "description": "English translation of the Korean sentence"},
        "grammarNotes": {"type": "string", "description": "Brief notes explaining the grammar used in the sentence"},
    },
    required=("korean", "english", "grammarNotes"),
)


class ContentGenerator:
    """
    High-level generation service used by the workflows.

    Usage:
        async with ContentGenerator(config) as generator:
            fields = await generator.generate_fields("먹다", "to eat")
    """

    SYSTEM_PROMPTS = {
        "card_info": (
            "You are a Korean language teaching assistant. Provide concise, accurate information "
            "about Korean words. Format phonetics clearly for English speakers. Keep examples simple "
            "and beginner-friendly. Always provide complete sentences for examples."
        ),
        "select_words": (
            "You are a Korean language teaching assistant. Select 3-4 words that can naturally "
            "be used together in a simple, practical sentence."
        ),
        "sentence": (
            "You are a Korean language teaching assistant. Generate natural, beginner-friendly "
            "Korean sentences using the provided words. Keep sentences simple and practical."
        ),
    }

    def __init__(
        self,
        config: Config,
        ai_provider: Optional[BaseAIProvider] = None,
        speech_provider: Optional[BaseSpeechProvider] = None,
    ):
        """
        Initialize generator.

        Args:
            config: Application config (AI and speech credentials)
            ai_provider: Structured-output provider (OpenAI-compatible by default)
            speech_provider: Text-to-speech provider (ElevenLabs by default)
        """
        self.config = config
        self.ai_provider = ai_provider or OpenAIProvider(config.ai)
        self.speech_provider = speech_provider or ElevenLabsProvider(config.speech)

    async def close(self) -> None:
        await self.ai_provider.close()
        await self.speech_provider.close()

    async def __aenter__(self) -> "ContentGenerator":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def generate_fields(self, korean: str, english: str) -> GeneratedFields:
        """
        Generate linguistic metadata for a word.

        Args:
            korean: The Korean word (note Front)
            english: Its meaning (note Back)

        Returns:
            Metadata values; never contains front/back/image/audio

        Raises:
            GenerationError: No structured payload came back
        """
        prompt = f'Generate detailed information for the Korean word "{korean}" (meaning: "{english}").'
        result = await self.ai_provider.complete_structured(
            self.SYSTEM_PROMPTS["card_info"], prompt, CARD_INFO_TOOL
        )
        if result is None:
            raise GenerationError("Failed to generate card fields: no tool call in response")
        return GeneratedFields.from_payload(result)

    async def select_combinable_words(self, candidates: Sequence[WordPair]) -> List[WordPair]:
        """
        Let the model pick 3-4 candidates that fit together in one sentence.

        Indices outside the candidate list are dropped; the model's order is kept.

        Raises:
            GenerationError: Missing or invalid selection, or nothing valid selected
        """
        listing = "\n".join(str(word) for word in candidates)
        prompt = (
            f"Here are some Korean words:\n{listing}\n\n"
            "Select 3-4 of these words that could naturally be used together in a beginner-friendly sentence."
        )
        result = await self.ai_provider.complete_structured(
            self.SYSTEM_PROMPTS["select_words"], prompt, SELECT_WORDS_TOOL
        )
        if result is None:
            raise GenerationError("No word selection from AI service")

        indices = result.get("selectedIndices")
        if not isinstance(indices, list):
            raise GenerationError("Invalid word selection format")

        if result.get("reason"):
            logger.info("Selection reasoning: %s", result["reason"])

        selected = [
            candidates[i] for i in indices
            if isinstance(i, int) and not isinstance(i, bool) and 0 <= i < len(candidates)
        ]
        if not selected:
            raise GenerationError("Word selection did not reference any candidate word")
        return selected

    async def compose_sentence(self, words: Sequence[WordPair]) -> GeneratedSentence:
        """
        Create one practice sentence using ``words``.

        Raises:
            GenerationError: A required output field is missing
        """
        listing = ", ".join(str(word) for word in words)
        prompt = (
            f"Create a Korean sentence using these words: {listing}.\n"
            "The sentence should be suitable for beginner-intermediate learners."
        )
        result = await self.ai_provider.complete_structured(
            self.SYSTEM_PROMPTS["sentence"], prompt, SENTENCE_TOOL
        )
        if result is None:
            raise GenerationError("No tool call in response")

        korean, english, notes = result.get("korean"), result.get("english"), result.get("grammarNotes")
        if not korean or not english or not notes:
            raise GenerationError("Response missing required fields")
        return GeneratedSentence(korean=str(korean), english=str(english), grammar_notes=str(notes))

    async def synthesize_speech(self, text: str) -> Path:
        """
        Generate pronunciation audio into a temporary MP3 file.

        The caller owns the returned file and removes it when done.

        Raises:
            ConfigurationError: API key, voice id or model id missing (no request is made)
            GenerationError: The service failed or returned an unsupported shape
        """
        speech = self.config.speech
        missing = speech.missing()
        if missing:
            raise ConfigurationError(
                f"ElevenLabs configuration is not complete ({', '.join(missing)} missing). "
                "Please check your .env file."
            )

        path = Path(tempfile.gettempdir()) / f"hanki_tts_{uuid.uuid4().hex[:12]}.mp3"
        try:
            async with self.speech_provider.convert(text, speech.voice_id, speech.model_id) as audio:
                async with aiofiles.open(path, "wb") as f:
                    if audio.kind is AudioKind.STREAM and audio.stream is not None:
                        async for chunk in audio.stream:
                            await f.write(chunk)
                    elif audio.kind is AudioKind.BUFFER and audio.data is not None:
                        await f.write(audio.data)
                    else:
                        raise GenerationError("Unsupported audio format returned from speech service.")
        except Exception:
            path.unlink(missing_ok=True)
            raise
        return path
