"""Runtime configuration, read once from the environment at process entry."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import load_dotenv

from ..exceptions import ConfigurationError

DEFAULT_ANKI_CONNECT_URL = "http://localhost:8765"
DEFAULT_ELEVENLABS_URL = "https://api.elevenlabs.io/v1"


@dataclass(frozen=True)
class AnkiConnectConfig:
    """Connection settings for the AnkiConnect add-on."""
    url: str = DEFAULT_ANKI_CONNECT_URL
    version: int = 6
    timeout: float = 5.0      # seconds, per attempt
    retries: int = 2          # extra attempts after the first one
    retry_delay: float = 1.0  # seconds between attempts


@dataclass(frozen=True)
class AIConfig:
    """Configuration for the language-model service (OpenAI-compatible API)."""
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    model: str = "gpt-4"
    temperature: float = 0.7
    timeout: int = 60


@dataclass(frozen=True)
class SpeechConfig:
    """Configuration for the ElevenLabs text-to-speech service."""
    api_key: Optional[str] = None
    voice_id: Optional[str] = None
    model_id: Optional[str] = None
    base_url: str = DEFAULT_ELEVENLABS_URL
    timeout: int = 60

    def missing(self) -> List[str]:
        """Return the environment variable names of absent settings."""
        names = []
        if not self.api_key:
            names.append("ELEVEN_API_KEY")
        if not self.voice_id:
            names.append("ELEVEN_VOICE_ID")
        if not self.model_id:
            names.append("ELEVEN_MODEL_ID")
        return names

    @property
    def is_configured(self) -> bool:
        return not self.missing()


@dataclass(frozen=True)
class Config:
    """
    Application-wide configuration.

    Built once in the entry point and handed to every component that needs it.

    Usage:
        config = Config.from_env()
        config.require_generation()
        client = AnkiConnectClient(config.anki)
    """
    anki: AnkiConnectConfig = field(default_factory=AnkiConnectConfig)
    ai: AIConfig = field(default_factory=AIConfig)
    speech: SpeechConfig = field(default_factory=SpeechConfig)
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        env_file: Optional[Path] = None,
    ) -> "Config":
        """
        Create config from environment variables.

        Args:
            env: Mapping to read instead of ``os.environ`` (no .env loading then)
            env_file: Explicit .env file; defaults to ``.env`` in the working directory

        Returns:
            Populated Config

        Raises:
            ConfigurationError: If a numeric variable or the log level cannot be parsed
        """
        if env is None:
            load_dotenv(env_file or Path.cwd() / ".env")
            env = os.environ

        try:
            anki = AnkiConnectConfig(
                url=env.get("ANKI_CONNECT_URL", DEFAULT_ANKI_CONNECT_URL),
                timeout=float(env.get("ANKI_CONNECT_TIMEOUT", "5")),
            )
            ai = AIConfig(
                api_key=env.get("OPENROUTER_API_KEY") or None,
                base_url=env.get("OPENROUTER_BASE_URL") or None,
                model=env.get("AI_MODEL", "gpt-4"),
                temperature=float(env.get("AI_TEMPERATURE", "0.7")),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}") from e

        speech = SpeechConfig(
            api_key=env.get("ELEVEN_API_KEY") or None,
            voice_id=env.get("ELEVEN_VOICE_ID") or None,
            model_id=env.get("ELEVEN_MODEL_ID") or None,
        )

        log_level = env.get("HANKI_LOG_LEVEL", "WARNING").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigurationError(f"Invalid HANKI_LOG_LEVEL: {log_level}")

        return cls(
            anki=anki,
            ai=ai,
            speech=speech,
            log_level=log_level,
            log_file=env.get("HANKI_LOG_FILE") or None,
        )

    def require_generation(self) -> None:
        """Fail fast when the language-model credentials are missing."""
        missing = []
        if not self.ai.api_key:
            missing.append("OPENROUTER_API_KEY")
        if not self.ai.base_url:
            missing.append("OPENROUTER_BASE_URL")
        if missing:
            raise ConfigurationError(
                f"{', '.join(missing)} is not set in environment variables"
            )
