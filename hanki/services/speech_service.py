"""Speech synthesis through the ElevenLabs text-to-speech API."""

import asyncio
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import aiohttp

from ..config import SpeechConfig
from ..exceptions import GenerationError
from ..models import AudioPayload


class BaseSpeechProvider(ABC):
    """Abstract base class for text-to-speech providers."""

    @abstractmethod
    def convert(self, text: str, voice_id: str, model_id: str):
        """
        Async context manager yielding an ``AudioPayload`` for ``text``.

        A streamed payload is only readable inside the context.
        """

    async def close(self) -> None:
        """Close any open resources."""


class ElevenLabsProvider(BaseSpeechProvider):
    """ElevenLabs REST provider."""

    CHUNK_SIZE = 8192

    def __init__(self, config: SpeechConfig):
        self.config = config
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    @asynccontextmanager
    async def convert(self, text: str, voice_id: str, model_id: str) -> AsyncIterator[AudioPayload]:
        session = await self._get_session()

        url = f"{self.config.base_url.rstrip('/')}/text-to-speech/{voice_id}/stream"
        headers = {
            "xi-api-key": self.config.api_key or "",
            "Accept": "audio/mpeg",
        }
        payload = {"text": text, "model_id": model_id}

        try:
            async with session.post(url, headers=headers, json=payload) as response:
                if response.status != 200:
                    error = await response.text()
                    raise GenerationError(f"ElevenLabs API error {response.status}: {error[:200]}")

                content_type = response.headers.get("Content-Type", "")
                if not content_type.startswith("audio/") and content_type != "application/octet-stream":
                    raise GenerationError("Unsupported audio format returned from ElevenLabs API.")

                if response.headers.get("Transfer-Encoding", "").lower() == "chunked":
                    yield AudioPayload.from_stream(response.content.iter_chunked(self.CHUNK_SIZE))
                else:
                    yield AudioPayload.from_bytes(await response.read())
        except asyncio.TimeoutError:
            raise GenerationError("ElevenLabs API timeout")
        except aiohttp.ClientError as e:
            raise GenerationError(f"ElevenLabs request failed: {e}") from e
