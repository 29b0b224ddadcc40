"""
AI Service - structured generation through an OpenAI-compatible API.

Every request forces a single function (tool) call so the model answers
with one JSON object matching a closed schema.
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import aiohttp

from ..config import AIConfig
from ..exceptions import GenerationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSchema:
    """A function the model is forced to call, with its JSON-schema parameters."""
    name: str
    description: str
    properties: Dict[str, Any]
    required: tuple = ()

    def to_tool(self) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "required": list(self.required),
                    "properties": self.properties,
                },
            },
        }

    def to_tool_choice(self) -> Dict[str, Any]:
        return {"type": "function", "function": {"name": self.name}}


class BaseAIProvider(ABC):
    """Abstract base class for structured-output providers."""

    @abstractmethod
    async def complete_structured(
        self,
        system_prompt: str,
        prompt: str,
        tool: ToolSchema,
    ) -> Optional[Dict[str, Any]]:
        """
        Ask the model to call ``tool``.

        Returns:
            Decoded tool arguments, or None when the model made no tool call

        Raises:
            GenerationError: Transport failure or undecodable arguments
        """

    async def close(self) -> None:
        """Close any open resources."""


class OpenAIProvider(BaseAIProvider):
    """OpenAI chat completions API provider (also OpenRouter and other compatible APIs)."""

    def __init__(self, config: AIConfig):
        self.config = config
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def complete_structured(
        self,
        system_prompt: str,
        prompt: str,
        tool: ToolSchema,
    ) -> Optional[Dict[str, Any]]:
        session = await self._get_session()

        base_url = self.config.base_url.rstrip("/")
        url = f"{base_url}/chat/completions"

        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

        payload = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "tools": [tool.to_tool()],
            "tool_choice": tool.to_tool_choice(),
            "temperature": self.config.temperature,
        }

        try:
            async with session.post(url, headers=headers, json=payload) as response:
                if response.status != 200:
                    error = await response.text()
                    raise GenerationError(f"AI API error {response.status}: {error[:200]}")
                data = await response.json(content_type=None)
        except asyncio.TimeoutError:
            raise GenerationError("AI API timeout")
        except aiohttp.ClientError as e:
            raise GenerationError(f"AI API request failed: {e}") from e
        except ValueError as e:
            raise GenerationError(f"AI API returned an invalid body: {e}") from e

        return self.extract_arguments(data)

    @staticmethod
    def extract_arguments(data: Any) -> Optional[Dict[str, Any]]:
        """Pull the first tool call's arguments out of a chat completion body."""
        try:
            tool_calls = data["choices"][0]["message"].get("tool_calls") or []
            arguments = tool_calls[0]["function"]["arguments"] if tool_calls else None
        except (KeyError, IndexError, TypeError, AttributeError):
            return None
        if not arguments:
            return None

        if isinstance(arguments, dict):
            return arguments
        try:
            decoded = json.loads(arguments)
        except (TypeError, ValueError) as e:
            logger.error("Error parsing AI response: %s", e)
            raise GenerationError("Failed to decode structured output") from e
        if not isinstance(decoded, dict):
            raise GenerationError("Structured output is not an object")
        return decoded
