"""
AnkiConnect client - timed, retried JSON-over-HTTP calls.

Every request is a single POST of ``{action, version, params}`` to the
local AnkiConnect endpoint. Failures are classified as:
- remote error: AnkiConnect answered with a non-null ``error`` (never retried)
- transport error: timeout, connection failure or malformed body (retried)
- unavailable: the preflight ``version`` call timed out
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from ..config import AnkiConnectConfig
from ..exceptions import (
    AnkiConnectError,
    AnkiRemoteError,
    AnkiTransportError,
    AnkiUnavailableError,
)

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = (
    "Connection to AnkiConnect timed out. Please ensure:\n"
    "1. Anki is running\n"
    "2. AnkiConnect add-on is installed (Tools > Add-ons > Get Add-ons > Code: 2055492159)\n"
    "3. Anki has been restarted after installing AnkiConnect"
)


class MalformedResponseError(Exception):
    """AnkiConnect answered with something that is not a response envelope."""


class AnkiConnectClient:
    """
    Async client for the AnkiConnect add-on.

    Stateless between calls apart from a lazily created HTTP session.

    Usage:
        async with AnkiConnectClient(config.anki) as client:
            await client.check_availability()
            decks = await client.invoke("deckNames")
    """

    def __init__(self, config: Optional[AnkiConnectConfig] = None):
        """
        Initialize client.

        Args:
            config: Endpoint, timeout and retry settings (defaults apply if None)
        """
        self.config = config or AnkiConnectConfig()
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        """Close the session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "AnkiConnectClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def build_request(self, action: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Build the request envelope; ``params`` is omitted when None."""
        request: Dict[str, Any] = {"action": action, "version": self.config.version}
        if params is not None:
            request["params"] = params
        return request

    async def _send(self, request: Dict[str, Any]) -> Any:
        """POST one request and return the decoded JSON body."""
        session = await self._get_session()
        async with session.post(self.config.url, json=request) as response:
            response.raise_for_status()
            return await response.json(content_type=None)

    async def _attempt(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """One attempt bounded by the per-attempt timeout."""
        body = await asyncio.wait_for(self._send(request), timeout=self.config.timeout)
        if not isinstance(body, dict) or "error" not in body or "result" not in body:
            raise MalformedResponseError(f"Unexpected response from AnkiConnect: {str(body)[:100]}")
        return body

    async def invoke(
        self,
        action: str,
        params: Optional[Dict[str, Any]] = None,
        retries: Optional[int] = None,
    ) -> Any:
        """
        Perform one logical AnkiConnect call.

        Args:
            action: AnkiConnect action name
            params: Action parameters (sent as ``{}`` when None)
            retries: Extra attempts after a transport failure (config default if None)

        Returns:
            The decoded ``result`` payload

        Raises:
            AnkiRemoteError: AnkiConnect rejected the request
            AnkiTransportError: All attempts failed to get a valid response
        """
        retries = max(0, self.config.retries if retries is None else retries)
        request = self.build_request(action, params if params is not None else {})
        last_error: Optional[BaseException] = None

        for attempt in range(retries + 1):
            try:
                body = await self._attempt(request)
            except asyncio.TimeoutError as e:
                last_error = e
                message = f"Request to AnkiConnect timed out after {self.config.timeout:g}s"
            except (aiohttp.ClientError, MalformedResponseError, ValueError) as e:
                last_error = e
                message = str(e) or e.__class__.__name__
            else:
                if body["error"] is not None:
                    logger.warning("AnkiConnect rejected %s: %s", action, body["error"])
                    raise AnkiRemoteError(action, str(body["error"]))
                return body["result"]

            logger.info("AnkiConnect %s attempt %d/%d failed: %s", action, attempt + 1, retries + 1, message)
            if attempt < retries:
                await asyncio.sleep(self.config.retry_delay)

        raise AnkiTransportError(action, message, attempts=retries + 1, cause=last_error)

    async def check_availability(self) -> int:
        """
        Preflight check: one bare ``version`` call, no retry.

        Returns:
            AnkiConnect API version

        Raises:
            AnkiUnavailableError: The call timed out
            AnkiConnectError: Any other failure
        """
        request = self.build_request("version")
        try:
            body = await self._attempt(request)
        except asyncio.TimeoutError as e:
            raise AnkiUnavailableError(UNAVAILABLE_MESSAGE) from e
        except (aiohttp.ClientError, MalformedResponseError, ValueError) as e:
            raise AnkiConnectError(f"Failed to connect to AnkiConnect: {e}") from e

        if body["error"] is not None:
            raise AnkiConnectError(f"Failed to connect to AnkiConnect: {body['error']}")
        return body["result"]
