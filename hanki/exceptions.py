"""Exception hierarchy shared by all hanki layers."""

from typing import Optional


class HankiError(Exception):
    """Base class for every error hanki raises on purpose."""


class ConfigurationError(HankiError):
    """Required settings (API keys, voice/model ids) are missing or invalid."""


class AnkiConnectError(HankiError):
    """AnkiConnect could not be reached or used."""


class AnkiUnavailableError(AnkiConnectError):
    """AnkiConnect did not answer the preflight check in time."""


class AnkiRemoteError(AnkiConnectError):
    """AnkiConnect understood the request and rejected it."""

    def __init__(self, action: str, message: str):
        self.action = action
        self.remote_message = message
        super().__init__(f"AnkiConnect error: {message}")


class AnkiTransportError(AnkiConnectError):
    """Every attempt to reach AnkiConnect failed (timeout, connection, bad body)."""

    def __init__(self, action: str, message: str, attempts: int, cause: Optional[BaseException] = None):
        self.action = action
        self.attempts = attempts
        self.cause = cause
        super().__init__(message)


class GenerationError(HankiError):
    """The language model or speech service gave no usable output."""


class EnhancementError(HankiError):
    """Enhancing a single note failed at some step."""
