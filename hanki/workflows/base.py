"""Progress reporting and sequential batch processing shared by workflows."""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence

from ..exceptions import ConfigurationError
from ..models import BatchOutcome, Note

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[Dict[str, Any]], None]


class ProgressReporter:
    """
    Mixin emitting progress events.

    Payload schema: {"event": "log"|"progress", "message": str, "value": float}
    """

    def __init__(self, progress_callback: Optional[ProgressCallback] = None):
        self.progress_callback = progress_callback or self._default_callback

    @staticmethod
    def _default_callback(payload: Dict[str, Any]) -> None:
        """Default callback that prints to console."""
        if payload.get("event") == "log":
            print(payload.get("message", ""))
        elif payload.get("event") == "progress":
            value = payload.get("value", 0)
            message = payload.get("message", "")
            if message:
                print(f"[{value:.1f}%] {message}")

    def _emit(self, event: str, message: str = "", value: float = 0.0) -> None:
        """
        Emit a progress event via the callback.

        Args:
            event: Event type ('log' or 'progress')
            message: Human-readable message
            value: Progress value (0-100 for progress events)
        """
        self.progress_callback({"event": event, "message": message, "value": value})

    async def run_batch(
        self,
        notes: Sequence[Note],
        process: Callable[[Note], Awaitable[Any]],
        verb: str = "Processing",
    ) -> BatchOutcome:
        """
        Process notes one after another, isolating per-note failures.

        A ConfigurationError stops the whole batch.

        Args:
            notes: Notes to process, in order
            process: Coroutine function handling one note
            verb: Word used in progress messages

        Returns:
            Outcome with one entry per note
        """
        outcome = BatchOutcome()
        total = len(notes)

        for index, note in enumerate(notes):
            self._emit("progress", f"{verb} note {index + 1}/{total}: {note.front}", index / total * 100)
            try:
                await process(note)
            except ConfigurationError:
                raise
            except Exception as e:
                logger.warning("Note %s failed: %s", note.note_id, e)
                outcome.record_failure(note, str(e))
                self._emit("log", f"Error processing note {note.front}: {e}")
            else:
                outcome.record_success(note)

        if total:
            self._emit("progress", "Done", 100.0)
        return outcome
