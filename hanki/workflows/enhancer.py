"""
Note enhancement - fill metadata fields of one or many notes with AI output.

``NoteEnhancer`` does the work (generate, merge, write, tag) and never
talks to the user. ``EnhanceWorkflow`` drives the interactive flows as
explicit state machines:

    single:   SELECT_NOTE -> SELECT_FIELDS -> GENERATE -> SUCCESS | FAILURE -> SELECT_NOTE
    multiple: SELECT_NOTES -> SELECT_FIELDS -> PROCESS -> SUMMARIZE -> DONE
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

from ..config import EXAMPLES_FIELD, METADATA_FIELDS, REVIEW_TAG
from ..exceptions import EnhancementError
from ..models import BatchOutcome, EnhanceSelection, Note
from ..services import ContentGenerator, NoteStore
from ..ui.prompter import Choice, Prompter
from .base import ProgressCallback, ProgressReporter

logger = logging.getLogger(__name__)

BACK = "back"


def enhance_choices() -> List[Choice]:
    """Checkbox entries for the fields to generate; all metadata pre-checked."""
    choices = [Choice(name=meta.label, value=key, checked=True) for key, meta in METADATA_FIELDS.items()]
    choices.append(Choice(name=f'Add "{REVIEW_TAG}" tag for review', value=REVIEW_TAG))
    return choices


class NoteEnhancer(ProgressReporter):
    """Generates metadata for notes and writes it back to Anki."""

    def __init__(
        self,
        store: NoteStore,
        generator: ContentGenerator,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        super().__init__(progress_callback)
        self.store = store
        self.generator = generator

    async def enhance_note(self, note: Note, selection: EnhanceSelection) -> Dict[str, str]:
        """
        Generate, merge and write metadata for one note.

        Args:
            note: Note to enhance (its Front and Back are sent to the model)
            selection: Fields to write and whether to add the review tag

        Returns:
            The field values written to Anki

        Raises:
            EnhancementError: Any step failed
        """
        self._emit("log", f"Enhancing note: {note.front} ({note.back})")
        try:
            generated = await self.generator.generate_fields(note.front, note.back)
            updates = selection.build_updates(generated)

            if updates:
                await self.store.update_note_fields(note.note_id, updates)
            if selection.add_review_tag:
                await self.store.add_tags([note.note_id], selection.review_tag)
        except Exception as e:
            raise EnhancementError(f"Failed to enhance note: {e}") from e

        logger.info("Enhanced note %s with %s", note.note_id, ", ".join(updates) or "no fields")
        return updates

    async def _refetch_and_enhance(self, note: Note, selection: EnhanceSelection) -> None:
        current = await self.store.get_note(note.note_id)
        if current is None:
            raise EnhancementError(f"Note {note.note_id} no longer exists")
        await self.enhance_note(current, selection)

    async def enhance_batch(self, notes: Sequence[Note], selection: EnhanceSelection) -> BatchOutcome:
        """
        Enhance notes sequentially; one note's failure never stops the batch.

        Each note is re-fetched from Anki before generation so the model sees
        its current Front/Back.
        """
        return await self.run_batch(
            notes,
            lambda note: self._refetch_and_enhance(note, selection),
            verb="Enhancing",
        )


class EnhanceState(Enum):
    SELECT_NOTE = "select_note"
    SELECT_NOTES = "select_notes"
    SELECT_FIELDS = "select_fields"
    GENERATE = "generate"
    SUCCESS = "success"
    FAILURE = "failure"
    PROCESS = "process"
    SUMMARIZE = "summarize"
    DONE = "done"


@dataclass
class EnhanceContext:
    """Mutable state carried between transitions of one flow."""
    notes: List[Note]
    multiple: bool = False
    selected: List[Note] = field(default_factory=list)
    selection: Optional[EnhanceSelection] = None
    written: Dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None
    outcome: Optional[BatchOutcome] = None


class EnhanceWorkflow:
    """
    Interactive enhancement flows.

    Each state handler returns the next state; ``_drive`` loops until DONE.
    """

    def __init__(self, enhancer: NoteEnhancer, prompter: Prompter):
        self.enhancer = enhancer
        self.prompter = prompter
        self.handlers = {
            EnhanceState.SELECT_NOTE: self._select_note,
            EnhanceState.SELECT_NOTES: self._select_notes,
            EnhanceState.SELECT_FIELDS: self._select_fields,
            EnhanceState.GENERATE: self._generate,
            EnhanceState.SUCCESS: self._success,
            EnhanceState.FAILURE: self._failure,
            EnhanceState.PROCESS: self._process,
            EnhanceState.SUMMARIZE: self._summarize,
        }

    def _emit(self, message: str) -> None:
        self.enhancer._emit("log", message)

    async def _drive(self, state: EnhanceState, ctx: EnhanceContext) -> EnhanceContext:
        while state is not EnhanceState.DONE:
            state = await self.handlers[state](ctx)
        return ctx

    async def run_single(self, notes: Sequence[Note]) -> EnhanceContext:
        """Enhance notes one at a time until the user goes back."""
        if not notes:
            self._emit("No notes found in this deck.")
            return EnhanceContext(notes=[])
        return await self._drive(EnhanceState.SELECT_NOTE, EnhanceContext(notes=list(notes)))

    async def run_multiple(self, notes: Sequence[Note]) -> EnhanceContext:
        """Pick several notes, pick fields once, process them all, then summarize."""
        if not notes:
            self._emit("No notes selected.")
            return EnhanceContext(notes=[], multiple=True)
        return await self._drive(EnhanceState.SELECT_NOTES, EnhanceContext(notes=list(notes), multiple=True))

    async def _select_note(self, ctx: EnhanceContext) -> EnhanceState:
        choices = [Choice(name=note.label(i + 1), value=i) for i, note in enumerate(ctx.notes)]
        choices.append(Choice(name="Back to deck menu", value=BACK))
        picked = await self.prompter.select(
            f"Select a note to enhance ({len(ctx.notes)} notes):", choices
        )
        if picked == BACK:
            return EnhanceState.DONE

        note = ctx.notes[picked]
        ctx.selected = [note]
        ctx.error = None
        self._emit(f"Selected note: {note.label()}")
        self._emit(f"Current tags: {', '.join(note.tags) or 'No tags'}")
        return EnhanceState.SELECT_FIELDS

    async def _select_notes(self, ctx: EnhanceContext) -> EnhanceState:
        choices = [
            Choice(name=note.label(i + 1), value=i, checked=not note.has_value(EXAMPLES_FIELD))
            for i, note in enumerate(ctx.notes)
        ]
        picked = await self.prompter.checkbox("Select notes to enhance:", choices)
        if not picked:
            self._emit("No notes selected for enhancement.")
            return EnhanceState.DONE

        ctx.selected = [ctx.notes[i] for i in picked]
        self._emit(f"Selected {len(ctx.selected)} notes for enhancement.")
        return EnhanceState.SELECT_FIELDS

    async def _select_fields(self, ctx: EnhanceContext) -> EnhanceState:
        picked = await self.prompter.checkbox(
            "What information would you like to generate?", enhance_choices()
        )
        ctx.selection = EnhanceSelection.from_choices(picked)
        if ctx.multiple:
            return EnhanceState.PROCESS
        return EnhanceState.GENERATE

    async def _generate(self, ctx: EnhanceContext) -> EnhanceState:
        try:
            ctx.written = await self.enhancer.enhance_note(ctx.selected[0], ctx.selection)
        except EnhancementError as e:
            ctx.error = str(e)
            return EnhanceState.FAILURE
        return EnhanceState.SUCCESS

    async def _success(self, ctx: EnhanceContext) -> EnhanceState:
        self._emit("✓ Note enhanced successfully!")
        return EnhanceState.SELECT_NOTE

    async def _failure(self, ctx: EnhanceContext) -> EnhanceState:
        self._emit(f"Error: {ctx.error}")
        await self.prompter.pause()
        return EnhanceState.SELECT_NOTE

    async def _process(self, ctx: EnhanceContext) -> EnhanceState:
        self._emit("Enhancing notes...")
        ctx.outcome = await self.enhancer.enhance_batch(ctx.selected, ctx.selection)
        return EnhanceState.SUMMARIZE

    async def _summarize(self, ctx: EnhanceContext) -> EnhanceState:
        outcome = ctx.outcome
        self._emit("Enhancement complete!")
        self._emit(f"Successfully enhanced: {outcome.succeeded}/{outcome.attempted} notes")
        if outcome.failures:
            self._emit("Errors occurred while processing these notes:")
            for item in outcome.failures:
                self._emit(f"- {item.note.front}: {item.error}")
        return EnhanceState.DONE
