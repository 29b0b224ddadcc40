"""
Interactive shell - main navigation loop.

    MAIN_MENU -> SELECT_DECK -> DECK_MENU -> (deck action) -> DECK_MENU
                                          -> back -> MAIN_MENU -> exit -> EXIT

The notes of the selected deck are fetched once when the deck is entered.
Writes made by later actions are not reflected in that snapshot until the
user picks "Reload notes".
"""

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

from rich.console import Console
from rich.markup import escape

from ..config import AUDIO_FIELD
from ..exceptions import AnkiUnavailableError, HankiError
from ..models import BatchOutcome, Note
from ..services import ContentGenerator, NoteStore
from ..workflows import AudioWorkflow, EnhanceWorkflow, ModifyWorkflow, NoteEnhancer, SentenceWorkflow
from .prompter import Choice, Prompter
from .viewer import view_cards, view_notes_list

logger = logging.getLogger(__name__)

BACK = "back"


class ShellState(Enum):
    MAIN_MENU = "main_menu"
    SELECT_DECK = "select_deck"
    DECK_MENU = "deck_menu"
    EXIT = "exit"


DECK_ACTIONS = [
    ("view_cards", "View cards (card by card)"),
    ("view_notes", "View notes (as list)"),
    ("enhance_notes", "Enhance single note with AI"),
    ("enhance_multiple", "Enhance multiple notes with AI"),
    ("edit_note", "Edit note fields and tags manually"),
    ("add_audio", "Add pronunciation audio to a note"),
    ("add_audio_multiple", "Add pronunciation audio to multiple notes"),
    ("generate_sentence", "Generate practice sentence"),
    ("reload", "Reload notes from Anki"),
    (BACK, "Back to main menu"),
]


class InteractiveShell:
    """Menu-driven front end over the note store and workflows."""

    def __init__(
        self,
        store: NoteStore,
        generator: ContentGenerator,
        prompter: Prompter,
        console: Optional[Console] = None,
    ):
        self.store = store
        self.prompter = prompter
        self.console = console or Console()

        self.enhancer = NoteEnhancer(store, generator, self._on_progress)
        self.enhance_workflow = EnhanceWorkflow(self.enhancer, prompter)
        self.audio_workflow = AudioWorkflow(store, generator, self._on_progress)
        self.sentence_workflow = SentenceWorkflow(generator)
        self.modify_workflow = ModifyWorkflow(store, prompter)

        self.deck: Optional[str] = None
        self.notes: List[Note] = []

        self.handlers: Dict[ShellState, Callable[[], Awaitable[ShellState]]] = {
            ShellState.MAIN_MENU: self._main_menu,
            ShellState.SELECT_DECK: self._select_deck,
            ShellState.DECK_MENU: self._deck_menu,
        }
        self.actions: Dict[str, Callable[[], Awaitable[Any]]] = {
            "view_cards": lambda: view_cards(self.notes, self.prompter, self.console),
            "view_notes": lambda: view_notes_list(self.notes, self.prompter, self.console),
            "enhance_notes": lambda: self.enhance_workflow.run_single(self.notes),
            "enhance_multiple": lambda: self.enhance_workflow.run_multiple(self.notes),
            "edit_note": self._edit_note,
            "add_audio": self._add_audio,
            "add_audio_multiple": self._add_audio_multiple,
            "generate_sentence": self._generate_sentence,
            "reload": self._load_notes,
        }

    def _on_progress(self, payload: Dict[str, Any]) -> None:
        """Render workflow progress events."""
        message = payload.get("message", "")
        if payload.get("event") == "progress":
            self.console.print(f"[dim][{payload.get('value', 0):5.1f}%][/dim] {escape(message)}")
        else:
            self.console.print(escape(message))

    async def run(self) -> None:
        """Drive the menus until the user exits."""
        state = ShellState.MAIN_MENU
        while state is not ShellState.EXIT:
            state = await self.handlers[state]()

    async def _main_menu(self) -> ShellState:
        action = await self.prompter.select("What would you like to do?", [
            Choice(name="Select a deck to work with", value="select_deck"),
            Choice(name="Exit", value="exit"),
        ])
        if action == "exit":
            self.console.print("Goodbye!")
            return ShellState.EXIT
        return ShellState.SELECT_DECK

    async def _select_deck(self) -> ShellState:
        try:
            decks = await self.store.deck_names()
        except AnkiUnavailableError:
            raise
        except HankiError as e:
            await self._report_error(e)
            return ShellState.MAIN_MENU

        if not decks:
            self.console.print("No decks found in Anki.")
            return ShellState.MAIN_MENU

        self.deck = await self.prompter.select(
            "Select a deck:", [Choice(name=deck, value=deck) for deck in decks]
        )
        if not await self._guarded(self._load_notes()):
            return ShellState.MAIN_MENU
        return ShellState.DECK_MENU

    async def _deck_menu(self) -> ShellState:
        self.console.print(f"\nWorking with deck: [bold]{escape(self.deck)}[/bold] ({len(self.notes)} notes)")
        action = await self.prompter.select(
            "What would you like to do with this deck?",
            [Choice(name=name, value=value) for value, name in DECK_ACTIONS],
        )
        if action == BACK:
            self.deck, self.notes = None, []
            return ShellState.MAIN_MENU

        await self._guarded(self.actions[action]())
        return ShellState.DECK_MENU

    async def _guarded(self, operation: Awaitable[Any]) -> bool:
        """Run one menu operation; show a failure and wait for Enter instead of leaving the loop."""
        try:
            await operation
        except AnkiUnavailableError:
            raise
        except HankiError as e:
            await self._report_error(e)
            return False
        return True

    async def _report_error(self, error: Exception) -> None:
        logger.error("%s", error)
        self.console.print(f"\n[red]Error:[/red] {escape(str(error))}")
        await self.prompter.pause()

    async def _load_notes(self) -> None:
        self.console.print("Loading notes...")
        self.notes = await self.store.notes_in_deck(self.deck)
        self.console.print(f"Loaded {len(self.notes)} notes from '{escape(self.deck)}'.")

    async def _pick_note(self, message: str) -> Optional[Note]:
        if not self.notes:
            self.console.print("No notes found in this deck.")
            return None
        choices = [Choice(name=note.label(i + 1), value=i) for i, note in enumerate(self.notes)]
        choices.append(Choice(name="Back to deck menu", value=BACK))
        picked = await self.prompter.select(message, choices)
        return None if picked == BACK else self.notes[picked]

    def _print_summary(self, title: str, outcome: BatchOutcome) -> None:
        self.console.print(f"\n[bold]{title}[/bold]")
        self.console.print(f"Succeeded: {outcome.succeeded}/{outcome.attempted} notes")
        if outcome.failures:
            self.console.print("\nErrors occurred while processing these notes:")
            for item in outcome.failures:
                self.console.print(f"- {escape(item.note.front)}: {escape(item.error)}")

    async def _edit_note(self) -> None:
        note = await self._pick_note("Select a note to edit:")
        if note is None:
            return
        await self.modify_workflow.modify_note(note)
        self.console.print("[green]✓ Note updated successfully![/green]")

    async def _add_audio(self) -> None:
        note = await self._pick_note("Select a note to add audio to:")
        if note is None:
            return
        await self.audio_workflow.add_audio(note)

    async def _add_audio_multiple(self) -> None:
        if not self.notes:
            self.console.print("No notes found in this deck.")
            return
        choices = [
            Choice(name=note.label(i + 1), value=i, checked=not note.has_value(AUDIO_FIELD))
            for i, note in enumerate(self.notes)
        ]
        picked = await self.prompter.checkbox("Select notes to add audio to:", choices)
        if not picked:
            self.console.print("No notes selected.")
            return
        outcome = await self.audio_workflow.add_audio_batch([self.notes[i] for i in picked])
        self._print_summary("Audio generation complete!", outcome)

    async def _generate_sentence(self) -> None:
        result = await self.sentence_workflow.run(self.notes)
        if result is None:
            self.console.print("No notes found in this deck.")
            return

        self.console.print("\nSelected words that work well together:")
        for word in result.words:
            self.console.print(f"- {escape(str(word))}")
        self.console.print("\n[bold]Generated sentence:[/bold]")
        self.console.print(f"Korean: {escape(result.sentence.korean)}")
        self.console.print(f"English: {escape(result.sentence.english)}")
        self.console.print(f"Grammar notes: {escape(result.sentence.grammar_notes)}")
