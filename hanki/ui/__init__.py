"""Terminal UI components for hanki."""

from .prompter import Choice, Prompter, RichPrompter
from .viewer import view_cards, view_notes_list, render_note

__all__ = [
    'Choice',
    'Prompter',
    'RichPrompter',
    'view_cards',
    'view_notes_list',
    'render_note',
]
