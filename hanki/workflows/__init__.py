"""Workflows: multi-step operations over one or more notes."""

from .base import ProgressReporter
from .enhancer import NoteEnhancer, EnhanceWorkflow, EnhanceState, EnhanceContext, enhance_choices
from .audio import AudioWorkflow
from .sentence import SentenceWorkflow, SentenceResult
from .modifier import ModifyWorkflow, ModifyOptions

__all__ = [
    'ProgressReporter',
    'NoteEnhancer',
    'EnhanceWorkflow',
    'EnhanceState',
    'EnhanceContext',
    'enhance_choices',
    'AudioWorkflow',
    'SentenceWorkflow',
    'SentenceResult',
    'ModifyWorkflow',
    'ModifyOptions',
]
