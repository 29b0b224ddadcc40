"""Practice sentence generation from a random sample of deck words."""

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..models import GeneratedSentence, Note, WordPair
from ..services import ContentGenerator

CANDIDATE_COUNT = 10


@dataclass
class SentenceResult:
    words: List[WordPair]
    sentence: GeneratedSentence


class SentenceWorkflow:
    """
    Sample candidates, let the model narrow them down, then compose a sentence.

    Any failure aborts the whole run; there is no partial result.
    """

    def __init__(self, generator: ContentGenerator, rng: Optional[random.Random] = None):
        self.generator = generator
        self.rng = rng or random.Random()

    def sample_candidates(self, notes: Sequence[Note], count: int = CANDIDATE_COUNT) -> List[WordPair]:
        """Up to ``count`` distinct word pairs chosen uniformly at random."""
        words = [WordPair(korean=note.front, english=note.back) for note in notes]
        return self.rng.sample(words, min(count, len(words)))

    async def run(self, notes: Sequence[Note]) -> Optional[SentenceResult]:
        """Returns None when there are no notes to draw from."""
        if not notes:
            return None
        candidates = self.sample_candidates(notes)
        words = await self.generator.select_combinable_words(candidates)
        sentence = await self.generator.compose_sentence(words)
        return SentenceResult(words=words, sentence=sentence)
