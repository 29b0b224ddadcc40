"""Results of a batch run over several notes."""

from dataclasses import dataclass, field
from typing import List, Optional

from .note import Note


@dataclass
class BatchItemResult:
    """Outcome for one note; ``error`` is None on success."""
    note: Note
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchOutcome:
    """Ordered per-note results accumulated during one batch run."""

    items: List[BatchItemResult] = field(default_factory=list)

    def record_success(self, note: Note) -> None:
        self.items.append(BatchItemResult(note=note))

    def record_failure(self, note: Note, error: str) -> None:
        self.items.append(BatchItemResult(note=note, error=error))

    @property
    def attempted(self) -> int:
        return len(self.items)

    @property
    def succeeded(self) -> int:
        return sum(1 for item in self.items if item.ok)

    @property
    def failures(self) -> List[BatchItemResult]:
        return [item for item in self.items if not item.ok]
