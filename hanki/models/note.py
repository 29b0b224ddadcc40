"""Note data as returned by AnkiConnect's ``notesInfo``."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config.fields import BACK_FIELD, FRONT_FIELD


@dataclass
class NoteField:
    """A single named field value with its display order."""
    value: str = ""
    order: int = 0


@dataclass
class Note:
    """Snapshot of one Anki note."""

    note_id: int
    model_name: str = ""
    fields: Dict[str, NoteField] = field(default_factory=dict)
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Note":
        """Build a note from a ``notesInfo`` entry."""
        fields = {
            name: NoteField(value=str(raw.get("value", "")), order=int(raw.get("order", 0)))
            for name, raw in (data.get("fields") or {}).items()
        }
        return cls(
            note_id=int(data["noteId"]),
            model_name=data.get("modelName", ""),
            fields=fields,
            tags=list(data.get("tags") or []),
        )

    def get(self, name: str, default: str = "") -> str:
        """Get a field's value, or ``default`` when the field is absent."""
        note_field = self.fields.get(name)
        return note_field.value if note_field is not None else default

    def has_value(self, name: str) -> bool:
        """True when the field exists and is not blank."""
        return bool(self.get(name).strip())

    @property
    def front(self) -> str:
        return self.get(FRONT_FIELD)

    @property
    def back(self) -> str:
        return self.get(BACK_FIELD)

    def ordered_fields(self) -> List[tuple]:
        """Fields as ``(name, value)`` pairs in template order."""
        items = sorted(self.fields.items(), key=lambda item: item[1].order)
        return [(name, f.value) for name, f in items]

    def label(self, index: Optional[int] = None) -> str:
        """One-line description used in menus and reports."""
        text = f"Front: {self.front} | Back: {self.back}"
        return f"{index}. {text}" if index is not None else text
