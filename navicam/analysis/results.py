"""
Per-frame perception results and stable snapshots.

What the vision collaborators hand to the trackers:
- Label: one detected object class with its confidence
- TextSnapshot: OCR blocks of one reading, in recognizer order
- PendingFrameResult: both results of one frame, plus branch failures
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, Sequence

# Separator used when joining blocks into the whole-frame text
BLOCK_SEPARATOR = "\n"


@dataclass(frozen=True)
class Label:
    """A detected object. `text` is the class name, not an instance id."""
    text: str
    confidence: float = 1.0


@dataclass(frozen=True)
class TextSnapshot:
    """
    One OCR reading: ordered blocks and their concatenation.

    Snapshots are replaced wholesale, never merged.
    """
    blocks: tuple[str, ...] = ()

    @classmethod
    def from_blocks(cls, blocks: Iterable[str]) -> TextSnapshot:
        return cls(blocks=tuple(blocks))

    @property
    def full_text(self) -> str:
        return BLOCK_SEPARATOR.join(self.blocks)

    @property
    def block_count(self) -> int:
        return len(self.blocks)

    def is_empty(self) -> bool:
        """True when there are no blocks or every block is the empty string."""
        return not any(self.blocks)


@dataclass
class PendingFrameResult:
    """
    Labels and blocks of a single frame.

    A failed branch leaves its list empty and records the error text.
    """
    labels: list[Label] = field(default_factory=list)
    blocks: list[str] = field(default_factory=list)
    label_error: str | None = None
    text_error: str | None = None


def filter_labels(labels: Sequence[Label], confidence_threshold: float) -> list[Label]:
    """Drop labels below the inference confidence threshold."""
    return [label for label in labels if label.confidence >= confidence_threshold]
