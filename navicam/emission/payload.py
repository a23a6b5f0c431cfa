"""
Scene payload - The combined message handed to the consumer.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable

from ..analysis.results import BLOCK_SEPARATOR

# Action name the consumer listens for
BROADCAST_ACTION = "navicam.parse_bundle"


@dataclass(frozen=True)
class ScenePayload:
    """
    Latest stable object set and latest stable text, together.

    `object_list` has no meaningful order (kept sorted for stable
    output); `text_blocks` keeps recognizer order.
    """
    object_list: tuple[str, ...] = ()
    text_blocks: tuple[str, ...] = ()

    @classmethod
    def build(cls, objects: Iterable[str], text_blocks: Iterable[str]) -> ScenePayload:
        return cls(object_list=tuple(sorted(objects)), text_blocks=tuple(text_blocks))

    @property
    def text(self) -> str:
        return BLOCK_SEPARATOR.join(self.text_blocks)

    def is_empty(self) -> bool:
        return not self.object_list and not self.text_blocks

    def to_dict(self) -> dict[str, Any]:
        """Wire form sent to the consumer."""
        return {
            "action": BROADCAST_ACTION,
            "objectList": list(self.object_list),
            "textBlocks": list(self.text_blocks),
            "text": self.text,
        }
