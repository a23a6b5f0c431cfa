"""
Vision Layer - Frames and the inference services that read them.

Architecture:
    Frame -> ObjectLabeler -> [Label]
    Frame -> TextRecognizer -> [block]

The models themselves are external. navicam only awaits their results
and owns the rule that a frame is released once both are done.
"""

from .frame import Frame
from .inference import (
    ObjectLabeler,
    TextRecognizer,
    ScriptedObjectLabeler,
    ScriptedTextRecognizer,
)

__all__ = [
    "Frame",
    "ObjectLabeler",
    "TextRecognizer",
    "ScriptedObjectLabeler",
    "ScriptedTextRecognizer",
]
