"""
Inference collaborators - Object labeling and text recognition.

The actual models live outside navicam. These interfaces are what the
dispatcher awaits for each frame; both calls run concurrently and
either may fail.

Implementations here are scripted, for tests and for replaying
recorded perception results.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Mapping, Sequence, Union
import asyncio
import logging

from ..analysis.results import Label, filter_labels
from .frame import Frame

logger = logging.getLogger(__name__)

# Scripted result for one frame: the value, or the exception to raise
ScriptedLabels = Union[Sequence[Label], BaseException]
ScriptedBlocks = Union[Sequence[str], BaseException]


class ObjectLabeler(ABC):
    """
    Abstract base class for object labelers.

    Subclasses implement `detect`; `label` applies the confidence
    threshold so trackers never see low-confidence labels.
    """

    confidence_threshold: float = 0.7

    @abstractmethod
    async def detect(self, frame: Frame) -> list[Label]:
        """Run the model on a frame and return every label it produced."""
        pass

    async def label(self, frame: Frame) -> list[Label]:
        labels = filter_labels(await self.detect(frame), self.confidence_threshold)
        for index, label in enumerate(labels):
            logger.debug(
                "Frame %d object%d: %s (confidence %.2f)",
                frame.frame_id, index, label.text, label.confidence,
            )
        return labels


class TextRecognizer(ABC):
    """Abstract base class for OCR text recognizers."""

    @abstractmethod
    async def recognize(self, frame: Frame) -> list[str]:
        """Return the text blocks of a frame, in reading order."""
        pass


class ScriptedObjectLabeler(ObjectLabeler):
    """
    Returns predefined labels per frame id.

    Frames without a script produce no labels. A scripted exception
    is raised as an inference failure.
    """

    def __init__(
        self,
        script: Mapping[int, ScriptedLabels] | None = None,
        confidence_threshold: float = 0.7,
        delay: float = 0.0,
    ):
        self.script = dict(script or {})
        self.confidence_threshold = confidence_threshold
        self.delay = delay
        self.calls: list[int] = []

    async def detect(self, frame: Frame) -> list[Label]:
        self.calls.append(frame.frame_id)
        if self.delay:
            await asyncio.sleep(self.delay)
        result = self.script.get(frame.frame_id, [])
        if isinstance(result, BaseException):
            raise result
        return list(result)


class ScriptedTextRecognizer(TextRecognizer):
    """Returns predefined text blocks per frame id."""

    def __init__(
        self,
        script: Mapping[int, ScriptedBlocks] | None = None,
        delay: float = 0.0,
    ):
        self.script = dict(script or {})
        self.delay = delay
        self.calls: list[int] = []

    async def recognize(self, frame: Frame) -> list[str]:
        self.calls.append(frame.frame_id)
        if self.delay:
            await asyncio.sleep(self.delay)
        result = self.script.get(frame.frame_id, [])
        if isinstance(result, BaseException):
            raise result
        return list(result)
