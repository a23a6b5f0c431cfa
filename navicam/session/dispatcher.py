"""
Frame Dispatcher - Runs one frame through inference and the trackers.

For each frame:
1. Object labeling and text recognition start concurrently
2. Each branch feeds its own tracker as soon as its result arrives
3. Tracker changes go through the emission gate
4. Once BOTH branches are done, the frame is released (exactly once)

A failed branch counts as an empty result for that frame, so tracker
state decays naturally instead of erroring.

Frames are processed one at a time: a lock is held for the whole
frame, so each tracker sees at most one ingest per frame and frames
are applied in order.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import asyncio
import logging

from ..analysis.objects import ObjectStateTracker
from ..analysis.results import Label, PendingFrameResult
from ..analysis.text import TextDecision, TextStateTracker
from ..config import AnalyzerConfig
from ..emission.gate import EmissionGate
from ..emission.notifier import DeliveryOutcome
from ..errors import NavicamError
from ..vision.frame import Frame
from ..vision.inference import ObjectLabeler, TextRecognizer

logger = logging.getLogger(__name__)


@dataclass
class FrameReport:
    """What happened to one frame."""
    frame_id: int | None = None

    # Inputs the trackers actually saw
    labels: list[Label] = field(default_factory=list)
    blocks: list[str] = field(default_factory=list)

    # Tracker outcomes
    objects_changed: bool = False
    text_changed: bool = False
    text_decision: TextDecision | None = None

    # Branch failures (None if the branch succeeded)
    label_error: str | None = None
    text_error: str | None = None

    # One entry per emission triggered by this frame
    outcomes: list[DeliveryOutcome] = field(default_factory=list)

    @property
    def emitted(self) -> bool:
        return len(self.outcomes) > 0


class FrameDispatcher:
    """
    Owns both trackers and feeds them frame by frame.

    Usage:
        dispatcher = FrameDispatcher(labeler, recognizer, gate, config)
        report = await dispatcher.analyze(frame)
    """

    def __init__(
        self,
        labeler: ObjectLabeler | None,
        recognizer: TextRecognizer | None,
        gate: EmissionGate,
        config: AnalyzerConfig | None = None,
    ):
        config = config or AnalyzerConfig()
        self.labeler = labeler
        self.recognizer = recognizer
        self.gate = gate
        self.object_tracker = ObjectStateTracker(config.objects)
        self.text_tracker = TextStateTracker(config.text)

        self._lock = asyncio.Lock()
        self.frames_analyzed = 0
        self.frames_dropped = 0

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def analyze(self, frame: Frame) -> FrameReport:
        """Analyze a frame, waiting for any frame already in flight."""
        try:
            if self.labeler is None or self.recognizer is None:
                raise NavicamError("Dispatcher has no inference services; use apply_result()")
            async with self._lock:
                report = FrameReport(frame_id=frame.frame_id)
                results = await asyncio.gather(
                    self._label_branch(frame, report),
                    self._text_branch(frame, report),
                    return_exceptions=True,
                )
                for result in results:
                    if isinstance(result, BaseException):
                        raise result
                self.frames_analyzed += 1
                return report
        finally:
            frame.close()

    async def try_analyze(self, frame: Frame) -> FrameReport | None:
        """
        Analyze a frame unless another one is in flight.

        A frame arriving while busy is released and dropped.
        """
        if self.busy:
            self.frames_dropped += 1
            logger.debug("Dropping frame %s, previous frame still in flight", frame.frame_id)
            frame.close()
            return None
        return await self.analyze(frame)

    async def apply_result(self, result: PendingFrameResult, frame_id: int | None = None) -> FrameReport:
        """Feed labels and blocks produced elsewhere, skipping inference."""
        async with self._lock:
            report = FrameReport(
                frame_id=frame_id,
                label_error=result.label_error,
                text_error=result.text_error,
            )
            self._apply_labels(result.labels, report)
            self._apply_blocks(result.blocks, report)
            self.frames_analyzed += 1
            return report

    async def _label_branch(self, frame: Frame, report: FrameReport) -> None:
        try:
            labels = await self.labeler.label(frame)
        except Exception as e:
            logger.warning("Object labeling failed for frame %s: %s", frame.frame_id, e)
            report.label_error = str(e) or type(e).__name__
            labels = []
        self._apply_labels(labels, report)

    async def _text_branch(self, frame: Frame, report: FrameReport) -> None:
        try:
            blocks = await self.recognizer.recognize(frame)
        except Exception as e:
            logger.warning("Text recognition failed for frame %s: %s", frame.frame_id, e)
            report.text_error = str(e) or type(e).__name__
            blocks = []
        self._apply_blocks(blocks, report)

    def _apply_labels(self, labels: list[Label], report: FrameReport) -> None:
        report.labels = list(labels)
        changed = self.object_tracker.ingest(report.labels)
        if changed is not None:
            report.objects_changed = True
            report.outcomes.append(self.gate.objects_changed(changed))

    def _apply_blocks(self, blocks: list[str], report: FrameReport) -> None:
        report.blocks = list(blocks)
        snapshot = self.text_tracker.ingest(report.blocks)
        report.text_decision = self.text_tracker.last_decision
        if snapshot is not None:
            report.text_changed = True
            report.outcomes.append(self.gate.text_changed(snapshot))
