"""
Scene Session - One running analysis of a camera stream.

A session wires the pieces together and owns their lifetime:
- Configuration
- Emission gate (and the notifier behind it)
- Frame dispatcher (and the two trackers inside it)

Sessions are EPHEMERAL: tracker state starts empty, lives as long as
the session, and is never persisted. Stopping a session sends one
empty payload so the consumer knows the scene is gone.
"""

from __future__ import annotations
from enum import Enum
import logging
import time
import uuid

from ..analysis.results import PendingFrameResult
from ..config import AnalyzerConfig
from ..emission.gate import EmissionGate
from ..emission.notifier import DeliveryOutcome, Notifier
from ..emission.payload import ScenePayload
from ..errors import SessionStoppedError
from ..vision.frame import Frame
from ..vision.inference import ObjectLabeler, TextRecognizer
from .dispatcher import FrameDispatcher, FrameReport

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a scene session."""
    ACTIVE = "active"
    STOPPED = "stopped"


class SceneSession:
    """
    Usage:
        session = SceneSession(notifier, labeler, recognizer, config)
        for frame in camera:
            await session.try_analyze(frame)
        session.stop()

    The labeler's confidence threshold is set from the config.
    """

    def __init__(
        self,
        notifier: Notifier,
        labeler: ObjectLabeler | None = None,
        recognizer: TextRecognizer | None = None,
        config: AnalyzerConfig | None = None,
        session_id: str | None = None,
    ):
        self.config = config or AnalyzerConfig()
        self.session_id = session_id or str(uuid.uuid4())
        self.created_at = time.time()
        self.state = SessionState.ACTIVE

        if labeler is not None:
            labeler.confidence_threshold = self.config.label_confidence_threshold

        self.notifier = notifier
        self.gate = EmissionGate(notifier)
        self.dispatcher = FrameDispatcher(labeler, recognizer, self.gate, self.config)
        logger.info("Scene session %s started", self.session_id)

    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE

    async def analyze(self, frame: Frame) -> FrameReport:
        self._check_active(frame)
        return await self.dispatcher.analyze(frame)

    async def try_analyze(self, frame: Frame) -> FrameReport | None:
        self._check_active(frame)
        return await self.dispatcher.try_analyze(frame)

    async def apply_result(self, result: PendingFrameResult, frame_id: int | None = None) -> FrameReport:
        self._check_active()
        return await self.dispatcher.apply_result(result, frame_id=frame_id)

    def current_state(self) -> ScenePayload:
        """Latest stable objects and text. Unaffected by stop()."""
        return self.gate.current_payload()

    def stop(self) -> DeliveryOutcome | None:
        """
        Stop the session and send the empty payload.

        Returns None if the session was already stopped.
        """
        if self.state == SessionState.STOPPED:
            return None
        self.state = SessionState.STOPPED
        outcome = self.gate.emit_empty()
        logger.info(
            "Scene session %s stopped after %d frames (%d dropped)",
            self.session_id,
            self.dispatcher.frames_analyzed,
            self.dispatcher.frames_dropped,
        )
        return outcome

    def _check_active(self, frame: Frame | None = None) -> None:
        if self.is_active():
            return
        if frame is not None:
            frame.close()
        raise SessionStoppedError(f"Session {self.session_id} is stopped")
