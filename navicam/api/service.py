"""
API Service - Business logic layer between the API and the session.

The service:
1. Translates posted frame results into tracker input
2. Owns the scene session and its WebSocket notifier
3. Formats responses

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..analysis.results import Label, PendingFrameResult, filter_labels
from ..config import AnalyzerConfig
from ..emission.payload import ScenePayload
from ..session import FrameReport, SceneSession
from .schemas import (
    ErrorCode,
    ErrorResponse,
    FrameReportResponse,
    FrameResultRequest,
    SceneInfo,
    SceneStateResponse,
    SessionStatus,
    StopResponse,
)
from .websocket import WebSocketNotifier


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService(config=load_config())

        # Post one frame of perception results
        response = await service.submit_frame(request)

        # Read the current stable scene
        state = service.get_state()
    """
    config: AnalyzerConfig = field(default_factory=AnalyzerConfig)

    notifier: WebSocketNotifier = field(init=False)
    session: SceneSession = field(init=False)

    def __post_init__(self):
        self.notifier = WebSocketNotifier(consumer_name=self.config.consumer_name)
        self.session = SceneSession(notifier=self.notifier, config=self.config)

    async def submit_frame(self, request: FrameResultRequest) -> FrameReportResponse | ErrorResponse:
        """
        Apply one frame of results posted by an external pipeline.

        The poster acts as the labeler, so the confidence threshold is
        applied here.
        """
        if not self.session.is_active():
            return ErrorResponse(
                error=f"Session {self.session.session_id} is stopped",
                error_code=ErrorCode.SESSION_STOPPED,
            )

        labels = filter_labels(
            [Label(text=label.text, confidence=label.confidence) for label in request.labels],
            self.config.label_confidence_threshold,
        )
        result = PendingFrameResult(
            labels=labels,
            blocks=list(request.blocks),
            label_error=request.label_error,
            text_error=request.text_error,
        )
        report = await self.session.apply_result(result, frame_id=request.frame_id)
        return self._report_to_response(report)

    def get_state(self) -> SceneStateResponse:
        session = self.session
        return SceneStateResponse(
            session_id=session.session_id,
            status=SessionStatus(session.state.value),
            scene=_scene_info(session.current_state()),
            frames_analyzed=session.dispatcher.frames_analyzed,
            frames_dropped=session.dispatcher.frames_dropped,
            emission_count=session.gate.emission_count,
            consumer_connected=self.notifier.is_consumer_available(),
        )

    def stop(self) -> StopResponse:
        """Stop the session; the consumer receives an empty payload."""
        outcome = self.session.stop()
        return StopResponse(
            success=True,
            session_id=self.session.session_id,
            outcome=outcome.value if outcome else None,
        )

    def _report_to_response(self, report: FrameReport) -> FrameReportResponse:
        return FrameReportResponse(
            frame_id=report.frame_id,
            objects_changed=report.objects_changed,
            text_changed=report.text_changed,
            text_decision=report.text_decision.value if report.text_decision else None,
            emitted=report.emitted,
            outcomes=[outcome.value for outcome in report.outcomes],
            labels_used=[label.text for label in report.labels],
            label_error=report.label_error,
            text_error=report.text_error,
            scene=_scene_info(self.session.current_state()),
        )


def _scene_info(payload: ScenePayload) -> SceneInfo:
    return SceneInfo(
        object_list=list(payload.object_list),
        text_blocks=list(payload.text_blocks),
        text=payload.text,
    )
