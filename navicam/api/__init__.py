"""
API Module - HTTP/WebSocket interface for external vision pipelines.

A pipeline that runs its own models posts each frame's labels and
OCR blocks; consumers subscribe over WebSocket and receive the stable
scene whenever it changes.

All state is session-scoped. Nothing is persisted.
"""

from .schemas import (
    # Requests
    FrameResultRequest,
    LabelInfo,
    # Responses
    FrameReportResponse,
    SceneStateResponse,
    StopResponse,
    ErrorResponse,
    HealthResponse,
    # Shared
    SceneInfo,
    SessionStatus,
    ErrorCode,
)
from .websocket import WebSocketNotifier
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "FrameResultRequest",
    "LabelInfo",
    # Responses
    "FrameReportResponse",
    "SceneStateResponse",
    "StopResponse",
    "ErrorResponse",
    "HealthResponse",
    # Shared
    "SceneInfo",
    "SessionStatus",
    "ErrorCode",
    # Service
    "WebSocketNotifier",
    "APIService",
    "create_app",
]
