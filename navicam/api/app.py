"""
FastAPI Application - REST/WebSocket API for external vision pipelines.

Endpoints:
    POST   /api/v1/frames    Post one frame of labels and OCR blocks
    GET    /api/v1/state     Get the current stable scene
    GET    /api/v1/config    Get the effective configuration
    POST   /api/v1/stop      Stop the session (consumer gets an empty scene)
    WS     /api/v1/ws        Subscribe to scene updates (the consumer)

Frame Flow:
    1. The pipeline posts each frame's results to /frames
    2. The trackers decide whether the stable scene changed
    3. On a change, every WebSocket subscriber receives the full scene
    4. With no subscriber, the change is still adopted but reported
       as consumer_unavailable

Run with: uvicorn navicam.api.app:create_app --factory
"""

from typing import Union
import asyncio
import json
import logging
import os

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import AnalyzerConfig, load_config
from .schemas import (
    ErrorCode,
    ErrorResponse,
    FrameReportResponse,
    FrameResultRequest,
    HealthResponse,
    SceneStateResponse,
    StopResponse,
)
from .service import APIService
from .websocket import forward_updates, stop_forwarder

logger = logging.getLogger(__name__)

# Environment configuration
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


def create_app(service: APIService | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates one from
            load_config() if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Navicam Scene API",
        description="""
Scene change detection for camera perception streams.

Post per-frame object labels and OCR blocks; subscribe over WebSocket
to receive the stable scene whenever it really changes.

## Error Codes

| Code | Description |
|------|-------------|
| `VALIDATION_ERROR` | Request body could not be interpreted |
| `SESSION_STOPPED` | The session has been stopped |
| `INTERNAL_ERROR` | Unexpected failure |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(config=load_config())

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(error=message, error_code=error_code).model_dump(mode="json"),
        )

    # =========================================================================
    # Frame Endpoint
    # =========================================================================

    @app.post(
        "/api/v1/frames",
        response_model=FrameReportResponse,
        responses={409: {"model": ErrorResponse, "description": "Session stopped"}},
        tags=["Frames"],
        summary="Post one frame of perception results",
    )
    async def post_frame(body: FrameResultRequest) -> Union[FrameReportResponse, JSONResponse]:
        """
        Apply one frame of labels and OCR blocks.

        Labels below the configured confidence threshold are ignored.
        """
        response = await api_service.submit_frame(body)
        if isinstance(response, ErrorResponse):
            return make_error_response(response.error_code, response.error, status_code=409)
        return response

    # =========================================================================
    # State Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/state",
        response_model=SceneStateResponse,
        tags=["Scene"],
        summary="Get the current stable scene",
    )
    async def get_state() -> SceneStateResponse:
        return api_service.get_state()

    @app.get(
        "/api/v1/config",
        response_model=AnalyzerConfig,
        tags=["Scene"],
        summary="Get the effective configuration",
    )
    async def get_config() -> AnalyzerConfig:
        return api_service.config

    @app.post(
        "/api/v1/stop",
        response_model=StopResponse,
        tags=["Scene"],
        summary="Stop the session",
    )
    async def stop_session() -> StopResponse:
        """Stop accepting frames; subscribers receive an empty scene."""
        return api_service.stop()

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/api/v1/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """
        WebSocket for scene updates.

        Messages from server:
        - scene_update: The stable scene changed
        - error: Invalid message from client

        Messages from client:
        - ping: Keep-alive
        """
        await websocket.accept()
        queue = api_service.notifier.subscribe()

        forwarder = asyncio.create_task(forward_updates(queue, websocket.send_json))
        try:
            await websocket.send_json({
                "type": "scene_update",
                "payload": api_service.session.current_state().to_dict(),
            })

            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Invalid JSON"},
                    })
                    continue
                if isinstance(message, dict) and message.get("type") == "ping":
                    await websocket.send_json({"type": "pong"})

        except WebSocketDisconnect:
            logger.debug("WebSocket client disconnected")
        finally:
            await stop_forwarder(forwarder)
            api_service.notifier.unsubscribe(queue)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(status="healthy", service="navicam", version=__version__)

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Navicam Scene API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app
