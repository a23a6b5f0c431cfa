"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between an external vision pipeline
(which posts per-frame results) and the navicam service.

Error Codes:
- VALIDATION_ERROR: Request body could not be interpreted
- SESSION_STOPPED: The scene session has been stopped
- INTERNAL_ERROR: Unexpected failure
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Scene session status values."""
    ACTIVE = "active"
    STOPPED = "stopped"


class ErrorCode(str, Enum):
    """Structured error codes."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    SESSION_STOPPED = "SESSION_STOPPED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class LabelInfo(BaseModel):
    """One detected object."""
    text: str = Field(min_length=1, description="Object class name")
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)

    model_config = {"from_attributes": True}


class SceneInfo(BaseModel):
    """The combined stable scene, as sent to the consumer."""
    object_list: list[str] = Field(default_factory=list)
    text_blocks: list[str] = Field(default_factory=list)
    text: str = ""


# =============================================================================
# Request Models
# =============================================================================

class FrameResultRequest(BaseModel):
    """
    Perception results of one frame.

    Either branch may report a failure instead of results; a failed
    branch is treated as having seen nothing.
    """
    frame_id: Optional[int] = Field(default=None, description="Caller's frame counter")
    labels: list[LabelInfo] = Field(default_factory=list)
    blocks: list[str] = Field(default_factory=list, description="OCR blocks in reading order")
    label_error: Optional[str] = None
    text_error: Optional[str] = None


# =============================================================================
# Response Models
# =============================================================================

class FrameReportResponse(BaseModel):
    """What one posted frame did to the scene."""
    frame_id: Optional[int] = None
    objects_changed: bool = False
    text_changed: bool = False
    text_decision: Optional[str] = None
    emitted: bool = False
    outcomes: list[str] = Field(default_factory=list, description="Delivery outcome per emission")
    labels_used: list[str] = Field(default_factory=list, description="Labels above the confidence threshold")
    label_error: Optional[str] = None
    text_error: Optional[str] = None
    scene: SceneInfo = Field(default_factory=SceneInfo)


class SceneStateResponse(BaseModel):
    """Current stable scene and session counters."""
    session_id: str
    status: SessionStatus
    scene: SceneInfo
    frames_analyzed: int = 0
    frames_dropped: int = 0
    emission_count: int = 0
    consumer_connected: bool = False


class StopResponse(BaseModel):
    """Result of stopping the session."""
    success: bool
    session_id: str
    outcome: Optional[str] = Field(default=None, description="Delivery outcome of the empty payload")


class ErrorResponse(BaseModel):
    """Structured error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    service: str = "navicam"
    version: str
