"""
Session Module - Runs a camera stream through the analysis core.

Architecture:
    Frame -> FrameDispatcher -> {ObjectLabeler, TextRecognizer}
          -> {ObjectStateTracker, TextStateTracker} -> EmissionGate

A SceneSession owns one dispatcher and one gate. No state is global:
two sessions never share trackers.
"""

from .dispatcher import FrameDispatcher, FrameReport
from .scene import SceneSession, SessionState

__all__ = [
    "FrameDispatcher",
    "FrameReport",
    "SceneSession",
    "SessionState",
]
