"""
Navicam - Scene change detection for camera perception streams.

Consumes per-frame object labels and OCR text blocks from an external
vision pipeline and decides when the scene has changed enough to notify
a downstream consumer:
- Hysteresis-based stabilization of detected objects
- Multi-stage edit-distance diffing of recognized text
- Serialized emission of the combined scene state
"""

__version__ = "0.1.0"
