"""
Analysis Layer - Noise cancellation over per-frame perception results.

Architecture:
    labels -> ObjectStateTracker -> stable object set (on change)
    blocks -> TextStateTracker -> stable text snapshot (on change)

Both trackers are single-writer state machines: one ingest per frame,
and they only report a value when the stable view actually changed.
"""

from .levenshtein import distance, relative_distance
from .results import Label, TextSnapshot, PendingFrameResult, filter_labels
from .objects import ObjectStateTracker
from .text import TextStateTracker, TextDecision, TrackerState

__all__ = [
    "distance",
    "relative_distance",
    "Label",
    "TextSnapshot",
    "PendingFrameResult",
    "filter_labels",
    "ObjectStateTracker",
    "TextStateTracker",
    "TextDecision",
    "TrackerState",
]
