"""
Text State Tracker - Decides when recognized text really changed.

OCR output jitters character by character even on a static scene,
and blocks split or merge between frames. A candidate reading is
compared to the last stable snapshot in three stages, each one able
to settle the decision:

1. Structural override: a large relative change in block count is
   a real change, whatever the distance says.
2. Full-text gate: whole-text relative distance at or below the
   overall threshold is noise.
3. Block matching: each stable block is matched to its closest
   candidate block; the summed distances decide.
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Iterable

from ..config import TextTrackerConfig
from .levenshtein import distance, relative_distance
from .results import TextSnapshot

logger = logging.getLogger(__name__)


class TrackerState(Enum):
    """Whether a stable snapshot exists yet."""
    EMPTY = "empty"
    STABLE = "stable"


class TextDecision(Enum):
    """Outcome of comparing a candidate against the stable snapshot."""
    EMPTY = "empty"  # Nothing recognized yet, nothing to adopt
    ADOPTED_INITIAL = "adopted_initial"  # First non-empty reading
    STRUCTURAL_CHANGE = "structural_change"  # Stage 1 adopted
    NOISE = "noise"  # Stage 2 rejected the candidate
    BLOCK_CHANGE = "block_change"  # Stage 3 adopted
    BLOCK_MATCH = "block_match"  # Stage 3 rejected the candidate

    @property
    def adopts(self) -> bool:
        return self in {
            TextDecision.ADOPTED_INITIAL,
            TextDecision.STRUCTURAL_CHANGE,
            TextDecision.BLOCK_CHANGE,
        }


def block_count_change(previous: TextSnapshot, candidate: TextSnapshot) -> float:
    """Relative change in block count; 0.0 when both have no blocks."""
    largest = max(previous.block_count, candidate.block_count)
    if largest == 0:
        return 0.0
    return abs(previous.block_count - candidate.block_count) / largest


def matched_block_distance(previous: TextSnapshot, candidate: TextSnapshot) -> int:
    """
    Sum over stable blocks of the distance to their closest candidate block.

    A stable block with no candidate to match counts its full length.
    """
    total = 0
    for block in previous.blocks:
        total += min(
            (distance(block, other) for other in candidate.blocks),
            default=len(block),
        )
    return total


class TextStateTracker:
    """
    Owns the last stable text snapshot.

    Single writer: `ingest` must be called at most once per frame,
    never concurrently with itself.
    """

    def __init__(self, config: TextTrackerConfig | None = None):
        self.config = config or TextTrackerConfig()
        self._snapshot: TextSnapshot | None = None
        self.last_decision: TextDecision | None = None

    @property
    def state(self) -> TrackerState:
        return TrackerState.EMPTY if self._snapshot is None else TrackerState.STABLE

    @property
    def snapshot(self) -> TextSnapshot | None:
        return self._snapshot

    def ingest(self, blocks: Iterable[str]) -> TextSnapshot | None:
        """
        Apply one frame of OCR blocks.

        Returns the new snapshot if it was adopted, else None.
        """
        candidate = TextSnapshot.from_blocks(blocks)
        decision = self.evaluate(candidate)
        self.last_decision = decision
        logger.debug("Text decision: %s (%d blocks)", decision.value, candidate.block_count)
        if not decision.adopts:
            return None
        self._snapshot = candidate
        return candidate

    def evaluate(self, candidate: TextSnapshot) -> TextDecision:
        """Decide what to do with a candidate without changing state."""
        previous = self._snapshot
        if previous is None:
            if candidate.is_empty():
                return TextDecision.EMPTY
            return TextDecision.ADOPTED_INITIAL

        if block_count_change(previous, candidate) > self.config.block_activator_threshold:
            return TextDecision.STRUCTURAL_CHANGE

        full_previous = previous.full_text
        full_candidate = candidate.full_text

        if relative_distance(full_previous, full_candidate) <= self.config.overall_distance_threshold:
            return TextDecision.NOISE

        total_length = len(full_previous) + len(full_candidate)
        matched = matched_block_distance(previous, candidate)
        relative_matched = 2 * matched / total_length if total_length else 0.0
        if relative_matched >= self.config.levenshtein_distance_factor:
            return TextDecision.BLOCK_CHANGE
        return TextDecision.BLOCK_MATCH
