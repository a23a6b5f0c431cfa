"""
Object State Tracker - Stabilizes the set of objects in view.

Labels flicker in and out between frames. Each label text keeps a
leaky-bucket score:
- A hit adds 2 (capped at the ceiling)
- A hit on an already confirmed label pins it just above the ceiling
- Every tick decays every score by 1
- A score reaching the add threshold joins the stable set
- A score decaying to 0 leaves the stable set and is forgotten

Confirmation takes a few consecutive hits, and a confirmed object
survives several missed frames before it is evicted.
"""

from __future__ import annotations
import logging
from typing import Iterable

from ..config import ObjectTrackerConfig
from .results import Label

logger = logging.getLogger(__name__)

# Score gained by a hit, and the score of a newly seen label
HIT_INCREMENT = 2
# Score lost by every tracked label each frame
DECAY = 1


class ObjectStateTracker:
    """
    Owns the frequency map and the stable object set.

    Single writer: `ingest` must be called at most once per frame,
    never concurrently with itself.
    """

    def __init__(self, config: ObjectTrackerConfig | None = None):
        self.config = config or ObjectTrackerConfig()
        self._scores: dict[str, int] = {}
        self._stable: frozenset[str] = frozenset()

    @property
    def stable_set(self) -> frozenset[str]:
        return self._stable

    @property
    def scores(self) -> dict[str, int]:
        """Copy of the current frequency map."""
        return dict(self._scores)

    def ingest(self, labels: Iterable[Label]) -> frozenset[str] | None:
        """
        Apply one frame of labels.

        Returns the new stable set if membership changed, else None.
        """
        observed = list(dict.fromkeys(label.text for label in labels))
        if observed:
            logger.debug("Labels this frame: %s", ", ".join(observed))

        scores = self._reinforce(self._scores, observed)
        scores = {key: max(score - DECAY, 0) for key, score in scores.items()}

        members = set(self._stable)
        dirty = False
        for key, score in scores.items():
            if score >= self.config.add_threshold and key not in members:
                members.add(key)
                dirty = True
            elif score <= 0 and key in members:
                members.discard(key)
                dirty = True

        self._scores = {key: score for key, score in scores.items() if score > 0}

        if not dirty:
            return None
        self._stable = frozenset(members)
        logger.debug("Stable object set changed: %s", sorted(self._stable))
        return self._stable

    def _reinforce(self, scores: dict[str, int], observed: list[str]) -> dict[str, int]:
        """Return a new map with this frame's hits applied."""
        ceiling = self.config.ceiling
        updated = dict(scores)
        for key in observed:
            score = updated.get(key)
            if score is None:
                updated[key] = HIT_INCREMENT
            elif score >= self.config.add_threshold:
                updated[key] = ceiling + 1
            else:
                updated[key] = min(score + HIT_INCREMENT, ceiling)
        return updated
