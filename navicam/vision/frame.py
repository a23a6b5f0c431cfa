"""
Frame - One camera frame handed to the dispatcher.

The frame wraps a resource owned by the capture pipeline (an image
buffer). It must be released exactly once, after every consumer of
the image has finished with it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass
class Frame:
    """
    A captured frame and its release hook.

    `image` is opaque to navicam; only the inference collaborators
    look at it.
    """
    frame_id: int
    image: Any = None
    timestamp: float = 0.0
    rotation_degrees: int = 0

    # Called once when the frame is released back to the capture pipeline
    on_release: Callable[[], None] | None = None

    _closed: bool = field(default=False, init=False, repr=False)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release the frame. Further calls do nothing."""
        if self._closed:
            return
        self._closed = True
        if self.on_release is not None:
            self.on_release()
