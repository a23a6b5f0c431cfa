"""
Pytest fixtures for navicam tests.
"""

import pytest

from ..config import AnalyzerConfig, ObjectTrackerConfig, TextTrackerConfig
from ..emission import EmissionGate, RecordingNotifier
from ..vision import Frame


@pytest.fixture
def config() -> AnalyzerConfig:
    """Default configuration (add 5, ceiling 10, text 0.45 / 0.5 / 0.4)."""
    return AnalyzerConfig()


@pytest.fixture
def object_config() -> ObjectTrackerConfig:
    return ObjectTrackerConfig(add_threshold=5, ceiling=10)


@pytest.fixture
def text_config() -> TextTrackerConfig:
    return TextTrackerConfig(
        overall_distance_threshold=0.45,
        block_activator_threshold=0.5,
        levenshtein_distance_factor=0.4,
    )


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Notifier with the consumer installed."""
    return RecordingNotifier()


@pytest.fixture
def gate(notifier: RecordingNotifier) -> EmissionGate:
    return EmissionGate(notifier)


@pytest.fixture
def released() -> list[int]:
    """Frame ids in the order their frames were released."""
    return []


@pytest.fixture
def make_frame(released):
    """Factory for frames that record their release."""
    def _make(frame_id: int) -> Frame:
        return Frame(
            frame_id=frame_id,
            image=b"",
            on_release=lambda: released.append(frame_id),
        )
    return _make
