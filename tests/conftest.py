import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dictone.app.services.editor_service import LyricsEditorService
from dictone.utils.telemetry import StructuredTelemetry


class FakeClock:
    """Deterministic clock advancing a fixed step per call."""

    def __init__(self, step: float = 0.5) -> None:
        self.now = 0.0
        self.step = step

    def __call__(self) -> float:
        self.now += self.step
        return self.now


@pytest.fixture
def telemetry():
    return StructuredTelemetry(time_fn=FakeClock())


@pytest.fixture
def editor_service(telemetry):
    """Editor service with a deterministic telemetry clock."""

    return LyricsEditorService(telemetry=telemetry)
