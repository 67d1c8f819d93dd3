import pytest

from midi_timeline import CollectingDiagnosticSink


@pytest.fixture
def sink():
    """Collects anomalies instead of logging them."""
    return CollectingDiagnosticSink()
