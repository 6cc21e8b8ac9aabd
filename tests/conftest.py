"""
Test fixtures for workout-timer-api.

Provides a TestClient, canned provider responses and a generator factory so
tests never reach a real generative provider.
"""

import sys
from pathlib import Path
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

TESTS = Path(__file__).resolve().parent
ROOT = TESTS.parent
SRC = ROOT / "src"

# Make src/ importable so tests can do `import workout_timer_api...`
for p in {ROOT, SRC, TESTS}:
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from fakes import failing_complete, static_complete
from workout_timer_api.api.routes import get_generator
from workout_timer_api.config import settings
from workout_timer_api.main import app
from workout_timer_api.services.workout_generator import WorkoutGenerator


# ---------------------------------------------------------------------------
# Core Test Client
# ---------------------------------------------------------------------------


@pytest.fixture
def client() -> TestClient:
    """Per-test FastAPI TestClient with an offline generator."""
    app.dependency_overrides[get_generator] = lambda: WorkoutGenerator(complete=failing_complete)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def client_with_provider():
    """Build a TestClient whose provider answers with a fixed payload."""

    def build(payload: Any) -> TestClient:
        app.dependency_overrides[get_generator] = lambda: WorkoutGenerator(complete=static_complete(payload))
        return TestClient(app)

    yield build
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Sample Data Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def canonical_tabata() -> Dict[str, Any]:
    """Well-formed provider answer in the canonical dialect."""
    return {
        "title": "Tabata Burpees",
        "total_minutes": 4,
        "blocks": [
            {
                "type": "TABATA",
                "rounds": 8,
                "work_seconds": 20,
                "rest_seconds": 10,
                "exercise": "Burpees",
            }
        ],
    }


@pytest.fixture
def exercise_list_response() -> Dict[str, Any]:
    """Provider answer listing rests as standalone exercises."""
    return {
        "blocks": [
            {
                "rounds": 3,
                "exercises": [
                    {"name": "Run", "duration": 45},
                    {"name": "Rest", "duration": 15},
                    {"name": "Squat", "duration": 45},
                ],
            }
        ],
    }


@pytest.fixture
def timeline_response() -> Dict[str, Any]:
    """Provider answer as a flat, pre-expanded timeline."""
    return {
        "title": "Run and Squat",
        "timeline": [
            {"kind": "work", "label": "Run", "seconds": 45, "round": 1},
            {"kind": "work", "label": "Squat", "seconds": 45, "round": 1},
            {"kind": "round_rest", "label": "Rest", "seconds": 60, "round": 1},
            {"kind": "work", "label": "Run", "seconds": 45, "round": 2},
            {"kind": "work", "label": "Squat", "seconds": 45, "round": 2},
        ],
    }


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def no_provider_credentials(monkeypatch):
    """Keep every test offline, whatever keys the shell exports."""
    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
    monkeypatch.setattr(settings, "ANTHROPIC_API_KEY", None)
    monkeypatch.setattr(settings, "PIPELINE_ORDER", "ai_first")
