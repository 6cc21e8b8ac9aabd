"""Shared fixtures for AI module tests."""
from unittest.mock import MagicMock, patch

import pytest


# =============================================================================
# Mock Settings Fixtures
# =============================================================================


@pytest.fixture
def mock_settings_helicone_enabled():
    """Mock settings with Helicone enabled."""
    with patch("workout_timer_api.ai.client_factory.settings") as mock:
        mock.OPENAI_API_KEY = "sk-test-openai"
        mock.ANTHROPIC_API_KEY = "sk-test-anthropic"
        mock.HELICONE_ENABLED = True
        mock.HELICONE_API_KEY = "sk-test-helicone"
        mock.ENVIRONMENT = "staging"
        mock.LLM_TIMEOUT_SECONDS = 30.0
        yield mock


@pytest.fixture
def mock_settings_helicone_disabled():
    """Mock settings with Helicone disabled."""
    with patch("workout_timer_api.ai.client_factory.settings") as mock:
        mock.OPENAI_API_KEY = "sk-test-openai"
        mock.ANTHROPIC_API_KEY = "sk-test-anthropic"
        mock.HELICONE_ENABLED = False
        mock.HELICONE_API_KEY = None
        mock.ENVIRONMENT = "development"
        mock.LLM_TIMEOUT_SECONDS = 30.0
        yield mock


@pytest.fixture
def mock_openai_client():
    """Mock OpenAI client for testing."""
    from factories import create_openai_response

    mock_client = MagicMock()
    mock_client.chat.completions.create.return_value = create_openai_response('{"type": "TABATA"}')
    return mock_client


@pytest.fixture
def mock_anthropic_client():
    """Mock Anthropic client for testing."""
    from factories import create_anthropic_response

    mock_client = MagicMock()
    mock_client.messages.create.return_value = create_anthropic_response('{"type": "EMOM", "minutes": 10}')
    return mock_client


# Error simulation fixtures


@pytest.fixture
def timeout_error():
    """Simulate timeout error."""
    import httpx

    return httpx.ReadTimeout("Connection read timed out")


@pytest.fixture
def server_error_503():
    """Simulate 503 Service Unavailable."""
    return Exception("Error code: 503 - Service temporarily unavailable")
