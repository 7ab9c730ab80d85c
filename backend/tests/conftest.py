"""
Shared test fixtures for unit tests.
"""

import json
import sys
import os
from unittest.mock import MagicMock, patch

# Ensure the backend directory is on the path so imports resolve correctly
# when pytest is run from the repo root or the backend directory.
_backend_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _backend_dir not in sys.path:
    sys.path.insert(0, _backend_dir)

import pytest
from config import get_settings


SAMPLE_QUIZ = [
    {
        "question": "What is JavaScript?",
        "options": {
            "A": "A programming language",
            "B": "A coffee brand",
            "C": "A database",
            "D": "An operating system",
        },
        "correct_answer": "A",
    },
    {
        "question": "What does HTML stand for?",
        "options": {
            "A": "Hyper Trainer Marking Language",
            "B": "HyperText Markup Language",
            "C": "HighText Machine Language",
            "D": "Hyperlink and Text Markup Language",
        },
        "correct_answer": "B",
    },
]

SAMPLE_TEXT = (
    "Photosynthesis is the process by which green plants use sunlight, water and "
    "carbon dioxide to produce glucose and oxygen. It takes place in the chloroplasts."
)


# ---------------------------------------------------------------------------
# Mock Claude API helpers
# ---------------------------------------------------------------------------


def _make_mock_claude_response(text: str, stop_reason: str = "end_turn") -> MagicMock:
    """Create a mock Anthropic Messages API response with the given text content."""
    mock_content_block = MagicMock()
    mock_content_block.text = text
    mock_response = MagicMock()
    mock_response.content = [mock_content_block]
    mock_response.stop_reason = stop_reason
    return mock_response


MOCK_QUIZ_RESPONSE_JSON = json.dumps(SAMPLE_QUIZ)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_quiz() -> list[dict]:
    """Fresh deep copy of the two-question sample quiz."""
    return json.loads(json.dumps(SAMPLE_QUIZ))


@pytest.fixture(autouse=True)
def settings(tmp_path, monkeypatch):
    """Cached settings pointed at a temp upload dir with a fake API key."""
    s = get_settings()
    upload_dir = tmp_path / "uploads"
    upload_dir.mkdir()
    monkeypatch.setattr(s, "upload_dir", upload_dir)
    monkeypatch.setattr(s, "anthropic_api_key", "test-key")
    return s


@pytest.fixture
def mock_anthropic_client():
    """Patch anthropic.Anthropic to return a mock client answering with SAMPLE_QUIZ."""
    mock_client = MagicMock()
    mock_client.messages.create.return_value = _make_mock_claude_response(MOCK_QUIZ_RESPONSE_JSON)

    with patch("agents.generator.anthropic.Anthropic", return_value=mock_client):
        yield mock_client
