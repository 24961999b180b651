from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from studyhub.analytics.feedback import clear_feedback
from studyhub.analytics.store import clear_events
from studyhub.llm.groq_client import GenerationResult
from studyhub.recommendations.cache import clear_cache
from studyhub.resources.store import clear_store


@pytest.fixture(autouse=True)
def fresh_state():
    """Reset every in-memory store between tests."""
    clear_store()
    clear_cache()
    clear_events()
    clear_feedback()
    yield
    clear_store()
    clear_cache()


@pytest.fixture(autouse=True)
def offline():
    """Keep the AI and search collaborators off the network by default."""
    with patch(
        "studyhub.recommendations.collectors.generate_text",
        new=AsyncMock(return_value=GenerationResult(success=False, error="offline")),
    ), patch(
        "studyhub.recommendations.collectors.find_external_resource",
        new=AsyncMock(return_value={}),
    ):
        yield
