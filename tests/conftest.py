"""Shared fixtures: a scripted router standing in for the model providers."""

from unittest.mock import MagicMock

import pytest

from core.router import CallResult


def make_router(*responses):
    """MagicMock router returning each response in turn; exceptions are raised."""
    router = MagicMock()
    router.call_with_fallback.side_effect = [
        r if isinstance(r, Exception) else CallResult(
            response=r, provider="openai", model="gpt-4o", latency_ms=5, used_fallback=False,
        )
        for r in responses
    ]
    return router


@pytest.fixture
def router_factory():
    return make_router
