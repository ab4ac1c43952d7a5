"""Pytest configuration for integration tests.

This module provides integration-test-specific fixtures that ensure
proper test isolation and mocking for API endpoint tests.
"""

from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def scripted_provider(make_provider):
    """Replace the provider factory for all integration tests.

    This fixture patches build_provider before the app lifespan runs,
    ensuring the orchestrator talks to a scripted provider instead of a
    real backend. Tests queue responses on the yielded instance.
    """
    provider = make_provider()
    with patch("toolchat_server.app.build_provider", return_value=provider):
        yield provider
