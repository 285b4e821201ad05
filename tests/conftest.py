"""Test configuration for pytest."""

import shutil
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from aoaicli.config import CliConfig
from aoaicli.llm_handler import LLMResponse
from aoaicli.session import ReplSession

ENV_VARS = [
    "AZUREOPENAIENDPOINT",
    "AZUREOPENAIAPI",
    "AZUREOPENAIMODEL",
    "SYSTEMPROMPT",
]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path)


@pytest.fixture
def sample_config():
    """Create a sample configuration for testing."""
    return CliConfig(
        azure_endpoint="https://example.openai.azure.com/",
        azure_api_key="test-key-123",
        active_model="gpt-test",
        available_models=["gpt-test", "gpt-other"],
        rich_output=False,
        show_debug=False,
    )


@pytest.fixture
def active_session():
    """Create a started session with a system prompt."""
    session = ReplSession()
    session.start("You are helpful")
    return session


@pytest.fixture
def mock_provider():
    """Create a mock completion provider for testing."""
    provider = MagicMock()
    provider.get_model_name.return_value = "gpt-test"
    provider.generate_response = AsyncMock(
        return_value=LLMResponse(content="Test response", model="gpt-test")
    )
    return provider


@pytest.fixture(autouse=True)
def setup_test_environment(temp_dir, monkeypatch):
    """Isolate tests from the user's environment and config directory."""
    import os

    for key in list(os.environ):
        if key.startswith("AOAICLI_") or key in ENV_VARS:
            monkeypatch.delenv(key, raising=False)

    monkeypatch.setenv("AOAICLI_CONFIG_DIR", str(temp_dir / "config"))
    # Keep the test run away from any .env in the working directory
    monkeypatch.chdir(temp_dir)

    yield
