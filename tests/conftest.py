"""Fixtures shared by every ticketron test module.

Nothing here touches the real home directory: config lives under
``tmp_path`` and the global output manager is dropped after each test.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from ticketron.models import SearchIssuesResponse
from ticketron.output import OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Drop the global OutputManager after every test.

    Its Rich console holds the stderr stream that was current when it was
    built, which CliRunner swaps out per invocation.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


_TICKETRON_ENV_VARS = [
    "TICKETRON_CONFIG_DIR",
    "TICKETRON_LLM_API_KEY",
    "TICKETRON_MCP_SERVER_URL",
    "TICKETRON_LLM_PROVIDER",
    "TICKETRON_LLM_OPENAI_MODEL_NAME",
    "TICKETRON_LLM_OPENAI_BASE_URL",
]


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ``TICKETRON_CONFIG_DIR`` at a temporary directory.

    Clears every ``TICKETRON_*`` variable that could leak in from the
    developer's shell so tests never touch real user config.

    Returns:
        The (not yet created) config directory path.
    """
    for var in _TICKETRON_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)

    config_dir = tmp_path / "ticketron"
    monkeypatch.setenv("TICKETRON_CONFIG_DIR", str(config_dir))
    monkeypatch.chdir(tmp_path)
    return config_dir


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, colourless OutputManager for tests that don't care about stderr."""
    output = OutputManager(no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Sample MCP payloads
# ---------------------------------------------------------------------------


def sample_search_payload() -> dict[str, Any]:
    """A two-issue search response as the MCP server encodes it."""
    return {
        "startAt": 0,
        "maxResults": 20,
        "total": 2,
        "issues": [
            {
                "key": "BE-1",
                "id": "10001",
                "self": "https://jira.example.com/rest/api/2/issue/10001",
                "fields": {
                    "summary": "Fix login redirect",
                    "status": {"name": "In Progress"},
                    "issuetype": {"name": "Bug"},
                    "description": "Users loop between /login and /home.",
                },
            },
            {
                "key": "BE-2",
                "id": "10002",
                "self": "https://jira.example.com/rest/api/2/issue/10002",
                "fields": {
                    "summary": "Add retry to webhook",
                    "issuetype": {"name": "Task"},
                },
            },
        ],
    }


@pytest.fixture
def search_payload() -> dict[str, Any]:
    return sample_search_payload()


@pytest.fixture
def search_response() -> SearchIssuesResponse:
    """Decoded :class:`SearchIssuesResponse`; the second issue has no status."""
    return SearchIssuesResponse.model_validate(sample_search_payload())


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
