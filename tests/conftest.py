from __future__ import annotations

import logging

import pytest

from defi_query.settings import QuerySettings
from defi_query.state import AppState

_ENV_VARS = (
    "GRAPH_API_KEY",
    "ANTHROPIC_API_KEY",
    "DEMO_MODE",
    "LOG_LEVEL",
    "DEFI_QUERY_CONFIG",
    "DEFI_QUERY_GRAPH_API_KEY",
    "DEFI_QUERY_LLM_API_KEY",
    "DEFI_QUERY_DEMO_MODE",
    "DEFI_QUERY_FALLBACK_ON_ERROR",
    "DEFI_QUERY_REQUEST_TIMEOUT",
    "DEFI_QUERY_LLM_MODEL",
    "DEFI_QUERY_LOG_LEVEL",
    "DEFI_QUERY_HOST",
    "DEFI_QUERY_PORT",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep host credentials and config files out of every test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def make_state():
    """Build an ``AppState`` from settings keyword arguments."""
    created: list[AppState] = []

    def _make(**settings_kwargs) -> AppState:
        state = AppState.from_settings(
            QuerySettings(**settings_kwargs), logger=logging.getLogger("test")
        )
        created.append(state)
        return state

    yield _make

    for state in created:
        state.client.close()
