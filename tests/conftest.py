"""Shared test fixtures and configuration."""

from __future__ import annotations

import pytest

from jus_assistant.config import Settings
from jus_assistant.schemas import SearchResult


@pytest.fixture
def settings():
    """Fully configured settings, isolated from any local .env file."""
    return Settings(
        _env_file=None,
        openai_api_key="sk-test",
        assistant_id="asst_test",
        serper_api_key="serper-test",
        max_tool_rounds=3,
    )


@pytest.fixture
def unconfigured_settings():
    """Settings with every credential missing."""
    return Settings(
        _env_file=None,
        openai_api_key=None,
        assistant_id=None,
        serper_api_key=None,
    )


@pytest.fixture
def sample_results():
    """Search results as Serper would rank them."""
    return [
        SearchResult(
            title="Lov om ekteskap (ekteskapsloven) - Lovdata",
            link="https://lovdata.no/dokument/NL/lov/1991-07-04-47",
            snippet="Lov om ekteskap. Dato LOV-1991-07-04-47.",
        ),
        SearchResult(
            title="Gjeld ved skilsmisse - Jusinfo",
            link="https://jusinfo.no/gjeld-skilsmisse",
            snippet="Hvem har ansvar for gjelden etter samlivsbrudd?",
        ),
    ]
