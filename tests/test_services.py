"""Tests for service construction."""

from __future__ import annotations

import pytest

from jus_assistant import services
from jus_assistant.conversation import ConfigurationError
from jus_assistant.services import build_orchestrator, get_conversation_service


@pytest.fixture(autouse=True)
def empty_cache(monkeypatch):
    monkeypatch.setattr(services, "_conversation_services", {})


class TestGetConversationService:
    def test_follows_injected_settings(self, settings):
        first = get_conversation_service(settings.model_copy(update={"assistant_id": "asst_A"}))
        second = get_conversation_service(settings.model_copy(update={"assistant_id": "asst_B"}))

        assert first is not second
        assert first._assistant_id == "asst_A"
        assert second._assistant_id == "asst_B"

    def test_same_credentials_reuse_service(self, settings):
        assert get_conversation_service(settings) is get_conversation_service(settings.model_copy())

    def test_missing_configuration_is_not_cached(self, unconfigured_settings, settings):
        with pytest.raises(ConfigurationError):
            get_conversation_service(unconfigured_settings)

        assert services._conversation_services == {}
        assert get_conversation_service(settings) is not None


class TestBuildOrchestrator:
    def test_uses_configured_round_limit(self, settings):
        orchestrator = build_orchestrator(settings, get_conversation_service(settings))

        assert orchestrator._max_tool_rounds == settings.max_tool_rounds
