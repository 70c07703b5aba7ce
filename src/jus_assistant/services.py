from __future__ import annotations

from .config import Settings
from .conversation import ConversationService, OpenAIConversationService
from .dispatcher import ToolDispatcher
from .orchestrator import RunOrchestrator
from .search import SerperSearchClient
from .tools import get_registered_tools

_conversation_services: dict[tuple[str | None, str | None], ConversationService] = {}


def get_conversation_service(settings: Settings) -> ConversationService:
    """Return the conversation service for the given credentials.

    Services are cached per (API key, assistant id) so settings injected by
    callers always take effect. Raises ConfigurationError when the OpenAI key
    or assistant id is missing; nothing is cached in that case.
    """
    key = (settings.openai_api_key, settings.assistant_id)
    service = _conversation_services.get(key)
    if service is None:
        service = OpenAIConversationService(settings)
        _conversation_services[key] = service
    return service


def build_search_client(settings: Settings) -> SerperSearchClient:
    return SerperSearchClient(settings)


def build_orchestrator(settings: Settings, conversation: ConversationService) -> RunOrchestrator:
    dispatcher = ToolDispatcher(get_registered_tools(build_search_client(settings)))
    return RunOrchestrator(conversation, dispatcher, max_tool_rounds=settings.max_tool_rounds)


__all__ = [
    "build_orchestrator",
    "build_search_client",
    "get_conversation_service",
]
