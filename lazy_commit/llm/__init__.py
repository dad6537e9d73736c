"""LLM Client Package"""

from lazy_commit import Backend
from lazy_commit.llm.base import (
    BackendSelection,
    LLMClient,
    LLMResponse,
    is_switchable,
    normalize_completion,
)
from lazy_commit.llm.ollama import LocalModel, OllamaClient
from lazy_commit.llm.openrouter import OpenRouterClient
from lazy_commit.llm.transport import HttpResponse, HttpTransport, TransportError


def get_client(selection: BackendSelection, api_key: str | None = None,
               transport: HttpTransport | None = None) -> LLMClient:
    """Build the client for a backend selection."""
    if selection.backend is Backend.LOCAL:
        return OllamaClient(model=selection.model, transport=transport)
    return OpenRouterClient(api_key=api_key, model=selection.model, transport=transport)


__all__ = [
    "BackendSelection",
    "LLMClient",
    "LLMResponse",
    "LocalModel",
    "OllamaClient",
    "OpenRouterClient",
    "HttpResponse",
    "HttpTransport",
    "TransportError",
    "get_client",
    "is_switchable",
    "normalize_completion",
]
