"""Ollama LLM Client for Local Models"""

import os
from dataclasses import dataclass

from loguru import logger

from lazy_commit import Backend
from lazy_commit.exceptions import BackendRequestFailed, BackendUnreachable
from lazy_commit.llm.base import LLMClient, LLMResponse
from lazy_commit.llm.transport import HttpTransport, TransportError


@dataclass
class LocalModel:
    """A model installed in the local Ollama server."""
    name: str
    size: int | None = None

    @property
    def size_label(self) -> str:
        if not self.size:
            return ""
        return f"{self.size / 1e9:.1f}GB"


class OllamaClient(LLMClient):
    """Ollama client for local models. Requires: ollama serve"""

    backend = Backend.LOCAL
    DEFAULT_HOST = "http://localhost:11434"
    TEMPERATURE = 0.7

    def __init__(self, model: str | None = None, host: str | None = None,
                 transport: HttpTransport | None = None):
        self.model = model
        self.host = (host or os.environ.get("OLLAMA_HOST", self.DEFAULT_HOST)).rstrip('/')
        self.transport = transport or HttpTransport()

    @property
    def name(self) -> str:
        return f"Ollama ({self.model})"

    @property
    def api_url(self) -> str:
        return f"{self.host}/api"

    def _unreachable(self, err: TransportError) -> BackendUnreachable:
        if err.kind == "timeout":
            message = (f"Ollama request timed out after {self.transport.timeout}s. "
                       "Increase the timeout with LAZY_COMMIT_TIMEOUT=600")
        elif err.kind in ("refused", "not_found"):
            message = f"Ollama not running at {self.host}. Start with: ollama serve"
        else:
            message = f"Connection to Ollama failed: {err.reason}. Check that 'ollama serve' is running."
        return BackendUnreachable(message, backend=self.backend, details=err.reason)

    def list_models(self) -> list[LocalModel]:
        """Return the installed models from /api/tags."""
        try:
            response = self.transport.get(f"{self.api_url}/tags")
        except TransportError as e:
            raise self._unreachable(e)

        if not response.ok:
            raise BackendRequestFailed(f"Ollama API error: {response.status} {response.reason}".rstrip(),
                                       status=response.status, backend=self.backend)
        try:
            data = response.json()
        except ValueError:
            raise BackendRequestFailed("Invalid response from Ollama model list", backend=self.backend)

        models = []
        for entry in data.get("models") or []:
            name = entry.get("name") or entry.get("model")
            if name:
                models.append(LocalModel(name=name, size=entry.get("size")))
        return models

    def generate(self, prompt: str) -> LLMResponse:
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": self.TEMPERATURE,
            },
        }
        try:
            response = self.transport.post(f"{self.api_url}/generate", payload)
        except TransportError as e:
            raise self._unreachable(e)

        if not response.ok:
            raise BackendRequestFailed(f"Ollama API error: {response.status} {response.reason}".rstrip(),
                                       status=response.status, backend=self.backend)
        try:
            data = response.json()
            content = data["response"] or ""
        except (ValueError, KeyError, TypeError):
            raise BackendRequestFailed("Invalid response from Ollama. Try a different model or simpler change.",
                                       backend=self.backend)

        logger.debug("Ollama {} evaluated {} tokens", self.model, data.get("eval_count", 0))
        return LLMResponse(content=content.strip(), model=self.model or "", tokens_used=data.get("eval_count", 0))
