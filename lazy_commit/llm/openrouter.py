"""OpenRouter (cloud) LLM Client"""

from loguru import logger

from lazy_commit import Backend
from lazy_commit.exceptions import BackendRequestFailed, BackendUnreachable, LLMError
from lazy_commit.llm.base import LLMClient, LLMResponse
from lazy_commit.llm.transport import HttpTransport, TransportError

OPENROUTER_API_URL = "https://openrouter.ai/api/v1/chat/completions"

STATUS_HINTS = {
    429: "Rate limit exceeded. Try switching to a different model or provider.",
    401: "Invalid API key. Check your OpenRouter API key.",
    402: "Insufficient credits. Check your OpenRouter balance.",
    503: "Service unavailable. Try a different model or provider.",
}


class OpenRouterClient(LLMClient):
    """OpenRouter chat completions client. Needs an API key."""

    backend = Backend.CLOUD
    TEMPERATURE = 0.7
    MAX_TOKENS = 500
    REFERER = "http://localhost:3000"
    TITLE = "Lazy Commit"

    def __init__(self, api_key: str, model: str, transport: HttpTransport | None = None,
                 url: str = OPENROUTER_API_URL):
        if not api_key:
            raise LLMError("No OpenRouter API key available", backend=self.backend)
        self.api_key = api_key
        self.model = model
        self.url = url
        self.transport = transport or HttpTransport()

    @property
    def name(self) -> str:
        return f"OpenRouter ({self.model})"

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "HTTP-Referer": self.REFERER,
            "X-Title": self.TITLE,
        }

    def _payload(self, prompt: str) -> dict:
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "stream": False,
            "temperature": self.TEMPERATURE,
            "max_tokens": self.MAX_TOKENS,
        }

    def _unreachable(self, err: TransportError) -> BackendUnreachable:
        if err.kind in ("refused", "not_found"):
            message = "OpenRouter connection failed: Unable to reach openrouter.ai. Check your internet connection."
        elif err.kind == "timeout":
            message = "OpenRouter timeout: Request took too long. The service may be experiencing issues."
        else:
            message = f"OpenRouter network error: {err.reason}. Check your internet connection."
        return BackendUnreachable(message, backend=self.backend, details=err.reason)

    def generate(self, prompt: str) -> LLMResponse:
        try:
            response = self.transport.post(self.url, self._payload(prompt), headers=self._headers())
        except TransportError as e:
            raise self._unreachable(e)

        if not response.ok:
            message = f"OpenRouter API error: {response.status} {response.reason}".rstrip()
            hint = STATUS_HINTS.get(response.status)
            if hint:
                message = f"{message} - {hint}"
            raise BackendRequestFailed(message, status=response.status, backend=self.backend)

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise BackendRequestFailed(f"Invalid response from OpenRouter: {e}", backend=self.backend)

        usage = data.get("usage") or {}
        tokens = usage.get("total_tokens", 0) if isinstance(usage, dict) else 0
        logger.debug("OpenRouter {} used {} tokens", self.model, tokens)
        return LLMResponse(content=content.strip(), model=self.model, tokens_used=tokens or 0)
