"""LLM Base Classes and Shared Code"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

from lazy_commit import Backend
from lazy_commit.exceptions import BackendRequestFailed, BackendUnreachable

# Statuses that mean "this backend/model is struggling right now" rather than "you did something wrong"
SWITCHABLE_STATUSES = {408, 429, 500, 502, 503, 504}

_OPENING_FENCE = re.compile(r'^```[ \t]*[\w+-]*[ \t]*(?:\n|$)')
_CLOSING_FENCE = re.compile(r'(?:^|\n)[ \t]*```[ \t]*$')
_DIFF_TAG = re.compile(r'^diff[ \t]*\n', re.IGNORECASE)
_LEAD_IN = re.compile(
    r"^(?:(?:sure[!,.]?\s*)?here(?:'s|\s+is)\s+(?:the|a|your)\s+(?:conventional\s+)?commit\s+message\s*(?::|\n)"
    r"|commit\s+message\s*:)[ \t]*\n?",
    re.IGNORECASE,
)


def _strip_once(text: str) -> str:
    text = text.strip()
    text = _OPENING_FENCE.sub('', text, count=1)
    text = _CLOSING_FENCE.sub('', text, count=1)
    text = _DIFF_TAG.sub('', text.strip(), count=1)
    text = _LEAD_IN.sub('', text.strip(), count=1)
    return text.strip()


def normalize_completion(raw: str | None) -> str:
    """Strip code fences and lead-in phrases from a model completion.

    Runs to a fixed point, so normalizing an already normalized message is a no-op.
    """
    text = raw or ""
    while True:
        cleaned = _strip_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned


@dataclass
class LLMResponse:
    """Structured response from any LLM provider."""
    content: str
    model: str = ""
    tokens_used: int = 0


@dataclass(frozen=True)
class BackendSelection:
    """Which backend and model the next generation request goes to."""
    backend: Backend
    model: str

    def __str__(self) -> str:
        return f"{self.backend.label} / {self.model}"


class LLMClient(ABC):
    """Abstract base for LLM clients."""

    backend: Backend

    @abstractmethod
    def generate(self, prompt: str) -> LLMResponse:
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass


def is_switchable(err) -> bool:
    """Whether a generation failure should offer switching backend/model."""
    if getattr(err, 'backend', None) is not Backend.CLOUD:
        return False
    if isinstance(err, BackendUnreachable):
        return True
    return isinstance(err, BackendRequestFailed) and err.status in SWITCHABLE_STATUSES
