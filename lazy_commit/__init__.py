"""
Lazy Commit

Interactive AI commit message generator for staged git changes.
"""

from enum import Enum

__version__ = "1.0.0"

# Commit types offered to the model in the instruction template
COMMIT_TYPES = {
    'feat': 'A new feature or capability',
    'fix': 'A bug fix',
    'docs': 'Documentation only changes',
    'style': 'Formatting, whitespace, no code change',
    'refactor': 'Code restructuring without behavior change',
    'test': 'Adding or updating tests',
    'chore': 'Maintenance tasks, dependencies, tooling',
    'perf': 'Performance improvement',
    'ci': 'CI/CD configuration changes',
    'build': 'Build system or external dependency changes',
}

COMMIT_TYPE_NAMES = list(COMMIT_TYPES.keys())


class Backend(str, Enum):
    """Generation backend kinds. The value is what gets persisted."""
    CLOUD = "openrouter"
    LOCAL = "ollama"

    @property
    def label(self) -> str:
        if self is Backend.CLOUD:
            return "OpenRouter (Cloud AI)"
        return "Ollama (Local AI)"

    @classmethod
    def parse(cls, value) -> 'Backend | None':
        try:
            return cls(value)
        except ValueError:
            return None
