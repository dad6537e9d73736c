"""Shared fixtures: scripted input, fake HTTP transport, fake git, isolated config dir."""

import json
import os
import re

import pytest
from loguru import logger

from lazy_commit.cli.prompt import Prompter
from lazy_commit.config import PreferenceStore
from lazy_commit.exceptions import GitError
from lazy_commit.git import FileChange
from lazy_commit.llm import HttpResponse

ANSI_RE = re.compile(r'\033\[[0-9;]*m')


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def config_home(tmp_path, monkeypatch):
    """Point the per-user config dir at a temp dir and clear ambient settings."""
    home = tmp_path / "lazy-home"
    monkeypatch.setenv("LAZY_COMMIT_CONFIG_DIR", str(home))
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    monkeypatch.delenv("OLLAMA_HOST", raising=False)
    monkeypatch.delenv("LAZY_COMMIT_TIMEOUT", raising=False)
    monkeypatch.delenv("LAZY_COMMIT_LOG_LEVEL", raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    return home


@pytest.fixture(autouse=True)
def quiet_logger():
    """Drop any sinks a test installed so later tests do not write to a closed stream."""
    yield
    logger.remove()


@pytest.fixture
def store(config_home):
    return PreferenceStore(config_home)


@pytest.fixture
def strip_ansi():
    """Return a function that removes ANSI escape codes."""
    def _strip(text: str) -> str:
        return ANSI_RE.sub('', text)
    return _strip


# ---------------------------------------------------------------------------
# Scripted user input
# ---------------------------------------------------------------------------

class ScriptedInput:
    """Stands in for input(): hands out canned answers, EOF when they run out."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.questions = []

    def __call__(self, question: str) -> str:
        self.questions.append(question)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)

    @property
    def exhausted(self) -> bool:
        return not self.answers


@pytest.fixture
def scripted():
    """Return a factory: scripted(["1", "a"]) -> Prompter with .script attached."""
    def _make(answers):
        script = ScriptedInput(answers)
        prompter = Prompter(input_func=script)
        prompter.script = script
        return prompter
    return _make


# ---------------------------------------------------------------------------
# Fake HTTP transport
# ---------------------------------------------------------------------------

class FakeTransport:
    """Replays queued responses (or raises queued exceptions) and records requests."""

    timeout = 300

    def __init__(self, *results):
        self.results = list(results)
        self.requests = []

    def queue(self, *results):
        self.results.extend(results)

    def request(self, method, url, payload=None, headers=None):
        self.requests.append({"method": method, "url": url, "payload": payload, "headers": headers or {}})
        if not self.results:
            raise AssertionError(f"Unexpected request: {method} {url}")
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def get(self, url, headers=None):
        return self.request("GET", url, headers=headers)

    def post(self, url, payload, headers=None):
        return self.request("POST", url, payload=payload, headers=headers)


def json_response(data, status=200, reason="OK"):
    return HttpResponse(status=status, reason=reason, body=json.dumps(data).encode('utf-8'))


def error_response(status, reason=""):
    return HttpResponse(status=status, reason=reason, body=b"{}")


@pytest.fixture
def transport():
    return FakeTransport()


# ---------------------------------------------------------------------------
# Fake git
# ---------------------------------------------------------------------------

class FakeGit:
    """In-memory git: a list of diffs to hand out and a commit log."""

    def __init__(self, diffs=("",), files=None, commit_failures=0):
        self.diffs = list(diffs)
        self.files = files or []
        self.commit_failures = commit_failures
        self.commits = []
        self.message_files = []
        self.diff_calls = 0

    def get_staged_diff(self) -> str:
        self.diff_calls += 1
        if len(self.diffs) > 1:
            return self.diffs.pop(0)
        return self.diffs[0]

    def get_staged_files(self):
        return [FileChange(path=p, additions=a, deletions=d) for p, a, d in self.files]

    def commit(self, message_file: str) -> None:
        self.message_files.append(message_file)
        assert os.path.exists(message_file)
        with open(message_file, encoding='utf-8') as f:
            message = f.read()
        if self.commit_failures:
            self.commit_failures -= 1
            raise GitError("git commit exited with status 1")
        self.commits.append(message)


@pytest.fixture
def fake_git():
    return FakeGit


SAMPLE_DIFF = (
    "diff --git a/src/app.py b/src/app.py\n"
    "--- a/src/app.py\n"
    "+++ b/src/app.py\n"
    "@@ -1,2 +1,3 @@\n"
    " import os\n"
    "+import sys\n"
    " print('hi')\n"
)


@pytest.fixture
def sample_diff():
    return SAMPLE_DIFF
