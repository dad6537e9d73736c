"""
Tests for BackendSelector: remembered choices, menus, Ollama retries, custom models.

Run with:
    pytest tests/test_selector.py -v
"""

import pytest

from conftest import FakeTransport, json_response
from lazy_commit import Backend
from lazy_commit.cli.selector import BackendSelector
from lazy_commit.config import PreferenceStore
from lazy_commit.exceptions import NoModelsAvailable, UserQuit
from lazy_commit.llm import BackendSelection, OllamaClient, TransportError

TAGS = {"models": [
    {"name": "llama3:8b", "size": 4_661_224_676},
    {"name": "qwen2.5:7b", "size": 4_683_087_332},
]}


def _refused():
    return TransportError("refused", "Connection refused")


@pytest.fixture
def make_selector(store, scripted):
    """Build a selector over a scripted prompter and a fake Ollama server."""
    def _make(answers, *ollama_results, **prefs):
        if prefs:
            store.update(**prefs)
        prompter = scripted(answers)
        sleeps = []
        selector = BackendSelector(
            store,
            prompter,
            ollama=OllamaClient(transport=FakeTransport(*ollama_results)),
            sleep=sleeps.append,
        )
        selector.sleeps = sleeps
        return selector
    return _make


# ---------------------------------------------------------------------------
# Backend choice
# ---------------------------------------------------------------------------

class TestSelectBackend:

    def test_first_run_defaults_to_cloud(self, make_selector):
        selector = make_selector([""])
        assert selector.select_backend() is Backend.CLOUD
        assert "default: 1" in selector.prompter.script.questions[0]
        assert selector.store.preferences.last_backend == "openrouter"

    def test_default_follows_last_backend(self, make_selector):
        selector = make_selector([""], last_backend="ollama")
        assert selector.select_backend() is Backend.LOCAL
        assert "default: 2" in selector.prompter.script.questions[0]

    def test_remember_modifier_persists(self, make_selector, config_home):
        selector = make_selector(["2r"])
        assert selector.select_backend() is Backend.LOCAL

        saved = PreferenceStore(config_home).load()
        assert saved.last_backend == "ollama"
        assert saved.auto_reuse_last is True
        assert saved.skip_backend_prompt is False

    def test_skip_modifier_persists(self, make_selector):
        selector = make_selector(["1s"])
        selector.select_backend()
        assert selector.store.preferences.skip_backend_prompt is True
        assert selector.store.preferences.auto_reuse_last is False

    def test_auto_reuse_asks_nothing(self, make_selector, capsys):
        selector = make_selector([], last_backend="ollama", auto_reuse_last=True)
        assert selector.select_backend() is Backend.LOCAL
        assert selector.prompter.script.questions == []
        assert "Using last provider" in capsys.readouterr().out

    def test_skip_flag_alone_still_prompts(self, make_selector):
        selector = make_selector(["2"], last_backend="openrouter", skip_backend_prompt=True)
        assert selector.select_backend() is Backend.LOCAL
        assert len(selector.prompter.script.questions) == 1

    def test_skip_flag_overrides_auto_reuse(self, make_selector):
        selector = make_selector(["2"], last_backend="openrouter",
                                 auto_reuse_last=True, skip_backend_prompt=True)
        assert selector.select_backend() is Backend.LOCAL
        assert len(selector.prompter.script.questions) == 1

    def test_skip_flag_without_last_backend_prompts(self, make_selector):
        selector = make_selector(["2"], skip_backend_prompt=True)
        assert selector.select_backend() is Backend.LOCAL
        assert len(selector.prompter.script.questions) == 1

    def test_out_of_range_uses_default(self, make_selector):
        selector = make_selector(["7"])
        assert selector.select_backend() is Backend.CLOUD

    def test_quit(self, make_selector):
        selector = make_selector(["q"])
        with pytest.raises(UserQuit):
            selector.select_backend()


# ---------------------------------------------------------------------------
# Local models
# ---------------------------------------------------------------------------

class TestSelectLocalModel:

    def test_menu_lists_installed_models(self, make_selector, capsys, strip_ansi):
        selector = make_selector(["2"], json_response(TAGS))
        selection = selector.select_local_model()

        assert selection == BackendSelection(Backend.LOCAL, "qwen2.5:7b")
        out = strip_ansi(capsys.readouterr().out)
        assert "1. llama3:8b (4.7GB)" in out
        assert "2. qwen2.5:7b (4.7GB)" in out
        assert selector.store.preferences.last_local_model == "qwen2.5:7b"
        assert selector.store.preferences.last_backend == "ollama"

    def test_last_used_marker_and_default(self, make_selector, capsys, strip_ansi):
        selector = make_selector([""], json_response(TAGS), last_local_model="qwen2.5:7b")
        assert selector.select_local_model().model == "qwen2.5:7b"
        assert "qwen2.5:7b (4.7GB) (last used)" in strip_ansi(capsys.readouterr().out)
        assert "default: 2" in selector.prompter.script.questions[0]

    def test_reuses_last_model_when_still_installed(self, make_selector):
        selector = make_selector([], json_response(TAGS), last_local_model="llama3:8b", auto_reuse_last=True)
        assert selector.select_local_model().model == "llama3:8b"
        assert selector.prompter.script.questions == []

    def test_skip_model_flag_blocks_reuse(self, make_selector):
        selector = make_selector(["2"], json_response(TAGS), last_local_model="llama3:8b",
                                 auto_reuse_last=True, skip_model_prompt=True)
        assert selector.select_local_model().model == "qwen2.5:7b"
        assert len(selector.prompter.script.questions) == 1

    def test_prompts_when_last_model_was_removed(self, make_selector):
        selector = make_selector(["1"], json_response(TAGS), last_local_model="gone:1b", auto_reuse_last=True)
        assert selector.select_local_model().model == "llama3:8b"

    def test_model_modifiers_persist(self, make_selector):
        selector = make_selector(["1rs"], json_response(TAGS))
        selector.select_local_model()
        prefs = selector.store.preferences
        assert prefs.auto_reuse_last is True
        assert prefs.skip_model_prompt is True

    def test_no_models_installed(self, make_selector):
        selector = make_selector([], json_response({"models": []}))
        with pytest.raises(NoModelsAvailable):
            selector.select_local_model()

    def test_retries_then_succeeds(self, make_selector):
        selector = make_selector(["1"], _refused(), json_response(TAGS))
        assert selector.select_local_model().model == "llama3:8b"
        assert selector.sleeps == [BackendSelector.RETRY_DELAY]

    def test_three_failures_then_switch_to_cloud(self, make_selector):
        selector = make_selector(["s", "", "openai/gpt-4o-mini", ""],
                                 _refused(), _refused(), _refused())
        selection = selector.select_local_model()

        assert selection == BackendSelection(Backend.CLOUD, "openai/gpt-4o-mini")
        assert len(selector.ollama.transport.requests) == 3
        assert len(selector.sleeps) == 2
        assert "switch to OpenRouter" in selector.prompter.script.questions[0]
        assert selector.store.preferences.last_backend == "openrouter"

    def test_three_failures_then_retry(self, make_selector):
        selector = make_selector(["r", "1"],
                                 _refused(), _refused(), _refused(), json_response(TAGS))
        assert selector.select_local_model().model == "llama3:8b"
        assert len(selector.ollama.transport.requests) == 4

    def test_three_failures_then_quit(self, make_selector):
        selector = make_selector(["q"], _refused(), _refused(), _refused())
        with pytest.raises(UserQuit):
            selector.select_local_model()

    def test_invalid_answer_reprompts(self, make_selector):
        selector = make_selector(["x", "q"], _refused(), _refused(), _refused())
        with pytest.raises(UserQuit):
            selector.select_local_model()
        assert len(selector.prompter.script.questions) == 2


# ---------------------------------------------------------------------------
# Cloud models
# ---------------------------------------------------------------------------

class TestSelectCloudModel:

    def test_custom_entry_saves_model(self, make_selector):
        selector = make_selector(["", "deepseek/deepseek-chat", "DeepSeek"])
        selection = selector.select_cloud_model()

        assert selection == BackendSelection(Backend.CLOUD, "deepseek/deepseek-chat")
        prefs = selector.store.preferences
        assert [(m.id, m.name) for m in prefs.custom_models] == [("deepseek/deepseek-chat", "DeepSeek")]
        assert prefs.last_cloud_model == "deepseek/deepseek-chat"

    def test_blank_custom_id_reprompts(self, make_selector):
        selector = make_selector(["", "", "a/b", ""])
        assert selector.select_cloud_model().model == "a/b"

    def test_quit_during_custom_entry(self, make_selector):
        selector = make_selector(["", "q"])
        with pytest.raises(UserQuit):
            selector.select_cloud_model()

    def test_saved_models_listed_with_custom_last(self, make_selector, capsys, strip_ansi):
        selector = make_selector(["1"])
        selector.store.add_custom_model("a/b", "Model B")
        assert selector.select_cloud_model().model == "a/b"
        out = strip_ansi(capsys.readouterr().out)
        assert "1. Model B (saved)" in out
        assert "2. Custom (enter manually)" in out

    def test_reentering_saved_id_does_not_duplicate(self, make_selector):
        selector = make_selector(["2", "a/b", "Again"])
        selector.store.add_custom_model("a/b", "Model B")
        selector.select_cloud_model()
        assert [m.id for m in selector.store.preferences.custom_models] == ["a/b"]
        assert selector.store.preferences.custom_models[0].name == "Model B"

    def test_default_is_last_cloud_model(self, make_selector):
        selector = make_selector([""])
        selector.store.add_custom_model("a/b")
        selector.store.add_custom_model("c/d")
        selector.store.update(last_cloud_model="c/d")
        assert selector.select_cloud_model().model == "c/d"
        assert "default: 2" in selector.prompter.script.questions[0]

    def test_reuses_last_cloud_model(self, make_selector):
        selector = make_selector([])
        selector.store.add_custom_model("a/b")
        selector.store.update(last_cloud_model="a/b", auto_reuse_last=True)
        assert selector.select_cloud_model().model == "a/b"
        assert selector.prompter.script.questions == []

    def test_skip_model_flag_shows_menu(self, make_selector):
        selector = make_selector(["2", "c/d", ""])
        selector.store.add_custom_model("a/b")
        selector.store.update(last_cloud_model="a/b", auto_reuse_last=True, skip_model_prompt=True)
        assert selector.select_cloud_model().model == "c/d"
        assert "default: 1" in selector.prompter.script.questions[0]


# ---------------------------------------------------------------------------
# Full selection
# ---------------------------------------------------------------------------

class TestSelect:

    def test_fully_remembered_selection(self, make_selector):
        selector = make_selector([], json_response(TAGS),
                                 last_backend="ollama", last_local_model="llama3:8b", auto_reuse_last=True)
        assert selector.select() == BackendSelection(Backend.LOCAL, "llama3:8b")
        assert selector.prompter.script.questions == []

    def test_cloud_path(self, make_selector):
        selector = make_selector(["1", "", "x/y", ""])
        assert selector.select() == BackendSelection(Backend.CLOUD, "x/y")
