"""Backend Selector - Resolve which backend and model to use."""

import time
from typing import Callable

from loguru import logger

from lazy_commit import Backend
from lazy_commit.cli.prompt import QUIT_TOKENS, MenuChoice, Prompter
from lazy_commit.config import PreferenceStore
from lazy_commit.exceptions import LLMError, NoModelsAvailable, UserQuit
from lazy_commit.llm import BackendSelection, LocalModel, OllamaClient
from lazy_commit.output import Spinner, bold, dim, info, print_error, print_success, print_warning

CUSTOM_ENTRY_LABEL = "Custom (enter manually)"

BACKEND_ORDER = [Backend.CLOUD, Backend.LOCAL]


def _print_tips(subject: str) -> None:
    print(f"\n{dim('Options:')}")
    print(dim("   - Add 'r' to remember choice and don't ask again"))
    print(dim(f"   - Add 's' to skip {subject} selection in future"))
    print(dim("   - Type 'q' to quit"))


def _modifier_changes(choice: MenuChoice, skip_field: str, subject: str) -> dict:
    changes = {}
    if choice.remember:
        changes['auto_reuse_last'] = True
        print_success("Will remember this choice for future runs")
    if choice.skip:
        changes[skip_field] = True
        print_success(f"Will skip {subject} selection in future")
    return changes


class BackendSelector:
    """Combines remembered preferences, live model lists and prompts into a selection."""

    LOCAL_FETCH_RETRIES = 2
    RETRY_DELAY = 1.0

    def __init__(self, store: PreferenceStore, prompter: Prompter,
                 ollama: OllamaClient | None = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.store = store
        self.prompter = prompter
        self.ollama = ollama or OllamaClient()
        self.sleep = sleep

    def select(self) -> BackendSelection:
        backend = self.select_backend()
        if backend is Backend.LOCAL:
            return self.select_local_model()
        return self.select_cloud_model()

    # ------------------------------------------------------------------
    # Backend
    # ------------------------------------------------------------------

    def select_backend(self) -> Backend:
        prefs = self.store.preferences
        last = Backend.parse(prefs.last_backend) if prefs.last_backend else None

        if last and prefs.auto_reuse_last and not prefs.skip_backend_prompt:
            print(f"\nUsing last provider: {info(last.label)}")
            return last

        print(f"\n{bold('Select AI Provider:')}")
        for index, backend in enumerate(BACKEND_ORDER, 1):
            marker = dim(" (last used)") if backend is last else ""
            print(f"{index}. {backend.label}{marker}")
        _print_tips("provider")

        default = BACKEND_ORDER.index(last) + 1 if last else 1
        choice = self.prompter.menu(f"\nEnter provider number (default: {default}): ",
                                    len(BACKEND_ORDER), default)
        backend = BACKEND_ORDER[choice.index]

        changes = _modifier_changes(choice, 'skip_backend_prompt', 'provider')
        self.store.remember_selection(backend, **changes)
        logger.debug("Selected backend {}", backend.value)
        return backend

    # ------------------------------------------------------------------
    # Models
    # ------------------------------------------------------------------

    def _reuse_last_model(self, backend: Backend, known_ids: list[str]) -> str | None:
        prefs = self.store.preferences
        last = prefs.last_model_for(backend)
        if last is None or last not in known_ids:
            return None
        if prefs.auto_reuse_last and not prefs.skip_model_prompt:
            return last
        return None

    def _model_menu(self, backend: Backend, title: str, entries: list[tuple[str, str]],
                    extra_label: str | None = None) -> tuple[str | None, MenuChoice]:
        """Show a numbered model list. Returns (model id or None for the extra entry, choice)."""
        last = self.store.preferences.last_model_for(backend)
        ids = [model_id for model_id, _ in entries]

        print(f"\n{bold(title)}")
        for index, (model_id, label) in enumerate(entries, 1):
            marker = dim(" (last used)") if model_id == last else ""
            print(f"{index}. {label}{marker}")
        if extra_label:
            print(f"{len(entries) + 1}. {extra_label}")
        _print_tips("model")

        count = len(entries) + (1 if extra_label else 0)
        default = ids.index(last) + 1 if last is not None and last in ids else 1
        choice = self.prompter.menu(f"\nEnter model number (default: {default}): ", count, default)
        if choice.index >= len(entries):
            return None, choice
        return ids[choice.index], choice

    def _finish(self, backend: Backend, model: str, choice: MenuChoice | None = None) -> BackendSelection:
        changes = _modifier_changes(choice, 'skip_model_prompt', 'model') if choice else {}
        self.store.remember_selection(backend, model, **changes)
        logger.debug("Selected {} model {}", backend.value, model)
        return BackendSelection(backend=backend, model=model)

    def fetch_local_models(self) -> list[LocalModel] | None:
        """Query Ollama with bounded retries. None means the user chose to switch to the cloud."""
        while True:
            for attempt in range(self.LOCAL_FETCH_RETRIES + 1):
                try:
                    with Spinner("Fetching Ollama models..."):
                        models = self.ollama.list_models()
                    print_success("Ollama models loaded")
                    return models
                except LLMError as e:
                    print_error(f"Failed to connect to Ollama: {e.message}")
                    logger.debug("Ollama model list attempt {} failed: {}", attempt + 1, e.details or e.message)
                    if attempt < self.LOCAL_FETCH_RETRIES:
                        print(dim(f"Retrying... ({attempt + 1}/{self.LOCAL_FETCH_RETRIES})"))
                        self.sleep(self.RETRY_DELAY)

            print_warning("Could not connect to Ollama after multiple attempts.")
            print(dim("   Make sure Ollama is running: ollama serve"))
            print(dim("   Check available models: ollama list"))

            while True:
                answer = self.prompter.choose("\nWould you like to (r)etry, (s)witch to OpenRouter, or (q)uit? ")
                if answer in ('r', 'retry'):
                    break
                if answer in ('s', 'switch'):
                    return None
                if answer in QUIT_TOKENS:
                    raise UserQuit()
                print(dim("Please answer r, s or q."))

    def select_local_model(self) -> BackendSelection:
        models = self.fetch_local_models()

        if models is None:
            print(f"\n{info('Switching to OpenRouter...')}")
            self.store.remember_selection(Backend.CLOUD)
            return self.select_cloud_model()

        if not models:
            print_error("No Ollama models found. Make sure Ollama is running and you have models installed.")
            print(dim("   Run 'ollama pull <model>' to install one, 'ollama list' to see what you have"))
            raise NoModelsAvailable("No Ollama models installed")

        reused = self._reuse_last_model(Backend.LOCAL, [m.name for m in models])
        if reused:
            print(f"\nUsing last model: {info(reused)}")
            return self._finish(Backend.LOCAL, reused)

        entries = [(m.name, f"{m.name} ({m.size_label})" if m.size_label else m.name) for m in models]
        model_id, choice = self._model_menu(Backend.LOCAL, "Select Ollama model:", entries)
        return self._finish(Backend.LOCAL, model_id, choice)

    def select_cloud_model(self) -> BackendSelection:
        custom_models = self.store.preferences.custom_models

        reused = self._reuse_last_model(Backend.CLOUD, [m.id for m in custom_models])
        if reused:
            print(f"\nUsing last model: {info(reused)}")
            return self._finish(Backend.CLOUD, reused)

        entries = [(m.id, f"{m.name} (saved)") for m in custom_models]
        model_id, choice = self._model_menu(Backend.CLOUD, "Select OpenRouter model:", entries,
                                            extra_label=CUSTOM_ENTRY_LABEL)
        if model_id is None:
            model_id = self._enter_custom_model()
        return self._finish(Backend.CLOUD, model_id, choice)

    def _enter_custom_model(self) -> str:
        model_id = ""
        while not model_id:
            model_id = self.prompter.ask("Enter custom model ID (e.g. openai/gpt-4o-mini): ")
            if model_id.lower() in QUIT_TOKENS:
                raise UserQuit()
        name = self.prompter.ask("Enter a name for this model (optional): ") or model_id

        if self.store.add_custom_model(model_id, name):
            print_success(f"Saved custom model: {name}")
        return model_id
