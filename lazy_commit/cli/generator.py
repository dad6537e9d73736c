"""Message Generator - Call the selected backend and recover from failures interactively."""

import time
from typing import Callable

from loguru import logger

from lazy_commit.cli.prompt import QUIT_TOKENS, Prompter
from lazy_commit.exceptions import EmptyDiff, EmptyGeneration, LLMError, SwitchRequested, UserQuit
from lazy_commit.llm import BackendSelection, LLMClient, get_client, is_switchable, normalize_completion
from lazy_commit.output import Spinner, dim, print_error, print_success, print_warning
from lazy_commit.prompts import build_prompt

FALLBACK_MESSAGE = "chore: update files"
LONG_MESSAGE_CHARS = 2000


class MessageGenerator:
    """Turns a diff into a commit message, looping on user-chosen retries."""

    def __init__(self, prompter: Prompter,
                 client_factory: Callable[..., LLMClient] = get_client):
        self.prompter = prompter
        self.client_factory = client_factory

    def _generate_once(self, prompt: str, credential: str | None, selection: BackendSelection) -> str:
        client = self.client_factory(selection, api_key=credential)
        start = time.time()
        with Spinner(f"Generating commit message with {selection.model}..."):
            response = client.generate(prompt)
        elapsed = time.time() - start
        logger.debug("{} answered in {:.2f}s ({} tokens)", client.name, elapsed, response.tokens_used)

        message = normalize_completion(response.content)
        if not message:
            raise EmptyGeneration(backend=selection.backend)

        print_success("Commit message generated")
        if len(message) > LONG_MESSAGE_CHARS:
            print_warning("Generated commit message is quite long, consider editing it")
        return message

    def _recovery_choice(self, switchable: bool) -> str:
        if switchable:
            question = "\nWould you like to (r)etry, (s)witch model/provider, enter (m)anual message, or (q)uit? "
            valid = {'r': 'retry', 'retry': 'retry', 's': 'switch', 'switch': 'switch',
                     'm': 'manual', 'manual': 'manual'}
        else:
            question = "\nWould you like to (r)etry, enter (m)anual message, or (q)uit? "
            valid = {'r': 'retry', 'retry': 'retry', 'm': 'manual', 'manual': 'manual'}

        while True:
            answer = self.prompter.choose(question)
            if answer in QUIT_TOKENS:
                return 'quit'
            if answer in valid:
                return valid[answer]
            print(dim("Please pick one of the listed options."))

    def _manual_message(self) -> str:
        message = self.prompter.ask("\nEnter your commit message: ")
        if not message:
            print(dim(f"Empty message, using default: {FALLBACK_MESSAGE}"))
            return FALLBACK_MESSAGE
        return message

    def generate(self, diff: str, credential: str | None, selection: BackendSelection) -> str:
        """Return a commit message, or raise SwitchRequested / UserQuit from the recovery menu."""
        if not diff or not diff.strip():
            raise EmptyDiff("No changes to generate commit message for")

        prompt = build_prompt(diff)

        while True:
            try:
                return self._generate_once(prompt, credential, selection)
            except LLMError as e:
                print_error(f"Error generating commit message: {e.message}")
                logger.debug("Generation via {} failed: {!r}", selection, e)
                action = self._recovery_choice(is_switchable(e))

            if action == 'retry':
                continue
            if action == 'switch':
                raise SwitchRequested()
            if action == 'manual':
                return self._manual_message()
            raise UserQuit("User chose to quit after generation failure")
