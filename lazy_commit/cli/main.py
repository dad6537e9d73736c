"""CLI Main Entry Point"""

import sys

from loguru import logger

from lazy_commit import Backend
from lazy_commit.cli.args import parse_args
from lazy_commit.cli.commands import reset_config
from lazy_commit.cli.committer import Committer
from lazy_commit.cli.editor import EditSession
from lazy_commit.cli.generator import MessageGenerator
from lazy_commit.cli.prompt import QUIT_TOKENS, Prompter
from lazy_commit.cli.selector import BackendSelector
from lazy_commit.config import PreferenceStore
from lazy_commit.config.credentials import CredentialStore
from lazy_commit.exceptions import (
    CommitFailed,
    EmptyDiff,
    GitError,
    LazyCommitError,
    SensitiveDataDetected,
    SwitchRequested,
    Terminated,
    UserQuit,
)
from lazy_commit.git import DiffGuard, GitAnalyzer
from lazy_commit.log import setup_logging
from lazy_commit.output import dim, info, print_banner, print_error, print_file_list, print_message_block, warning

FAREWELL = "Goodbye!"


class CommitSession:
    """The interactive loop: diff, backend, generate, review, commit, repeat."""

    def __init__(self, git, prompter: Prompter, store: PreferenceStore,
                 credentials: CredentialStore, guard: DiffGuard, selector: BackendSelector,
                 generator: MessageGenerator, editor: EditSession, committer: Committer):
        self.git = git
        self.prompter = prompter
        self.store = store
        self.credentials = credentials
        self.guard = guard
        self.selector = selector
        self.generator = generator
        self.editor = editor
        self.committer = committer

    @classmethod
    def create(cls, git, prompter: Prompter | None = None) -> 'CommitSession':
        prompter = prompter or Prompter()
        store = PreferenceStore()
        return cls(
            git=git,
            prompter=prompter,
            store=store,
            credentials=CredentialStore(),
            guard=DiffGuard(git, prompter),
            selector=BackendSelector(store, prompter),
            generator=MessageGenerator(prompter),
            editor=EditSession(prompter),
            committer=Committer(git),
        )

    def _ask_continue(self, question: str) -> bool:
        try:
            return self.prompter.choose(question) not in QUIT_TOKENS
        except UserQuit:
            return False

    def _show_staged_files(self) -> None:
        try:
            print_file_list(self.git.get_staged_files())
        except GitError as e:
            logger.debug("Could not list staged files: {}", e)

    def generate_message(self, diff: str) -> str:
        """Select a backend and generate, re-selecting whenever the user asks to switch."""
        selection = self.selector.select()
        while True:
            credential = None
            if selection.backend is Backend.CLOUD:
                credential = self.credentials.resolve(self.prompter)
            try:
                return self.generator.generate(diff, credential, selection)
            except SwitchRequested:
                print(f"\n{info('Switching model/provider...')}")
                selection = self.selector.select()

    def commit_with_retry(self, message: str) -> bool:
        """Commit, offering retry on failure. Returns False if the user cancelled."""
        while True:
            try:
                self.committer.commit(message)
                return True
            except CommitFailed as e:
                print_error(e.message)
                print(dim("Commit failed. Please check for git errors above."))
                answer = self.prompter.choose("(r)etry, (c)ancel, or (q)uit? ")
                if answer in QUIT_TOKENS:
                    raise UserQuit("User chose to quit after commit failure")
                if answer in ('c', 'cancel'):
                    print(dim("Commit cancelled."))
                    return False

    def review(self, message: str) -> None:
        print_message_block(message)
        action = self.prompter.choose("\nChoose an action: (a)ccept, (e)dit, (c)ancel, (q)uit: ")

        if action in QUIT_TOKENS:
            raise UserQuit()
        if action in ('a', 'accept'):
            final = message
        elif action in ('e', 'edit'):
            final = self.editor.edit(message)
            if not final.strip():
                print(warning("Empty commit message. Cancelled."))
                return
        else:
            print(dim("Commit cancelled."))
            return

        if self.commit_with_retry(final):
            print(f"\n{info('Ready for next commit! Stage some changes or press CTRL+C to exit.')}")

    def run_once(self) -> None:
        diff = self.guard.acquire_validated_diff()
        self._show_staged_files()
        message = self.generate_message(diff)
        self.review(message)

    def run(self) -> int:
        while True:
            try:
                self.run_once()
            except Terminated as e:
                if e.exit_code:
                    print_error(e.message)
                print(FAREWELL)
                return e.exit_code
            except EmptyDiff:
                continue
            except SensitiveDataDetected:
                print(warning("\nCommit blocked due to sensitive data detection."))
                print("Please review and remove sensitive information before committing.")
                if not self._ask_continue("Fix the issues and press Enter to try again, or (q)uit? "):
                    print(FAREWELL)
                    return 0
            except LazyCommitError as e:
                print_error(f"Unexpected error: {e.message}")
                if not self._ask_continue("Continue or (q)uit? "):
                    print(FAREWELL)
                    return 0
            except Exception as e:
                logger.exception("Unexpected error in session loop")
                print_error(f"Unexpected error: {e}")
                if not self._ask_continue("Continue or (q)uit? "):
                    print(FAREWELL)
                    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)

    if args.reset_config:
        return reset_config()

    if not args.no_banner:
        print_banner()

    try:
        git = GitAnalyzer()
    except GitError as e:
        print_error(e.message)
        return 1

    return CommitSession.create(git).run()


def run() -> None:
    """Console script entry: Ctrl+C anywhere says goodbye and exits cleanly."""
    try:
        code = main()
    except KeyboardInterrupt:
        print(f"\n\n{FAREWELL}")
        code = 0
    sys.exit(code)


if __name__ == "__main__":
    run()
