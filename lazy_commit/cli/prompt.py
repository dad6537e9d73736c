"""Line-input prompts and the numbered-menu grammar."""

import re
from dataclasses import dataclass
from typing import Callable

from lazy_commit.exceptions import UserQuit

QUIT_TOKENS = ('q', 'quit')

_MENU_INPUT = re.compile(r'^(\d+)?\s*(.*)$')


@dataclass(frozen=True)
class MenuChoice:
    """Parsed answer to a numbered menu: zero-based index plus modifier flags."""
    index: int
    remember: bool = False
    skip: bool = False
    explicit: bool = False


def parse_menu_choice(answer: str, count: int, default: int) -> MenuChoice:
    """Parse '2', '1r', '2rs', 's' or '' against a menu of ``count`` entries.

    ``default`` is 1-based. Out-of-range or missing numbers fall back to it.
    'r' sets remember, 's' sets skip. The quit token raises UserQuit.
    """
    text = answer.strip().lower()
    if text in QUIT_TOKENS:
        raise UserQuit()

    match = _MENU_INPUT.match(text)
    number, modifiers = match.group(1), match.group(2)

    explicit = False
    choice = default
    if number is not None and 1 <= int(number) <= count:
        choice = int(number)
        explicit = True

    return MenuChoice(
        index=choice - 1,
        remember='r' in modifiers,
        skip='s' in modifiers,
        explicit=explicit,
    )


class Prompter:
    """Synchronous question/answer over a line-input function (``input`` by default)."""

    def __init__(self, input_func: Callable[[str], str] = input):
        self._input = input_func

    def ask(self, question: str) -> str:
        """Return the stripped answer. End of input counts as quitting."""
        try:
            return self._input(question).strip()
        except EOFError:
            print()
            raise UserQuit("Input closed")

    def choose(self, question: str) -> str:
        """Like ask, lower-cased, for single-letter menus."""
        return self.ask(question).lower()

    def menu(self, question: str, count: int, default: int) -> MenuChoice:
        return parse_menu_choice(self.ask(question), count, default)
