"""Edit Session - Structural edits to a generated message before commit."""

import re

from lazy_commit.cli.prompt import Prompter
from lazy_commit.output import bold, dim, print_rule

BULLET_LINE = re.compile(r'^\s*(?:[-*•]|\d+[.)])\s+')

EDIT_WHOLE, EDIT_TITLE, EDIT_BULLETS, KEEP = 1, 2, 3, 4


def split_title(message: str) -> tuple[str, str | None]:
    """First line and the rest (None when the message is a single line)."""
    title, sep, rest = message.partition('\n')
    return title, (rest if sep else None)


def split_bullets(message: str) -> tuple[list[str], list[str]]:
    """Lines before the first bullet, and the bullet region through the end."""
    lines = message.split('\n')
    for index, line in enumerate(lines):
        if BULLET_LINE.match(line):
            return lines[:index], lines[index:]
    return lines, []


def replace_title(message: str, new_title: str) -> str:
    title, rest = split_title(message)
    new_title = new_title.strip() or title
    return new_title if rest is None else f"{new_title}\n{rest}"


def replace_bullets(message: str, new_bullets: str) -> str:
    before, bullets = split_bullets(message)
    new_bullets = new_bullets.strip('\n') if new_bullets.strip() else '\n'.join(bullets)
    if not new_bullets:
        return message
    return '\n'.join(before + [new_bullets])


class EditSession:
    """Four-option edit menu. Always returns a usable message."""

    def __init__(self, prompter: Prompter):
        self.prompter = prompter

    def _prompt_for_edit(self, label: str, current: str) -> str:
        print(f"\n{bold(label)}")
        print(dim("(Current value shown below, press Enter to keep, or type new value)"))
        print_rule()
        print(current)
        print_rule()
        return self.prompter.ask("\nNew value (Enter to keep current): ")

    def edit(self, message: str) -> str:
        print(f"\n{bold('Edit Menu:')}")
        print("1. Edit the entire message")
        print("2. Edit just the title/summary")
        print("3. Edit just the bullet points")
        print("4. Use the message as-is")

        answer = self.prompter.ask("\nChoose an option (1-4, default: 4): ")
        option = int(answer) if answer.isdecimal() else KEEP

        if option == EDIT_WHOLE:
            return self._prompt_for_edit("Enter your complete commit message:", message) or message

        if option == EDIT_TITLE:
            title, _ = split_title(message)
            return replace_title(message, self._prompt_for_edit("Enter new title/summary:", title))

        if option == EDIT_BULLETS:
            _, bullets = split_bullets(message)
            current = '\n'.join(bullets) if bullets else "(no bullet points)"
            return replace_bullets(message, self._prompt_for_edit("Enter new bullet points:", current))

        return message
