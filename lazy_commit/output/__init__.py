"""Terminal Output Package

Styling, status lines, ruled blocks and the spinner used by the interactive
session. Colour is decided per call so NO_COLOR / FORCE_COLOR changes apply
immediately; glyphs fall back to ASCII when stdout cannot encode them.
"""

import itertools
import os
import re
import sys
import threading

_SGR = {
    'bold': '1',
    'dim': '2',
    'red': '31',
    'green': '32',
    'yellow': '33',
    'cyan': '36',
    'banner': '38;2;217;165;145',
}


def _stdout_is_terminal() -> bool:
    isatty = getattr(sys.stdout, 'isatty', None)
    return bool(isatty and isatty())


def color_enabled() -> bool:
    """NO_COLOR wins over FORCE_COLOR, which wins over terminal detection."""
    if os.environ.get('NO_COLOR'):
        return False
    return bool(os.environ.get('FORCE_COLOR')) or _stdout_is_terminal()


def _can_encode(sample: str) -> bool:
    try:
        sample.encode(getattr(sys.stdout, 'encoding', None) or 'utf-8')
    except (UnicodeEncodeError, LookupError):
        return False
    return True


UNICODE = _can_encode('✓✗⚠─═⠋')

# name -> (unicode, ascii)
_GLYPHS = {
    'ok': ('✓', '[OK]'),
    'fail': ('✗', '[X]'),
    'warn': ('⚠', '[!]'),
    'rule': ('─', '-'),
    'heavy': ('═', '='),
}


def glyph(name: str) -> str:
    unicode_form, ascii_form = _GLYPHS[name]
    return unicode_form if UNICODE else ascii_form


def style(text: str, *names: str) -> str:
    """Wrap text in one SGR sequence built from the named styles."""
    if not names or not color_enabled():
        return text
    codes = ';'.join(_SGR[name] for name in names)
    return f"\033[{codes}m{text}\033[0m"


def _styler(*names):
    def apply(text: str) -> str:
        return style(text, *names)
    return apply


bold = _styler('bold')
dim = _styler('dim')
info = _styler('cyan')
success = _styler('green')
warning = _styler('yellow')
error = _styler('red')


def print_success(message: str) -> None:
    print(f"{success(glyph('ok'))} {message}")


def print_error(message: str) -> None:
    print(error(f"{glyph('fail')} {message}"), file=sys.stderr)


def print_warning(message: str) -> None:
    print(warning(f"{glyph('warn')} {message}"))


def print_rule(width: int = 50, heavy: bool = False) -> None:
    print(dim(glyph('heavy' if heavy else 'rule') * width))


BANNER = r"""
 _                           ____                          _ _
| |    __ _ _____   _       / ___|___  _ __ ___  _ __ ___ (_) |_
| |   / _` |_  / | | |_____| |   / _ \| '_ ` _ \| '_ ` _ \| | __|
| |__| (_| |/ /| |_| |_____| |__| (_) | | | | | | | | | | | | |_
|_____\__,_/___|\__, |      \____\___/|_| |_| |_|_| |_| |_|_|\__|
                |___/
"""


def print_banner() -> None:
    print(style(BANNER, 'banner'))
    print(dim("  AI commit messages for your staged changes. Type 'q' at any prompt to quit.\n"))


# ---------------------------------------------------------------------------
# Commit message display
# ---------------------------------------------------------------------------

MAX_FILE_DISPLAY = 8
MAX_RULE_WIDTH = 100

_TYPE_PREFIX = re.compile(r'^(\w+)(\([^)]*\))?!?:')
_TYPE_STYLES = {
    'feat': 'green',
    'fix': 'red',
    'refactor': 'yellow',
    'perf': 'yellow',
    'docs': 'cyan',
    'ci': 'cyan',
    'build': 'cyan',
    'test': 'dim',
    'chore': 'dim',
    'style': 'dim',
}


def colorize_commit_type(message: str) -> str:
    """Highlight a conventional `type(scope):` prefix on the title line."""
    title, newline, body = message.partition('\n')
    match = _TYPE_PREFIX.match(title)
    if match is None or match.group(1) not in _TYPE_STYLES:
        return message
    prefix = match.group(0)
    highlighted = style(prefix, 'bold', _TYPE_STYLES[match.group(1)])
    return highlighted + title[len(prefix):] + newline + body


def print_file_list(files, max_shown: int = MAX_FILE_DISPLAY) -> None:
    """List staged files with their line counts; long lists are collapsed."""
    if not files:
        return
    print(bold("Staged changes:"))
    for change in files[:max_shown]:
        print(dim(f"  {change.path} (+{change.additions} -{change.deletions})"))
    hidden = len(files) - max_shown
    if hidden > 0:
        print(dim(f"  ... and {hidden} more files"))


def print_message_block(message: str, heading: str = "Generated commit message:") -> None:
    """Show a commit message between rules sized to its longest line."""
    width = min(max((len(line) for line in message.split('\n')), default=40), MAX_RULE_WIDTH)
    title, *body = colorize_commit_type(message).split('\n')
    print(f"\n{bold(heading)}")
    print_rule(width)
    print(bold(title))
    for line in body:
        print(line)
    print_rule(width)


class Spinner:
    """Animates a status line while a slow call runs. Silent when stdout is not a terminal."""

    INTERVAL = 0.08

    def __init__(self, text: str = ""):
        self.text = text
        self._done = threading.Event()
        self._thread = None

    def _animate(self):
        frames = itertools.cycle('⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏' if UNICODE else '-\\|/')
        for frame in frames:
            if self._done.is_set():
                break
            sys.stdout.write(f"\r\033[K{frame} {self.text}")
            sys.stdout.flush()
            self._done.wait(self.INTERVAL)

    def __enter__(self):
        if _stdout_is_terminal():
            self._done.clear()
            self._thread = threading.Thread(target=self._animate, daemon=True)
            self._thread.start()
        return self

    def __exit__(self, *exc):
        self._done.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
            sys.stdout.write("\r\033[K")
            sys.stdout.flush()
        return False


__all__ = [
    "UNICODE", "BANNER", "MAX_FILE_DISPLAY", "MAX_RULE_WIDTH",
    "color_enabled", "glyph", "style",
    "bold", "dim", "info", "success", "warning", "error",
    "print_success", "print_error", "print_warning", "print_rule", "print_banner",
    "colorize_commit_type", "print_file_list", "print_message_block", "Spinner",
]
