"""Diff Guard - Acquire the staged diff and refuse secrets before anything leaves the machine."""

import re
from dataclasses import dataclass

from loguru import logger

from lazy_commit.exceptions import EmptyDiff, SensitiveDataDetected, UserQuit
from lazy_commit.output import dim, error, print_error, print_rule, print_success

ADDED_MARKER = '+'
OPAQUE_VALUE = r"""\s*[=:]\s*["']?[A-Za-z0-9_\-]{20,}["']?"""


@dataclass(frozen=True)
class SensitivePattern:
    """A named regex applied to each added line."""
    name: str
    regex: re.Pattern


@dataclass(frozen=True)
class SensitiveMatch:
    """One pattern hit on one added line of the diff."""
    line_number: int
    line: str
    pattern: str


SENSITIVE_PATTERNS: list[SensitivePattern] = [
    SensitivePattern("openrouter-key", re.compile(r"OPENROUTER_API_KEY" + OPAQUE_VALUE, re.IGNORECASE)),
    SensitivePattern("api-key", re.compile(r"api[_-]?key" + OPAQUE_VALUE, re.IGNORECASE)),
    SensitivePattern("token", re.compile(r"token" + OPAQUE_VALUE, re.IGNORECASE)),
    SensitivePattern("secret", re.compile(r"secret" + OPAQUE_VALUE, re.IGNORECASE)),
    SensitivePattern("password", re.compile(r"""passw(?:or)?d\s*[=:]\s*["']?[^\s"']{20,}["']?""", re.IGNORECASE)),
    SensitivePattern("private-key", re.compile(r"private[_-]?key\s*[=:]", re.IGNORECASE)),
    SensitivePattern("private-key-block", re.compile(r"-----BEGIN (?:[A-Z]+ )*PRIVATE KEY-----")),
    SensitivePattern("env-file", re.compile(r"""(?:^\+|[\s/"'=:(])\.env(?:\.[\w-]+)*(?=$|[\s"'),;:])""", re.IGNORECASE)),
    SensitivePattern("base64-literal", re.compile(r"""["'][A-Za-z0-9+/=]{32,}["']""")),
]


def scan_diff(diff: str, patterns: list[SensitivePattern] | None = None) -> list[SensitiveMatch]:
    """Check every added line against every pattern. Line numbers are 1-based."""
    patterns = SENSITIVE_PATTERNS if patterns is None else patterns
    matches = []
    for index, line in enumerate(diff.split('\n'), start=1):
        if not line.startswith(ADDED_MARKER):
            continue
        for pattern in patterns:
            if pattern.regex.search(line):
                matches.append(SensitiveMatch(line_number=index, line=line.strip(), pattern=pattern.name))
    return matches


def report_matches(matches: list[SensitiveMatch]) -> None:
    """Print each offending line once, with every pattern that hit it."""
    by_line: dict[int, tuple[str, list[str]]] = {}
    for match in matches:
        line, names = by_line.setdefault(match.line_number, (match.line, []))
        names.append(match.pattern)

    print_error("SECURITY WARNING: Potential sensitive data detected!")
    print_rule(60, heavy=True)
    for line_number, (line, names) in sorted(by_line.items()):
        print(f"Line {line_number}: {error(line)} {dim('[' + ', '.join(names) + ']')}")
    print_rule(60, heavy=True)
    print("\nPlease review these changes and ensure no secrets are being committed.")
    print("Consider adding sensitive files to .gitignore or using environment variables.\n")


def validate_staged_changes(diff: str) -> str:
    """Return the diff unchanged, or raise SensitiveDataDetected."""
    matches = scan_diff(diff)
    if matches:
        logger.debug("Sensitive data screening flagged {} pattern hits", len(matches))
        report_matches(matches)
        raise SensitiveDataDetected(matches)
    return diff


class DiffGuard:
    """Gets the staged diff, handles the nothing-staged case, screens for secrets."""

    def __init__(self, git, prompter):
        self.git = git
        self.prompter = prompter

    def acquire_validated_diff(self) -> str:
        diff = self.git.get_staged_diff()

        if not diff.strip():
            print_error("No staged changes found")
            print(dim("Stage some changes first with: git add <files>"))
            choice = self.prompter.choose("\nWould you like to (c)ontinue waiting for changes or (q)uit? ")
            if choice in ('q', 'quit'):
                raise UserQuit("User chose to quit - no staged changes")
            raise EmptyDiff()

        validate_staged_changes(diff)
        print_success("Staged changes validated")
        return diff
