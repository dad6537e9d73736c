"""Prompt Builder - Construct the generation prompt for a staged diff."""

from loguru import logger

from lazy_commit import COMMIT_TYPE_NAMES
from lazy_commit.output import print_warning

LARGE_DIFF_CHARS = 50_000

COMMIT_PATTERN = f"""IMPORTANT: Generate a detailed conventional commit message for the following changes. Ensure the message adheres to the type(scope): brief summary format and includes 2-5 concise, action-oriented bullet points detailing specific modifications made in the codebase. Each bullet should clearly state what was changed, using verbs like 'add,' 'remove,' 'update,' 'fix,' or 'refactor.'

FORMAT: type(scope): brief summary of main change

- A conventional commit type (e.g., feat, fix, refactor).
- A scope for the change (e.g., authentication, UI, database).
- A brief, one-line summary of the main purpose of this commit.
- 2-5 distinct bullet points, each describing a concrete, granular change that was implemented. Focus on what was modified in the code, using strong action verbs.

REQUIREMENTS:
- Use conventional commit format: type(scope): description
- Types: {', '.join(COMMIT_TYPE_NAMES)}
- Include 2-5 bullet points detailing SPECIFIC changes
- Each bullet should be concise but descriptive
- Focus on WHAT was changed, not just WHY
- Use action verbs (add, remove, update, fix, refactor, etc.)

Make each bullet point specific and actionable, showing exactly what was modified in the codebase."""


def build_prompt(diff: str) -> str:
    """Instruction template followed by the literal diff and its size."""
    if not diff or not diff.strip():
        raise ValueError("No changes to generate commit message for")

    size = len(diff)
    if size > LARGE_DIFF_CHARS:
        print_warning(f"Large diff detected ({size:,} characters), commit message may be truncated")

    prompt = (
        f"{COMMIT_PATTERN}\n\n"
        f"Here are the staged changes ({size} characters):\n"
        f"```diff\n{diff}\n```\n\n"
        "Generate a conventional commit message based on these changes:"
    )
    logger.debug("Built prompt: {} chars for a {} char diff", len(prompt), size)
    return prompt
