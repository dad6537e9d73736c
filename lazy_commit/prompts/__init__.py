"""Prompt Construction Package"""

from lazy_commit.prompts.builder import COMMIT_PATTERN, LARGE_DIFF_CHARS, build_prompt

__all__ = ["COMMIT_PATTERN", "LARGE_DIFF_CHARS", "build_prompt"]
