"""Git Analyzer - Read staged changes from git and create commits."""

import subprocess
from dataclasses import dataclass

from lazy_commit.exceptions import GitError


@dataclass
class FileChange:
    """Represents a single staged file's line counts."""
    path: str
    additions: int
    deletions: int

    @property
    def total_changes(self) -> int:
        return self.additions + self.deletions


class GitAnalyzer:
    """Thin wrapper around the git executable."""

    def __init__(self, verify: bool = True):
        if verify:
            self._verify_git_available()
            self._verify_in_repo()

    def _run_git(self, *args: str) -> str:
        """Run a git command and return stdout."""
        try:
            result = subprocess.run(
                ['git', *args],
                capture_output=True,
                text=True,
                check=True,
                encoding='utf-8',
                errors='replace'
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitError(f"Git command failed: git {' '.join(args)}", details=e.stderr)
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_git_available(self) -> None:
        """Fail fast if git isn't available."""
        try:
            self._run_git('--version')
        except GitError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_in_repo(self) -> None:
        """Fail fast if we're not in a git repository."""
        try:
            self._run_git('rev-parse', '--git-dir')
        except GitError:
            raise GitError("Not inside a git repository")

    def get_staged_diff(self) -> str:
        """Get the diff content for staged changes."""
        return self._run_git('diff', '--staged')

    def get_staged_files(self) -> list[FileChange]:
        """Parse 'git diff --staged --numstat' output."""
        output = self._run_git('diff', '--staged', '--numstat')

        if not output.strip():
            return []

        files = []
        for line in output.strip().split('\n'):
            parts = line.split('\t')
            if len(parts) >= 3:
                additions = int(parts[0]) if parts[0] != '-' else 0
                deletions = int(parts[1]) if parts[1] != '-' else 0
                files.append(FileChange(path=parts[2], additions=additions, deletions=deletions))

        return files

    def commit(self, message_file: str) -> None:
        """Run 'git commit -F <file>' with the terminal attached for hooks and editors."""
        try:
            subprocess.run(['git', 'commit', '-F', message_file], check=True)
        except subprocess.CalledProcessError as e:
            raise GitError(f"git commit exited with status {e.returncode}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")
