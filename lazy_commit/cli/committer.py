"""Commit Executor - Write the message to a temp file and run git commit."""

import os
import tempfile

from loguru import logger

from lazy_commit.exceptions import CommitFailed, GitError
from lazy_commit.output import print_error, print_success


class Committer:
    """Commits staged changes with a message, cleaning up its temp file on every path."""

    def __init__(self, git):
        self.git = git

    def commit(self, message: str) -> None:
        tmp = tempfile.NamedTemporaryFile(mode='w', prefix='lazy-commit-', suffix='.txt',
                                          delete=False, encoding='utf-8')
        try:
            tmp.write(message)
            tmp.close()
            self.git.commit(tmp.name)
        except (GitError, OSError) as e:
            print_error("Failed to commit changes")
            raise CommitFailed(f"Failed to commit changes: {e}")
        finally:
            tmp.close()
            try:
                os.unlink(tmp.name)
            except OSError as e:
                logger.debug("Could not delete temp file {}: {}", tmp.name, e)
        print_success("Changes committed successfully!")
