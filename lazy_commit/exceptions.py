"""
Exception hierarchy for lazy-commit.

Recoverable conditions are caught at the narrowest scope that can offer a
recovery menu. Only ``Terminated`` subclasses end the process, and they carry
the exit status to use.
"""


class LazyCommitError(Exception):
    """Base exception for all lazy-commit errors."""

    def __init__(self, message: str = "", details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class GitError(LazyCommitError):
    """Raised when a git command fails."""
    pass


class EmptyDiff(LazyCommitError):
    """Nothing is staged; the main loop simply waits and tries again."""

    def __init__(self, message: str = "No staged changes found"):
        super().__init__(message)


class SensitiveDataDetected(LazyCommitError):
    """Added lines look like they contain secrets. The diff must not be forwarded."""

    def __init__(self, matches: list):
        self.matches = list(matches)
        super().__init__("Commit blocked due to potential sensitive data")


class LLMError(LazyCommitError):
    """Raised when a generation backend fails.

    ``backend`` is the backend kind the failure came from, when known.
    """

    def __init__(self, message: str, backend=None, details: str | None = None):
        self.backend = backend
        super().__init__(message, details)


class BackendUnreachable(LLMError):
    """Connection refused, host not found, timeout or other network fault."""
    pass


class BackendRequestFailed(LLMError):
    """The backend answered with a non-2xx status or an unreadable body."""

    def __init__(self, message: str, status: int = 0, backend=None, details: str | None = None):
        self.status = status
        super().__init__(message, backend=backend, details=details)


class EmptyGeneration(LLMError):
    """The backend answered but nothing usable was left after normalization."""

    def __init__(self, backend=None):
        super().__init__("Generated commit message is empty", backend=backend)


class SwitchRequested(LazyCommitError):
    """The user asked to pick another backend/model after a generation failure."""

    def __init__(self):
        super().__init__("Switch of backend/model requested")


class CommitFailed(LazyCommitError):
    """git commit exited with a failure."""
    pass


class Terminated(LazyCommitError):
    """Ends the session. ``exit_code`` is the process exit status."""

    exit_code = 1


class UserQuit(Terminated):
    """The user typed the quit token, or input ended."""

    exit_code = 0

    def __init__(self, message: str = "User chose to quit"):
        super().__init__(message)


class NoModelsAvailable(Terminated):
    """Ollama is reachable but has no models installed."""
    pass


class MissingCredential(Terminated):
    """No OpenRouter API key could be found or was entered."""
    pass
