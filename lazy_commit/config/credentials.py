"""OpenRouter API key resolution: environment, then key file, then prompt."""

import os
from pathlib import Path

from loguru import logger

from lazy_commit.config import config_dir
from lazy_commit.exceptions import MissingCredential
from lazy_commit.output import bold, dim, print_success, print_warning

API_KEY_ENV = "OPENROUTER_API_KEY"
API_KEY_FILENAME = "api-key"
KEYS_URL = "https://openrouter.ai/keys"


class CredentialStore:
    """Finds the OpenRouter key and caches it for the session."""

    def __init__(self, directory: Path | None = None):
        self.directory = directory or config_dir()
        self.path = self.directory / API_KEY_FILENAME
        self._api_key: str | None = None

    def _read_file(self) -> str | None:
        try:
            if self.path.exists():
                return self.path.read_text(encoding='utf-8').strip() or None
        except OSError as e:
            logger.debug("Could not read key file {}: {}", self.path, e)
        return None

    def _write_file(self, key: str) -> bool:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            self.path.write_text(key, encoding='utf-8')
            try:
                self.path.chmod(0o600)
            except OSError as e:
                logger.debug("Could not restrict permissions on {}: {}", self.path, e)
        except OSError as e:
            logger.debug("Could not write key file {}: {}", self.path, e)
            return False
        return True

    def resolve(self, prompter) -> str:
        """Return the API key, asking the user once if none is stored."""
        if self._api_key:
            return self._api_key

        key = os.environ.get(API_KEY_ENV, "").strip()
        if key:
            logger.debug("Using OpenRouter key from {}", API_KEY_ENV)
        else:
            key = self._read_file()
            if key:
                logger.debug("Using OpenRouter key from {}", self.path)

        if not key:
            print(f"\n{bold('OpenRouter API key not found.')}")
            print(dim(f"You can get one at: {KEYS_URL}"))
            key = prompter.ask("\nEnter your OpenRouter API key: ")
            if not key:
                raise MissingCredential("API key is required")
            if self._write_file(key):
                print_success("API key saved globally for future use")
            else:
                print_warning("Could not save API key, you'll need to enter it again next time")

        self._api_key = key
        return key
