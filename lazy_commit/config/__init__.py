"""Preference Management Package"""

import json
import os
import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional

from loguru import logger

from lazy_commit import Backend

CONFIG_DIR_ENV = "LAZY_COMMIT_CONFIG_DIR"
CONFIG_DIRNAME = ".lazy-commit"
CONFIG_FILENAME = "config.json"


def config_dir() -> Path:
    """Per-user directory holding preferences and the API key file."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / CONFIG_DIRNAME


@dataclass
class CustomModel:
    """An OpenRouter model id the user typed in, with a display name."""
    id: str
    name: str


@dataclass
class Preferences:
    """Remembered choices with first-run defaults."""
    custom_models: list[CustomModel] = field(default_factory=list)
    last_backend: Optional[str] = None
    last_cloud_model: Optional[str] = None
    last_local_model: Optional[str] = None
    auto_reuse_last: bool = False
    skip_backend_prompt: bool = False
    skip_model_prompt: bool = False

    def to_dict(self) -> dict:
        return asdict(self)

    def last_model_for(self, backend: Backend) -> Optional[str]:
        if backend is Backend.LOCAL:
            return self.last_local_model
        return self.last_cloud_model

    def has_custom_model(self, model_id: str) -> bool:
        return any(m.id == model_id for m in self.custom_models)

    def validate(self) -> list[str]:
        """Validate values and return list of warnings.

        Invalid values are replaced with defaults after warning.
        """
        warnings = []
        defaults = Preferences()

        if self.last_backend is not None and Backend.parse(self.last_backend) is None:
            warnings.append(f"Invalid last_backend '{self.last_backend}', ignoring")
            self.last_backend = defaults.last_backend

        for name in ("last_cloud_model", "last_local_model"):
            value = getattr(self, name)
            if value is not None and (not isinstance(value, str) or not value.strip()):
                warnings.append(f"Invalid {name} '{value}', ignoring")
                setattr(self, name, None)

        for name in ("auto_reuse_last", "skip_backend_prompt", "skip_model_prompt"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                warnings.append(f"Invalid {name} '{value}', using {str(getattr(defaults, name)).lower()}")
                setattr(self, name, getattr(defaults, name))

        models = []
        seen = set()
        raw_models = self.custom_models if isinstance(self.custom_models, list) else []
        if not isinstance(self.custom_models, list):
            warnings.append("Invalid custom_models, expected a list")
        for entry in raw_models:
            if isinstance(entry, CustomModel):
                entry = asdict(entry)
            if not isinstance(entry, dict) or not isinstance(entry.get('id'), str) or not entry['id'].strip():
                warnings.append(f"Invalid custom model entry {entry!r}, skipping")
                continue
            model_id = entry['id'].strip()
            if model_id in seen:
                continue
            seen.add(model_id)
            name = entry.get('name')
            models.append(CustomModel(id=model_id, name=name.strip() if isinstance(name, str) and name.strip() else model_id))
        self.custom_models = models

        return warnings

    @classmethod
    def from_dict(cls, data: dict) -> 'Preferences':
        if not isinstance(data, dict):
            raise ValueError("preferences must be a JSON object")
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        prefs = cls(**filtered)
        for warning in prefs.validate():
            print(f"Config warning: {warning}", file=sys.stderr)
        return prefs


class PreferenceStore:
    """Loads preferences once and persists every change immediately.

    All mutation goes through the methods below so that a remembered choice
    is on disk before the call that made it returns.
    """

    def __init__(self, directory: Path | None = None):
        self.directory = directory or config_dir()
        self.path = self.directory / CONFIG_FILENAME
        self._preferences: Optional[Preferences] = None

    @property
    def preferences(self) -> Preferences:
        if self._preferences is None:
            self._preferences = self.load()
        return self._preferences

    def load(self) -> Preferences:
        if not self.path.exists():
            return Preferences()
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return Preferences.from_dict(data)
        except (json.JSONDecodeError, ValueError, TypeError, OSError) as e:
            print(f"Warning: Could not load {self.path}: {e}", file=sys.stderr)
            return Preferences()

    def save(self) -> bool:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(self.preferences.to_dict(), f, indent=2)
        except OSError as e:
            print(f"Warning: Could not save {self.path}: {e}", file=sys.stderr)
            return False
        logger.debug("Preferences saved to {}", self.path)
        return True

    def update(self, **changes) -> Preferences:
        prefs = self.preferences
        for key, value in changes.items():
            if key not in Preferences.__dataclass_fields__:
                raise AttributeError(f"Unknown preference: {key}")
            setattr(prefs, key, value)
        self.save()
        return prefs

    def remember_selection(self, backend: Backend, model: str | None = None, **flags) -> None:
        """Record the last backend (and model) together with any modifier flags, in one write."""
        changes = {'last_backend': backend.value, **flags}
        if model is not None:
            key = 'last_local_model' if backend is Backend.LOCAL else 'last_cloud_model'
            changes[key] = model
        self.update(**changes)

    def add_custom_model(self, model_id: str, name: str | None = None) -> bool:
        """Append a custom model unless its id is already saved. Returns True if added."""
        prefs = self.preferences
        if prefs.has_custom_model(model_id):
            return False
        prefs.custom_models.append(CustomModel(id=model_id, name=name or model_id))
        self.save()
        return True

    def reset(self) -> bool:
        """Delete the preferences file. Returns True if one existed."""
        self._preferences = None
        if not self.path.exists():
            return False
        self.path.unlink()
        return True


__all__ = [
    "CustomModel",
    "Preferences",
    "PreferenceStore",
    "config_dir",
    "CONFIG_FILENAME",
]
