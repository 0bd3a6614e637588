"""YAML persistence for the collar settings.

The store itself is purely in-memory. SettingsPersistence ties a store to a
file: it loads the file once and then writes every accepted change back.
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Union

import yaml

from acoustic_collar.exceptions import ValidationError
from acoustic_collar.models import AppSettings
from acoustic_collar.store import SettingsStore
from acoustic_collar.validation import validate_settings

logger = logging.getLogger(__name__)


def load_settings_from_yaml(path: Union[str, Path]) -> AppSettings:
    """Load and validate settings from a YAML file.

    Keys missing from the file take their default values; an empty file
    yields the default configuration.

    Args:
        path: Path to the settings file.

    Returns:
        The validated AppSettings.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValidationError: If the content is not a valid configuration.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValidationError(f"{path}: top level must be a mapping")

    settings = AppSettings.from_dict(data)
    validate_settings(settings)
    logger.info(
        f"Loaded settings from {path} ({len(settings.correction_steps)} correction, "
        f"{len(settings.affirmation_steps)} affirmation step(s))"
    )
    return settings


def save_settings_to_yaml(settings: AppSettings, path: Union[str, Path]) -> None:
    """Write settings to a YAML file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.safe_dump(settings.to_dict(), f, default_flow_style=None, sort_keys=False)

    logger.info(f"Saved settings to {path}")


class SettingsPersistence:
    """Keeps a settings file in sync with a SettingsStore."""

    def __init__(self, store: SettingsStore, path: Union[str, Path]):
        self.store = store
        self.path = Path(path)
        self._unsubscribe: Optional[Callable[[], None]] = None

    def read_from_file(self) -> None:
        """Load the file into the store, or write the defaults if it is missing."""
        if not self.path.exists():
            logger.info(f"No settings file at {self.path}, writing current settings")
            save_settings_to_yaml(self.store.settings, self.path)
            return
        self.store.set_settings(load_settings_from_yaml(self.path))

    def enable(self) -> None:
        """Start writing every accepted change to the file."""
        if self._unsubscribe is not None:
            return
        first = True

        def write(settings: AppSettings) -> None:
            nonlocal first
            # The immediate call on subscribe carries no change
            if first:
                first = False
                return
            save_settings_to_yaml(settings, self.path)

        self._unsubscribe = self.store.subscribe(write)

    def disable(self) -> None:
        """Stop writing changes to the file."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    @property
    def enabled(self) -> bool:
        return self._unsubscribe is not None
