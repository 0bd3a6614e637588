"""Application configuration for the acoustic collar tools.

Holds the logging setup and the location of the persisted settings file,
loaded from a single YAML file.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import yaml

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%H:%M:%S"

DEFAULT_SETTINGS_FILE = "config/appSettings.yaml"


@dataclass
class SystemConfig:
    """System-level configuration settings.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
    """

    log_level: str = "INFO"
    log_file: Optional[str] = None


@dataclass
class AppConfig:
    """Top-level configuration of the application.

    Attributes:
        system: Logging settings.
        settings_file: Where the collar settings are persisted.
    """

    system: SystemConfig = field(default_factory=SystemConfig)
    settings_file: Path = field(default_factory=lambda: Path(DEFAULT_SETTINGS_FILE))

    @classmethod
    def load(cls, path: Union[str, Path]) -> "AppConfig":
        """Load the application configuration from a YAML file.

        The YAML file should have the following structure:
        ```yaml
        system:
          log_level: INFO
          log_file: collar.log
        settings_file: config/appSettings.yaml
        ```

        A relative settings_file is resolved against the config file's directory.

        Args:
            path: Path to the configuration YAML file.

        Returns:
            An AppConfig populated with the settings.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        sys_data = data.get("system", {}) or {}
        system_config = SystemConfig(
            log_level=str(sys_data.get("log_level", "INFO")).upper(),
            log_file=sys_data.get("log_file"),
        )

        settings_file = Path(data.get("settings_file", DEFAULT_SETTINGS_FILE))
        if not settings_file.is_absolute():
            settings_file = path.parent / settings_file

        return cls(system=system_config, settings_file=settings_file)


def configure_logging(system: SystemConfig) -> None:
    """Configure the root logger from a SystemConfig.

    Raises:
        ValueError: If the log level name is unknown.
    """
    level = logging.getLevelName(system.log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {system.log_level}")

    handlers = [logging.StreamHandler()]
    if system.log_file:
        handlers.append(logging.FileHandler(system.log_file))

    logging.basicConfig(
        level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT, handlers=handlers, force=True
    )
    logger.debug(f"Logging configured at {system.log_level}")
