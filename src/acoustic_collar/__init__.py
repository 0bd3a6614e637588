"""Acoustic Collar - behaviour settings for a sound-triggered training collar.

Defines the configuration model (timing windows, detection thresholds,
device strength bounds and the correction/affirmation step sequences) and
an observable store that owns the live configuration.

Usage:
    from acoustic_collar import SettingsStore, EventStep, EventType, RangeType

    store = SettingsStore()
    store.subscribe(lambda settings: print(settings.correction_steps))
    store.add_event_step(
        "correction_steps",
        EventStep(EventType.COLLAR_VIBRATION, 0, 500, RangeType.FIXED, (200,),
                  RangeType.RANDOM, (10, 40)),
    )
"""

__version__ = "1.0.0"

# Core exports
from acoustic_collar.exceptions import ValidationError
from acoustic_collar.models import (
    MIC_SENSITIVITY_LEVELS,
    STEP_KEYS,
    AlertType,
    AppSettings,
    EventStep,
    EventType,
    RangeType,
)
from acoustic_collar.store import SettingsStore
from acoustic_collar.validation import validate_event_step, validate_settings
from acoustic_collar.config import AppConfig, SystemConfig, configure_logging
from acoustic_collar.persistence import (
    SettingsPersistence,
    load_settings_from_yaml,
    save_settings_to_yaml,
)

__all__ = [
    # Version
    "__version__",
    # Models
    "AppSettings",
    "EventStep",
    "EventType",
    "RangeType",
    "AlertType",
    "MIC_SENSITIVITY_LEVELS",
    "STEP_KEYS",
    # Store
    "SettingsStore",
    "ValidationError",
    "validate_event_step",
    "validate_settings",
    # Configuration
    "AppConfig",
    "SystemConfig",
    "configure_logging",
    # Persistence
    "SettingsPersistence",
    "load_settings_from_yaml",
    "save_settings_to_yaml",
]
