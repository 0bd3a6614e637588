"""Invariant checks for event steps and complete settings.

Every mutation of the live configuration is checked here before it is
applied, so a rejected change never reaches subscribers.
"""

import logging
from typing import Sequence

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

logger = logging.getLogger(__name__)

# Strength scale accepted by the collar radio protocol
COLLAR_STRENGTH_MIN = 0
COLLAR_STRENGTH_MAX = 100

# (min field, max field) pairs that must stay ordered
ORDERED_PAIRS = (
    ("idle_period_min_ms", "idle_period_max_ms"),
    ("action_period_min_ms", "action_period_max_ms"),
    ("decibel_threshold_min", "decibel_threshold_max"),
    ("collar_min_shock", "collar_max_shock"),
    ("collar_min_vibe", "collar_max_vibe"),
)


def validate_range(name: str, range_type: RangeType, values: Sequence[float]) -> None:
    """Check a time or strength range against its range type.

    Raises:
        ValidationError: If the range is malformed for its type
    """
    if not isinstance(range_type, RangeType):
        raise ValidationError(f"{name}_type: {range_type!r} is not a RangeType", f"{name}_type")
    if len(values) not in (1, 2):
        raise ValidationError(f"{name}: expected 1 or 2 values, got {len(values)}", name)
    if len(values) == 1 and range_type is not RangeType.FIXED:
        raise ValidationError(
            f"{name}: a single value is only valid for FIXED ranges, not {range_type.name}", name
        )
    if not all(v >= 0 for v in values):
        raise ValidationError(f"{name}: values must not be negative, got {list(values)}", name)
    if len(values) == 2 and not values[0] <= values[1]:
        raise ValidationError(f"{name}: min {values[0]} is greater than max {values[1]}", name)


def validate_event_step(step: EventStep, settings: AppSettings, label: str = "step") -> None:
    """Check one event step, including its strength against the device bounds.

    Args:
        step: The step to check
        settings: Settings providing the collar strength bounds
        label: Prefix for error messages (e.g. 'correction_steps[2]')

    Raises:
        ValidationError: If the step breaks any invariant
    """
    if not isinstance(step.type, EventType):
        raise ValidationError(f"{label}.type: {step.type!r} is not an EventType", f"{label}.type")
    if not (step.start_delay >= 0 and step.end_delay >= 0):
        raise ValidationError(f"{label}: delays must not be negative", f"{label}.start_delay")
    if not step.start_delay <= step.end_delay:
        raise ValidationError(
            f"{label}: start_delay {step.start_delay} is greater than end_delay {step.end_delay}",
            f"{label}.start_delay",
        )

    try:
        validate_range("time_range", step.time_range_type, step.time_range)
        validate_range("strength_range", step.strength_range_type, step.strength_range)
    except ValidationError as e:
        raise ValidationError(f"{label}.{e}", f"{label}.{e.field}") from e

    bounds = settings.strength_bounds(step.type)
    if bounds is not None:
        low, high = bounds
        if not low <= min(step.strength_range) <= max(step.strength_range) <= high:
            raise ValidationError(
                f"{label}.strength_range: {list(step.strength_range)} outside "
                f"{step.type.name} bounds [{low}, {high}]",
                f"{label}.strength_range",
            )


def validate_settings(settings: AppSettings) -> None:
    """Check every invariant of a complete settings value.

    Steps are checked against the collar bounds of the same value, so
    narrowing the bounds underneath existing steps is rejected.

    Raises:
        ValidationError: On the first violated invariant
    """
    for low_name, high_name in ORDERED_PAIRS:
        low = getattr(settings, low_name)
        high = getattr(settings, high_name)
        if not low <= high:
            raise ValidationError(
                f"{low_name} ({low}) must not be greater than {high_name} ({high})", low_name
            )

    for name in ("idle_period_min_ms", "action_period_min_ms"):
        if not getattr(settings, name) >= 0:
            raise ValidationError(f"{name} must not be negative", name)

    for name in ("collar_min_shock", "collar_max_shock", "collar_min_vibe", "collar_max_vibe"):
        value = getattr(settings, name)
        if not COLLAR_STRENGTH_MIN <= value <= COLLAR_STRENGTH_MAX:
            raise ValidationError(
                f"{name} ({value}) outside device range "
                f"[{COLLAR_STRENGTH_MIN}, {COLLAR_STRENGTH_MAX}]",
                name,
            )

    mic = settings.mic_sensitivity
    if isinstance(mic, bool) or not isinstance(mic, int) or mic not in MIC_SENSITIVITY_LEVELS:
        raise ValidationError(
            f"mic_sensitivity ({settings.mic_sensitivity!r}) must be one of "
            f"{list(MIC_SENSITIVITY_LEVELS)}",
            "mic_sensitivity",
        )

    if not isinstance(settings.alert_type, AlertType):
        raise ValidationError(f"alert_type: {settings.alert_type!r} is not an AlertType", "alert_type")

    for key in STEP_KEYS:
        for index, step in enumerate(settings.steps(key)):
            validate_event_step(step, settings, label=f"{key}[{index}]")

    logger.debug("Settings passed validation")
