"""Human-readable rendering of configuration values."""

import math

from acoustic_collar.models import EventStep, EventType


def format_seconds(value: float) -> str:
    return f"{value:g} second{'s' if value != 1 else ''}"


def format_milliseconds(value_ms: float) -> str:
    """Render a millisecond value as seconds, e.g. 1500 -> '1.5 seconds'."""
    return format_seconds(value_ms / 1000)


def format_percentage(value: float) -> str:
    """Render a 0..1 fraction as a whole percentage, rounding down."""
    # 0.29 * 100 == 28.999999999999996 must floor to 29
    return f"{math.floor(round(value * 100, 6))}%"


def _format_range(values) -> str:
    if len(values) == 1:
        return f"{values[0]:g}"
    return f"{values[0]:g}-{values[1]:g}"


def describe_step(step: EventStep) -> str:
    """One-line summary of an event step."""
    text = (
        f"{step.type.name.replace('COLLAR_', '').lower()}: "
        f"{format_milliseconds(step.start_delay)} to {format_milliseconds(step.end_delay)}, "
        f"time {step.time_range_type.name.lower()} {_format_range(step.time_range)}"
    )
    if step.type is not EventType.COLLAR_BEEP:
        text += (
            f", strength {step.strength_range_type.name.lower()} "
            f"{_format_range(step.strength_range)}"
        )
    return text
