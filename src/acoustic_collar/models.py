"""Data models for the collar behaviour configuration."""

import math
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, TypeVar, Union

from acoustic_collar.exceptions import ValidationError

# Microphone gain steps supported by the I2S microphone (per datasheet)
MIC_SENSITIVITY_LEVELS = (26, 27, 28, 29)

# Keys naming the two step sequences held by AppSettings
STEP_KEYS = ("correction_steps", "affirmation_steps")

Number = Union[int, float]
RangeValues = Tuple[Number, ...]


class EventType(Enum):
    """Stimulus modality applied by an event step."""

    COLLAR_BEEP = 0
    COLLAR_VIBRATION = 1
    COLLAR_SHOCK = 2


class RangeType(Enum):
    """How a delay or strength is resolved from its declared range."""

    FIXED = 0
    RANDOM = 1
    PROGRESSIVE = 2
    REDEEMABLE = 3
    GRADED = 4


class AlertType(Enum):
    """Optional warning signal given before a stimulus."""

    NONE = 0
    COLLAR_BEEP = 1
    COLLAR_VIBRATION = 2


E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: Type[E], value: Any, field_name: str) -> E:
    """Convert a member, its name or its integer value into an enum member.

    Args:
        enum_cls: Target enumeration
        value: Raw value (member, case-insensitive name, or int)
        field_name: Field name used in the error message

    Returns:
        The matching enum member

    Raises:
        ValidationError: If the value names no declared variant
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        member = enum_cls.__members__.get(value.strip().upper())
        if member is not None:
            return member
    elif isinstance(value, int) and not isinstance(value, bool):
        for member in enum_cls:
            if member.value == value:
                return member
    allowed = ", ".join(enum_cls.__members__)
    raise ValidationError(
        f"{field_name}: {value!r} is not a valid {enum_cls.__name__} (expected one of {allowed})",
        field_name,
    )


def parse_number(value: Any, field_name: str) -> Number:
    """Accept finite ints and floats; reject bools and everything else."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field_name}: expected a number, got {value!r}", field_name)
    if not math.isfinite(value):
        raise ValidationError(f"{field_name}: expected a finite number, got {value!r}", field_name)
    return value


def parse_range(value: Any, field_name: str) -> RangeValues:
    """Normalize a range to a tuple of one or two numbers.

    A bare number is treated as a single-element (fixed) range.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (parse_number(value, field_name),)
    if not isinstance(value, (list, tuple)) or len(value) not in (1, 2):
        raise ValidationError(
            f"{field_name}: expected a number or a [min, max] pair, got {value!r}", field_name
        )
    return tuple(parse_number(v, field_name) for v in value)


@dataclass
class EventStep:
    """A single timed stimulus action in a correction or affirmation sequence.

    Attributes:
        type: Stimulus modality
        start_delay: Earliest start offset from the triggering event (ms)
        end_delay: Latest end offset from the triggering event (ms)
        time_range_type: How the duration resolves from time_range
        time_range: Duration range, (value,) or (min, max)
        strength_range_type: How the intensity resolves from strength_range
        strength_range: Intensity range in device units, (value,) or (min, max)
    """

    type: EventType
    start_delay: Number = 0
    end_delay: Number = 0
    time_range_type: RangeType = RangeType.FIXED
    time_range: RangeValues = (0,)
    strength_range_type: RangeType = RangeType.FIXED
    strength_range: RangeValues = (0,)

    def __post_init__(self):
        # Raw names, ints and bare numbers are accepted; undeclared variants are not
        self.type = parse_enum(EventType, self.type, "type")
        self.start_delay = parse_number(self.start_delay, "start_delay")
        self.end_delay = parse_number(self.end_delay, "end_delay")
        self.time_range_type = parse_enum(RangeType, self.time_range_type, "time_range_type")
        self.time_range = parse_range(self.time_range, "time_range")
        self.strength_range_type = parse_enum(
            RangeType, self.strength_range_type, "strength_range_type"
        )
        self.strength_range = parse_range(self.strength_range, "strength_range")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EventStep":
        """Build a step from a plain mapping (e.g. parsed YAML or a form payload).

        Raises:
            ValidationError: On unknown keys, a missing type or malformed values
        """
        if isinstance(data, EventStep):
            return data
        if not isinstance(data, Mapping):
            raise ValidationError(f"event step must be a mapping, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValidationError(f"Unknown event step field(s): {', '.join(sorted(unknown))}")
        if "type" not in data:
            raise ValidationError("event step requires a 'type'", "type")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.name,
            "start_delay": self.start_delay,
            "end_delay": self.end_delay,
            "time_range_type": self.time_range_type.name,
            "time_range": list(self.time_range),
            "strength_range_type": self.strength_range_type.name,
            "strength_range": list(self.strength_range),
        }

    def __str__(self) -> str:
        return (
            f"{self.type.name}(time={self.time_range_type.name}{list(self.time_range)}, "
            f"strength={self.strength_range_type.name}{list(self.strength_range)})"
        )


@dataclass
class AppSettings:
    """The live behaviour configuration of the collar.

    Attributes:
        idle_period_min_ms: Shortest quiet window between actions
        idle_period_max_ms: Longest quiet window between actions
        action_period_min_ms: Shortest time budget for a reaction
        action_period_max_ms: Longest time budget for a reaction
        decibel_threshold_min: Lower edge of the triggering sound level band (dB)
        decibel_threshold_max: Upper edge of the triggering sound level band (dB)
        mic_sensitivity: Microphone gain step, one of MIC_SENSITIVITY_LEVELS
        alert_type: Warning signal given before a stimulus
        collar_min_shock: Lowest shock strength the device may use
        collar_max_shock: Highest shock strength the device may use
        collar_min_vibe: Lowest vibration strength the device may use
        collar_max_vibe: Highest vibration strength the device may use
        correction_steps: Steps executed, in order, on a detected violation
        affirmation_steps: Steps executed, in order, on positive reinforcement
    """

    idle_period_min_ms: Number = 5000
    idle_period_max_ms: Number = 30000
    action_period_min_ms: Number = 3000
    action_period_max_ms: Number = 5000
    decibel_threshold_min: Number = 80
    decibel_threshold_max: Number = 95
    mic_sensitivity: int = 27
    alert_type: AlertType = AlertType.NONE

    collar_min_shock: Number = 5
    collar_max_shock: Number = 75
    collar_min_vibe: Number = 5
    collar_max_vibe: Number = 100

    correction_steps: List[EventStep] = field(default_factory=list)
    affirmation_steps: List[EventStep] = field(default_factory=list)

    def __post_init__(self):
        for f in fields(self):
            setattr(self, f.name, parse_settings_field(f.name, getattr(self, f.name)))

    def steps(self, key: str) -> List[EventStep]:
        """Return the step sequence named by key (the live list)."""
        if key not in STEP_KEYS:
            raise ValidationError(
                f"Unknown step sequence {key!r} (expected one of {', '.join(STEP_KEYS)})", key
            )
        return getattr(self, key)

    def strength_bounds(self, event_type: EventType) -> Optional[Tuple[Number, Number]]:
        """Device strength limits for a modality, or None when it has no intensity."""
        if event_type is EventType.COLLAR_SHOCK:
            return self.collar_min_shock, self.collar_max_shock
        if event_type is EventType.COLLAR_VIBRATION:
            return self.collar_min_vibe, self.collar_max_vibe
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AppSettings":
        """Build settings from a mapping; missing keys take their defaults."""
        return cls(**parse_settings_fields(data))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.name
            elif f.name in STEP_KEYS:
                value = [step.to_dict() for step in value]
            data[f.name] = value
        return data


def parse_steps(value: Any, field_name: str) -> List[EventStep]:
    """Convert a sequence of steps or step mappings into a new list of EventStep."""
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{field_name}: expected a list of event steps", field_name)
    steps = []
    for index, step in enumerate(value):
        try:
            steps.append(EventStep.from_dict(step))
        except ValidationError as e:
            label = f"{field_name}[{index}]"
            raise ValidationError(f"{label}: {e}", f"{label}.{e.field}".rstrip(".")) from e
    return steps


def parse_settings_field(name: str, value: Any) -> Any:
    """Coerce one settings field to its typed value."""
    if name == "alert_type":
        return parse_enum(AlertType, value, name)
    if name in STEP_KEYS:
        return parse_steps(value, name)
    return parse_number(value, name)


def parse_settings_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Coerce a (possibly partial) settings mapping into typed field values.

    Only structural conversion happens here; cross-field invariants are
    checked by acoustic_collar.validation.

    Raises:
        ValidationError: On unknown keys or values of the wrong shape
    """
    if not isinstance(data, Mapping):
        raise ValidationError(f"settings must be a mapping, got {type(data).__name__}")

    known = {f.name for f in fields(AppSettings)}
    unknown = set(data) - known
    if unknown:
        raise ValidationError(f"Unknown settings field(s): {', '.join(sorted(unknown))}")

    return {name: parse_settings_field(name, value) for name, value in data.items()}
