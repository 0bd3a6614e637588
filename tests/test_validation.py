"""Tests for settings and event step invariants."""

import dataclasses

import pytest

from acoustic_collar.exceptions import ValidationError
from acoustic_collar.models import AlertType, AppSettings, EventStep, EventType, RangeType
from acoustic_collar.validation import validate_event_step, validate_range, validate_settings


def vibration(strength=(10, 40), **overrides) -> EventStep:
    step = EventStep(
        type=EventType.COLLAR_VIBRATION,
        start_delay=0,
        end_delay=500,
        time_range_type=RangeType.FIXED,
        time_range=(200,),
        strength_range_type=RangeType.RANDOM,
        strength_range=strength,
    )
    return dataclasses.replace(step, **overrides)


def test_defaults_are_valid():
    validate_settings(AppSettings())


@pytest.mark.parametrize(
    "low,high",
    [
        ("idle_period_min_ms", "idle_period_max_ms"),
        ("action_period_min_ms", "action_period_max_ms"),
        ("decibel_threshold_min", "decibel_threshold_max"),
        ("collar_min_shock", "collar_max_shock"),
        ("collar_min_vibe", "collar_max_vibe"),
    ],
)
def test_inverted_pairs_are_rejected(low, high):
    settings = AppSettings()
    setattr(settings, low, getattr(settings, high) + 1)
    with pytest.raises(ValidationError) as exc:
        validate_settings(settings)
    assert exc.value.field in (low, high)


def test_equal_min_and_max_are_allowed():
    validate_settings(AppSettings(idle_period_min_ms=10000, idle_period_max_ms=10000))


@pytest.mark.parametrize("value", [25, 30, 27.0, True, "27"])
def test_mic_sensitivity_outside_set_is_rejected(value):
    with pytest.raises(ValidationError):
        validate_settings(AppSettings(mic_sensitivity=value))


@pytest.mark.parametrize("value", [26, 27, 28, 29])
def test_mic_sensitivity_levels_are_accepted(value):
    validate_settings(AppSettings(mic_sensitivity=value))


def test_alert_type_must_be_enum_member():
    settings = AppSettings()
    settings.alert_type = "SIREN"
    with pytest.raises(ValidationError):
        validate_settings(settings)


def test_nan_cannot_slip_past_ordered_pairs():
    settings = AppSettings()
    settings.idle_period_min_ms = float("nan")
    with pytest.raises(ValidationError):
        validate_settings(settings)


def test_nan_range_value_rejected():
    with pytest.raises(ValidationError):
        validate_range("strength_range", RangeType.RANDOM, (float("nan"), 40))


def test_collar_bounds_limited_to_device_scale():
    with pytest.raises(ValidationError):
        validate_settings(AppSettings(collar_max_vibe=101))
    with pytest.raises(ValidationError):
        validate_settings(AppSettings(collar_min_shock=-1))


def test_single_value_range_requires_fixed():
    validate_range("time_range", RangeType.FIXED, (200,))
    with pytest.raises(ValidationError):
        validate_range("time_range", RangeType.RANDOM, (200,))


def test_pair_range_must_be_ordered():
    validate_range("strength_range", RangeType.GRADED, (10, 10))
    with pytest.raises(ValidationError):
        validate_range("strength_range", RangeType.GRADED, (40, 10))


def test_negative_range_values_are_rejected():
    with pytest.raises(ValidationError):
        validate_range("time_range", RangeType.FIXED, (-5,))


def test_step_within_vibration_bounds():
    validate_event_step(vibration(), AppSettings())


def test_step_strength_outside_bounds_is_rejected():
    with pytest.raises(ValidationError) as exc:
        validate_event_step(vibration(strength=(2, 40)), AppSettings(), label="correction_steps[0]")
    assert exc.value.field == "correction_steps[0].strength_range"


def test_shock_step_uses_shock_bounds():
    shock = vibration(type=EventType.COLLAR_SHOCK, strength=(10, 90))
    with pytest.raises(ValidationError):
        validate_event_step(shock, AppSettings())
    validate_event_step(vibration(strength=(10, 90)), AppSettings())


def test_beep_strength_is_not_bounded():
    beep = EventStep(EventType.COLLAR_BEEP, time_range=(300,))
    validate_event_step(beep, AppSettings(collar_min_vibe=50))


def test_step_delays_must_be_ordered():
    with pytest.raises(ValidationError):
        validate_event_step(vibration(start_delay=600, end_delay=500), AppSettings())


def test_malformed_time_range_reports_step_label():
    step = vibration(time_range_type=RangeType.RANDOM)
    with pytest.raises(ValidationError) as exc:
        validate_event_step(step, AppSettings(), label="affirmation_steps[1]")
    assert exc.value.field == "affirmation_steps[1].time_range"


def test_settings_check_steps_against_own_bounds():
    settings = AppSettings(correction_steps=[vibration(strength=(10, 40))])
    validate_settings(settings)
    settings.collar_min_vibe = 20
    with pytest.raises(ValidationError):
        validate_settings(settings)


def test_alert_type_values_valid():
    for alert in AlertType:
        validate_settings(AppSettings(alert_type=alert))
