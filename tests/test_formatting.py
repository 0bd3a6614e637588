from acoustic_collar.formatting import (
    describe_step,
    format_milliseconds,
    format_percentage,
    format_seconds,
)
from acoustic_collar.models import EventStep, EventType, RangeType


def test_format_seconds_pluralizes():
    assert format_seconds(1) == "1 second"
    assert format_seconds(0) == "0 seconds"
    assert format_seconds(2.5) == "2.5 seconds"


def test_format_milliseconds():
    assert format_milliseconds(1000) == "1 second"
    assert format_milliseconds(30000) == "30 seconds"


def test_format_percentage_rounds_down():
    assert format_percentage(0.5) == "50%"
    assert format_percentage(0.999) == "99%"
    assert format_percentage(0.29) == "29%"
    assert format_percentage(1) == "100%"


def test_describe_vibration_step():
    step = EventStep(
        EventType.COLLAR_VIBRATION, 0, 500, RangeType.FIXED, (200,), RangeType.RANDOM, (10, 40)
    )
    assert describe_step(step) == (
        "vibration: 0 seconds to 0.5 seconds, time fixed 200, strength random 10-40"
    )


def test_describe_beep_step_omits_strength():
    step = EventStep(EventType.COLLAR_BEEP, 0, 1000, RangeType.GRADED, (100, 300))
    assert describe_step(step) == "beep: 0 seconds to 1 second, time graded 100-300"
