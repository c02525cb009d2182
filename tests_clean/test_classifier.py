from __future__ import annotations
import math
import pytest
from motion.pipeline.classifier import Direction, DirectionClassifier


def test_angle_boundaries():
    c = DirectionClassifier(acceleration_threshold=0.1, angle_low_threshold=0.5, angle_high_threshold=1.0)
    assert c.classify_angle(0.5) is Direction.HORIZONTAL
    assert c.classify_angle(0.4999) is Direction.HORIZONTAL
    assert c.classify_angle(0.7) is Direction.DIAGONAL
    assert c.classify_angle(1.0) is Direction.VERTICAL
    assert c.classify_angle(math.pi / 2) is Direction.VERTICAL


def test_vertical_energy_is_the_atan2_numerator():
    c = DirectionClassifier()
    assert c.transition(1.0, 0.0) is Direction.HORIZONTAL
    assert c.transition(0.0, 1.0) is Direction.VERTICAL
    assert c.transition(1.0, 1.0) is Direction.DIAGONAL


def test_below_threshold_requires_both_streams_quiet():
    c = DirectionClassifier(acceleration_threshold=0.14)
    assert c.transition(0.1, 0.1) is None
    assert c.transition(0.1, 0.2) is Direction.VERTICAL
    # equal to threshold is not below it
    assert c.transition(0.14, 0.0) is Direction.HORIZONTAL


def test_previous_label_has_no_effect_by_default():
    c = DirectionClassifier()
    assert c.transition(1.0, 0.0) is Direction.HORIZONTAL
    assert c.previous is Direction.HORIZONTAL
    assert c.transition(0.0, 0.0) is None
    assert c.previous is None


def test_hold_ticks_keeps_label_through_short_quiet_spells():
    c = DirectionClassifier(hold_ticks=2)
    assert c.transition(1.0, 0.0) is Direction.HORIZONTAL
    assert c.transition(0.0, 0.0) is Direction.HORIZONTAL
    assert c.transition(0.0, 0.0) is Direction.HORIZONTAL
    assert c.transition(0.0, 0.0) is None
    assert c.transition(0.0, 0.0) is None
    assert c.transition(0.0, 1.0) is Direction.VERTICAL
    # an active tick resets the quiet counter
    assert c.transition(0.0, 0.0) is Direction.VERTICAL


def test_direction_encodings():
    assert [d.digit for d in (Direction.VERTICAL, Direction.HORIZONTAL, Direction.DIAGONAL)] == [0, 1, 2]
    assert [d.char for d in (Direction.VERTICAL, Direction.HORIZONTAL, Direction.DIAGONAL)] == ["V", "H", "D"]
    assert Direction.HORIZONTAL.payload == b"1"
    assert Direction.from_payload(b"2") is Direction.DIAGONAL
    assert Direction.from_char("h") is Direction.HORIZONTAL
    assert Direction.from_digit(0) is Direction.VERTICAL
    with pytest.raises(ValueError):
        Direction.from_digit(7)
    with pytest.raises(ValueError):
        Direction.from_payload(b"x")
    with pytest.raises(ValueError):
        Direction.from_char("Q")
