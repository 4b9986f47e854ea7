"""Tests for the knob model: tapers, steps, quantizers, drag accumulation."""

import math

import pytest

from core.constants import clamp, round_half_up
from core.knob import Knob, KnobSpec, Taper


def index_knob(size=8, drag_pixels=200):
    return Knob(
        KnobSpec("index", 1, size),
        quantize=lambda raw: clamp(round_half_up(raw), 1, size),
        drag_pixels=drag_pixels,
    )


# ---------------------------------------------------------------------------
# Spec validation
# ---------------------------------------------------------------------------
def test_spec_defaults():
    spec = KnobSpec("sub_level", 0.0, 1.0)
    assert spec.display_name == "Sub Level"
    assert spec.default == 0.0
    assert spec.taper == Taper.LINEAR
    assert not spec.is_fixed


def test_spec_rejects_bad_ranges():
    with pytest.raises(ValueError):
        KnobSpec("x", 2.0, 1.0)
    with pytest.raises(ValueError):
        KnobSpec("x", 0.0, 100.0, taper=Taper.LOG)
    with pytest.raises(ValueError):
        KnobSpec("x", 0.0, 1.0, step=0)
    with pytest.raises(ValueError):
        KnobSpec("x", 0.0, 1.0, default=2.0)
    with pytest.raises(ValueError):
        KnobSpec("", 0.0, 1.0)


def test_knob_rejects_non_positive_drag_pixels():
    with pytest.raises(ValueError):
        Knob(KnobSpec("x", 0.0, 1.0), drag_pixels=0)


# ---------------------------------------------------------------------------
# Gestures
# ---------------------------------------------------------------------------
def test_linear_drag():
    knob = Knob(KnobSpec("level", 0.0, 1.0), drag_pixels=100)
    assert knob.drag(50).raw_value == pytest.approx(0.5)
    assert knob.drag(-25).raw_value == pytest.approx(0.25)


def test_drag_clamps_at_ends():
    knob = Knob(KnobSpec("level", 0.0, 1.0), drag_pixels=100)
    update = knob.drag(500)
    assert update.raw_value == 1.0
    assert update.position == 1.0
    assert knob.drag(-1000).raw_value == 0.0


def test_set_position_clamps():
    knob = Knob(KnobSpec("level", 0.0, 10.0))
    assert knob.set_position(1.5).raw_value == 10.0
    assert knob.set_position(-0.5).raw_value == 0.0


def test_log_taper_midpoint_is_geometric_mean():
    knob = Knob(KnobSpec("freq", 20.0, 20000.0, taper=Taper.LOG))
    assert knob.set_position(0.5).raw_value == pytest.approx(math.sqrt(20.0 * 20000.0))
    assert knob.set_position(0.0).raw_value == pytest.approx(20.0)
    assert knob.set_position(1.0).raw_value == pytest.approx(20000.0)


def test_log_taper_value_to_position():
    knob = Knob(KnobSpec("freq", 10.0, 1000.0, taper=Taper.LOG))
    assert knob.value_to_position(100.0) == pytest.approx(0.5)


def test_step_snaps_half_up():
    knob = Knob(KnobSpec("root", 0, 11, step=1))
    assert knob.set_position(0.5).raw_value == 6  # 5.5 -> 6
    assert knob.set_value(4.4).raw_value == 4


def test_step_snaps_to_multiples_not_offsets_from_min():
    knob = Knob(KnobSpec("x", 0.5, 3.0, step=1.0))
    assert knob.set_value(1.2).raw_value == 1.0
    assert knob.set_value(0.5).raw_value == 1.0
    assert knob.set_position(1.0).raw_value == 3.0
    assert knob.set_position(0.0).raw_value == 1.0


def test_step_snap_stays_inside_range():
    knob = Knob(KnobSpec("x", 0.5, 2.7, step=1.0))
    assert knob.set_value(2.7).raw_value == 2.0


def test_step_wider_than_range_leaves_value_continuous():
    knob = Knob(KnobSpec("x", 0.2, 0.8, step=1.0))
    assert knob.set_value(0.6).raw_value == pytest.approx(0.6)


def test_small_drags_accumulate_across_a_step():
    knob = Knob(KnobSpec("root", 0, 11, step=1), drag_pixels=200)
    for _ in range(4):
        assert knob.drag(2).raw_value == 0
    assert knob.drag(2).raw_value == 1


def test_quantizer_derives_from_raw_value():
    knob = index_knob(size=8)
    update = knob.set_position(0.5)
    assert update.raw_value == pytest.approx(4.5)
    assert update.quantized_value == 5
    assert knob.set_position(1.0).quantized_value == 8
    assert knob.set_position(0.0).quantized_value == 1


def test_no_quantizer_reports_none():
    knob = Knob(KnobSpec("level", 0.0, 1.0))
    assert knob.set_position(0.3).quantized_value is None


def test_fixed_knob_ignores_gestures():
    knob = Knob(KnobSpec("x", 5.0, 5.0))
    update = knob.set_position(0.7)
    assert update.raw_value == 5.0
    assert update.position == 0.0
    assert knob.drag(100).raw_value == 5.0


def test_single_member_index_knob():
    knob = index_knob(size=1)
    assert knob.drag(300).quantized_value == 1


# ---------------------------------------------------------------------------
# Reset / re-align
# ---------------------------------------------------------------------------
def test_reset_returns_to_default():
    knob = Knob(KnobSpec("wave", 0.0, 100.0, default=50.0))
    knob.set_position(1.0)
    update = knob.reset()
    assert update.raw_value == 50.0
    assert update.position == pytest.approx(0.5)


def test_reset_disabled_is_ignored():
    knob = Knob(KnobSpec("pitch", 1, 10, disable_reset=True))
    knob.set_position(1.0)
    assert knob.reset() is None
    assert knob.value == 10


def test_set_value_realigns_position():
    knob = index_knob(size=11)
    knob.set_value(6)
    assert knob.position == pytest.approx(0.5)
    assert knob.quantized_value == 6
