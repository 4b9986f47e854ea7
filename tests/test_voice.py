"""Tests for the voice controller: mode switches, re-snap, transpose and sub."""

import pytest

from core.constants import (
    MIN_PITCH, MAX_PITCH, MIN_FREQUENCY, MAX_FREQUENCY, SCALES,
    pitch_to_frequency, pitch_to_name, generate_lattice,
)
from core.knob import Taper
from core.models import GlobalSettings, PitchMode, VoiceState
from core.voice import (
    VoiceController, nearest_lattice_index, safe_frequency,
    to_free, to_scaled, resnap, resolve_output,
)


# ---------------------------------------------------------------------------
# Pure functions
# ---------------------------------------------------------------------------
def test_nearest_lattice_index_ties_go_low():
    assert nearest_lattice_index([24, 26, 28], 25) == 1
    assert nearest_lattice_index([24, 26, 28], 27) == 2
    assert nearest_lattice_index([24, 26, 28], 28) == 3
    assert nearest_lattice_index([24, 26, 28], 90) == 3
    assert nearest_lattice_index([24], 60) == 1


def test_safe_frequency(capsys):
    assert safe_frequency(0.0) == MIN_FREQUENCY
    assert "[VOICE]" in capsys.readouterr().out
    assert safe_frequency(5000.0) == MAX_FREQUENCY
    assert safe_frequency(440.0) == 440.0


def test_to_free_keeps_the_sounding_pitch():
    state = VoiceState(raw_index=8, pitch=31)
    free = to_free(state)
    assert free.mode == PitchMode.FREE
    assert free.frequency_hz == pytest.approx(pitch_to_frequency(31))
    assert free.raw_index == 8


def test_to_scaled_rounds_then_snaps():
    lattice = generate_lattice("ionian")
    state = VoiceState(mode=PitchMode.FREE, frequency_hz=pitch_to_frequency(25.2))
    scaled = to_scaled(state, lattice)
    assert scaled.mode == PitchMode.SCALED
    # 25 is equidistant from 24 and 26
    assert scaled.pitch == 24
    assert scaled.raw_index == 1


def test_resnap_searches_by_pitch_not_index():
    state = VoiceState(raw_index=4, pitch=27)
    snapped = resnap(state, generate_lattice("ionian"))
    assert snapped.pitch == 26
    assert snapped.raw_index == 2


def test_resolve_output_scaled_clamps_to_range():
    state = VoiceState(raw_index=61, pitch=84)
    out = resolve_output(state, GlobalSettings(root=11))
    assert out.pitch == 84
    assert out.sub_pitch == 72


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------
def test_fresh_voice_sits_on_default_pitch():
    voice = VoiceController(0)
    assert voice.state.pitch == 48
    assert voice.state.raw_index == 25
    assert pitch_to_name(voice.output.pitch) == "C3"
    assert voice.output.frequency == pytest.approx(130.8128, abs=1e-4)


def test_construction_pushes_nothing(backend):
    VoiceController(0, backend=backend)
    assert backend.calls == []


def test_ionian_lowest_member(backend):
    voice = VoiceController(0, backend=backend, settings=GlobalSettings("ionian"))
    out = voice.set_index(1)
    assert out.pitch == 24
    assert pitch_to_name(out.pitch) == "C1"
    assert out.frequency == pytest.approx(32.70, abs=0.01)
    assert out.sub_pitch == 12
    assert out.sub_frequency == pytest.approx(16.35, abs=0.01)


def test_push_order_is_frequency_then_sub(backend):
    voice = VoiceController(2, backend=backend, settings=GlobalSettings("ionian"))
    out = voice.set_index(3)
    assert backend.calls == [
        ("set_frequency", 2, out.frequency),
        ("set_sub_frequency", 2, out.sub_frequency),
    ]


def test_free_mode_fractional_transpose(backend):
    voice = VoiceController(0, backend=backend, settings=GlobalSettings("free", root=4.75))
    out = voice.set_frequency(440.0)
    expected = 440.0 * 2 ** (4.75 / 12)
    assert out.frequency == pytest.approx(expected)
    assert out.sub_frequency == pytest.approx(expected / 2)
    assert out.pitch is None
    assert backend.last("set_frequency") == pytest.approx(expected)


def test_free_mode_clamps_after_transpose():
    voice = VoiceController(0, settings=GlobalSettings("free", root=11))
    out = voice.set_frequency(MAX_FREQUENCY)
    assert out.frequency == pytest.approx(MAX_FREQUENCY)
    assert out.sub_frequency == pytest.approx(MAX_FREQUENCY / 2)


def test_free_mode_replaces_non_positive_frequency(capsys):
    voice = VoiceController(0, settings=GlobalSettings("free"))
    out = voice.set_frequency(-5.0)
    assert out.frequency == pytest.approx(MIN_FREQUENCY)
    assert "[VOICE]" in capsys.readouterr().out


def test_scaled_root_clamps_at_top():
    voice = VoiceController(0, settings=GlobalSettings("chromatic", root=11))
    out = voice.set_index(61)
    assert voice.state.pitch == 84
    assert out.pitch == 84


def test_root_transposes_scaled_pitch():
    voice = VoiceController(0, settings=GlobalSettings("ionian", root=3))
    out = voice.set_index(1)
    assert voice.state.pitch == 24
    assert out.pitch == 27
    assert pitch_to_name(out.pitch) == "D#1"


def test_set_index_clamps_to_lattice():
    voice = VoiceController(0, settings=GlobalSettings("pentatonic"))
    voice.set_index(500)
    assert voice.state.raw_index == len(generate_lattice("pentatonic"))
    voice.set_index(-3)
    assert voice.state.raw_index == 1


def test_sub_is_an_octave_below_in_every_scale():
    for scale in SCALES:
        for root in (0, 5, 11):
            voice = VoiceController(0, settings=GlobalSettings(scale, root=root))
            for index in range(1, len(voice.lattice) + 1):
                out = voice.set_index(index)
                assert MIN_PITCH <= out.pitch <= MAX_PITCH
                assert out.sub_pitch == out.pitch - 12
                assert out.sub_frequency == pytest.approx(out.frequency / 2)


def test_scaled_free_scaled_round_trip():
    voice = VoiceController(0, settings=GlobalSettings("ionian"))
    voice.set_index(5)
    before = voice.state

    out = voice.sync(GlobalSettings("free"))
    assert voice.state.mode == PitchMode.FREE
    assert out.frequency == pytest.approx(pitch_to_frequency(31))

    voice.sync(GlobalSettings("ionian"))
    assert voice.state.pitch == before.pitch
    assert voice.state.raw_index == before.raw_index


def test_scale_change_resnaps_by_pitch():
    voice = VoiceController(0)
    voice.set_index(13)
    assert voice.state.pitch == 36
    voice.sync(GlobalSettings("pentatonic"))
    assert voice.state.pitch == 36
    assert voice.state.raw_index == 6


def test_mode_switch_rebuilds_pitch_knob():
    voice = VoiceController(0)
    assert voice.pitch_knob.spec.taper == Taper.LINEAR
    voice.sync(GlobalSettings("free"))
    assert voice.pitch_knob.spec.taper == Taper.LOG
    assert voice.pitch_knob.spec.unit == "Hz"
    assert voice.pitch_knob.value == pytest.approx(voice.state.frequency_hz)


def test_small_pitch_drags_accumulate():
    voice = VoiceController(0, drag_pixels=200)
    assert voice.state.raw_index == 25
    voice.drag(1)
    assert voice.state.pitch == 48
    voice.drag(1)
    assert voice.state.pitch == 49


def test_drag_with_new_settings_resyncs_first():
    voice = VoiceController(0)
    voice.drag(0, settings=GlobalSettings("whole"))
    assert voice.lattice == generate_lattice("whole")
    assert voice.state.pitch == 48


def test_pitch_reset_is_disabled(backend):
    voice = VoiceController(0, backend=backend)
    voice.set_index(30)
    backend.calls.clear()
    out = voice.reset_pitch()
    assert out.pitch == 53
    assert backend.calls == []


def test_wave_and_sub_level_are_clamped_and_pushed(backend):
    voice = VoiceController(1, backend=backend)
    assert voice.set_wave(150.0) == 100.0
    assert voice.set_sub_level(-1.0) == 0.0
    assert backend.last("set_wave", 1) == 100.0
    assert backend.last("set_sub_level", 1) == 0.0
    assert voice.state.wave == 100.0


def test_push_all_sends_every_parameter(backend):
    voice = VoiceController(0, backend=backend)
    voice.push_all()
    assert [name for name, _, _ in backend.calls] == [
        "set_frequency", "set_sub_frequency", "set_wave", "set_sub_level",
    ]


def test_restore_conforms_saved_state(backend):
    voice = VoiceController(0, backend=backend)
    saved = VoiceState(mode=PitchMode.FREE, frequency_hz=pitch_to_frequency(40), wave=20.0)
    out = voice.restore(saved, GlobalSettings("chromatic"))
    assert voice.state.mode == PitchMode.SCALED
    assert out.pitch == 40
    assert backend.last("set_wave") == 20.0
