"""Tests for knob display text."""

from core.models import GlobalSettings
from core.voice import VoiceController
from ui.labels import pitch_label, wave_label, sub_level_label


def test_scaled_voice_shows_note_name():
    voice = VoiceController(0, settings=GlobalSettings("ionian", root=3))
    assert pitch_label(voice.set_index(1)) == "D#1"


def test_free_voice_shows_hertz():
    voice = VoiceController(0, settings=GlobalSettings("free", root=4.75))
    out = voice.set_frequency(440.0)
    assert pitch_label(out) == f"{440.0 * 2 ** (4.75 / 12):.2f} Hz"


def test_wave_and_sub_text():
    assert wave_label(49.6) == "50"
    assert sub_level_label(0.5) == "0.50"
