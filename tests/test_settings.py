"""Tests for user settings loading and merging."""

import json

from core.settings import DEFAULTS, Settings


def test_missing_file_is_created_with_defaults(tmp_path):
    path = tmp_path / "lambvoice" / "settings.json"
    settings = Settings(path)
    assert path.exists()
    assert json.loads(path.read_text()) == DEFAULTS
    assert settings.voice_count == 4
    assert settings.get("audio", "sample_rate") == 44100


def test_partial_file_merges_with_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"voices": {"count": 2}, "unknown": {"x": 1}}))
    settings = Settings(path)
    assert settings.voice_count == 2
    assert settings.get("voices", "labels") == ["A", "B", "C", "D"]
    assert settings.get("controls", "drag_pixels") == 200


def test_corrupt_file_falls_back_to_defaults(tmp_path, capsys):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    settings = Settings(path)
    assert settings.voice_count == 4
    assert "[SETTINGS]" in capsys.readouterr().out


def test_save_round_trip(tmp_path):
    path = tmp_path / "settings.json"
    settings = Settings(path)
    settings.set("video", "ui_scale", 1.5)
    settings.save()
    assert Settings(path).get("video", "ui_scale") == 1.5


def test_voice_labels_fall_back_to_numbers(tmp_path):
    settings = Settings(tmp_path / "settings.json")
    assert settings.voice_label(0) == "A"
    assert settings.voice_label(5) == "6"


def test_default_pitch_accepts_note_names(tmp_path, capsys):
    settings = Settings(tmp_path / "settings.json")
    assert settings.default_pitch == 48
    settings.set("voices", "default_pitch", "C4")
    assert settings.default_pitch == 60
    settings.set("voices", "default_pitch", "nonsense")
    assert settings.default_pitch == 48
    assert "[SETTINGS]" in capsys.readouterr().out


def test_invalid_counts_are_sanitized(tmp_path):
    settings = Settings(tmp_path / "settings.json")
    settings.set("voices", "count", 0)
    settings.set("controls", "drag_pixels", -10)
    assert settings.voice_count == 1
    assert settings.drag_pixels == 200
