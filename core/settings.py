"""
User settings stored at ~/.lambvoice/settings.json.

Defaults are grouped by category; categories found in the file override
the matching defaults key by key, so new settings appear automatically.
"""
import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional

from core.constants import DEFAULT_PITCH, DEFAULT_SCALE, DEFAULT_WAVE, name_to_pitch

DEFAULT_SETTINGS_PATH = Path.home() / ".lambvoice" / "settings.json"

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "audio": {
        "sample_rate": 44100,
        "buffer_size": 512,
        "output_device": "Default",
        "master_volume_db": -8.0,
    },
    "voices": {
        "count": 4,
        "labels": ["A", "B", "C", "D"],
        "default_pitch": DEFAULT_PITCH,  # MIDI number or note name ("C3")
        "default_wave": DEFAULT_WAVE,
        "default_sub_level": 0.0,
    },
    "controls": {
        "drag_pixels": 200,
        "default_scale": DEFAULT_SCALE,
    },
    "video": {
        "ui_scale": 1.0,
    },
}


class Settings:
    """Loads, merges and saves user settings."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else DEFAULT_SETTINGS_PATH
        self.settings = self._load_settings()

    def _load_settings(self) -> Dict[str, Any]:
        """Load settings from config file, creating it with defaults if missing."""
        defaults = copy.deepcopy(DEFAULTS)

        if self.path.exists():
            try:
                with open(self.path, 'r') as f:
                    loaded = json.load(f)
                # Merge with defaults (in case new settings added)
                for category in defaults:
                    if isinstance(loaded.get(category), dict):
                        defaults[category].update(loaded[category])
            except Exception as e:
                print(f"[SETTINGS] Failed to load settings: {e}")
            return defaults

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w') as f:
                json.dump(defaults, f, indent=2)
            print("[SETTINGS] Created new settings file with defaults")
        except Exception as e:
            print(f"[SETTINGS] Failed to save default settings: {e}")
        return defaults

    def save(self):
        """Save settings to config file."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w') as f:
                json.dump(self.settings, f, indent=2)
        except Exception as e:
            print(f"[SETTINGS] Failed to save settings: {e}")

    def get(self, category: str, key: str) -> Any:
        return self.settings[category][key]

    def set(self, category: str, key: str, value: Any):
        self.settings.setdefault(category, {})[key] = value

    # ── Typed accessors ──────────────────────────────────────────

    @property
    def voice_count(self) -> int:
        return max(1, int(self.get("voices", "count")))

    def voice_label(self, voice_id: int) -> str:
        labels = self.get("voices", "labels")
        if voice_id < len(labels):
            return str(labels[voice_id])
        return str(voice_id + 1)

    @property
    def default_pitch(self) -> int:
        """Default voice pitch; accepts a MIDI number or a note name."""
        value = self.get("voices", "default_pitch")
        if isinstance(value, str):
            try:
                return name_to_pitch(value)
            except ValueError as e:
                print(f"[SETTINGS] {e}, using {DEFAULT_PITCH}")
                return DEFAULT_PITCH
        return int(value)

    @property
    def drag_pixels(self) -> float:
        value = float(self.get("controls", "drag_pixels"))
        return value if value > 0 else float(DEFAULTS["controls"]["drag_pixels"])
